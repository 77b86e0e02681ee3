import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./invoices.db")
    CREATE_TABLES = bool(data.get("CREATE_TABLES", True))
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))

    # Invoice lifecycle
    TRANSITION_POLICY = data.get("TRANSITION_POLICY", "strict")  # strict | permissive
    REPOSITORY_TIMEOUT_SECONDS = float(data.get("REPOSITORY_TIMEOUT_SECONDS", 10))
    ISSUER_TENANT_ID = data.get("ISSUER_TENANT_ID", "system-admin")
    ISSUER_BANK_INFO = data.get("ISSUER_BANK_INFO", None)  # bank_name, branch_name, account_type, ...
    NOTIFICATION_WEBHOOK = data.get("NOTIFICATION_WEBHOOK", None)

    # Invoice batch (day of month for each routine)
    BATCH_ENABLED = bool(data.get("BATCH_ENABLED", True))
    BATCH_CHECK_INTERVAL_SECONDS = data.get("BATCH_CHECK_INTERVAL_SECONDS", 3600)
    INVOICE_GENERATION_DAY = data.get("INVOICE_GENERATION_DAY", 10)
    UNPAID_REMINDER_DAY = data.get("UNPAID_REMINDER_DAY", 20)
    ISSUED_REMINDER_DAY = data.get("ISSUED_REMINDER_DAY", 5)
