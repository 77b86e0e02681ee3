import logging
import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from invoice_lifecycle.api.error import register_error_handlers
from invoice_lifecycle.api.routes import batch, billing_profiles, invoices, notifications
from invoice_lifecycle.app.services.keyed_lock import KeyedLock
from invoice_lifecycle.depends import init_models

logger = logging.getLogger(__name__)


def create_app(config) -> FastAPI:
    """
    Build the invoice lifecycle API

    Args:
        config: ApplicationConfig (or any object with the same attributes)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if config.CREATE_TABLES:
            await init_models()
        yield

    app = FastAPI(
        title="Invoice Lifecycle Service",
        description="Invoice states, transitions, batch generation and reminders",
        version="0.1.0",
        lifespan=lifespan,
    )
    # One lock registry per process; shared by every request and the batch
    app.state.locks = KeyedLock()

    register_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if config.ENABLE_LOGGING_MIDDLEWARE:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            start = time.time()
            response = await call_next(request)
            elapsed_ms = int((time.time() - start) * 1000)
            logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms}ms)")
            return response

    @app.get("/health", tags=["health"])
    async def health_check() -> dict:
        return {"status": "healthy"}

    app.include_router(invoices.router, prefix=config.API_PREFIX)
    app.include_router(notifications.router, prefix=config.API_PREFIX)
    app.include_router(billing_profiles.router, prefix=config.API_PREFIX)
    app.include_router(batch.router, prefix=config.API_PREFIX)

    return app
