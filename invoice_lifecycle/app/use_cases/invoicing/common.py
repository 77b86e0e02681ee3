from invoice_lifecycle.domain.errors import InvoiceLifecycleError
from invoice_lifecycle.libs.result import Error


def to_error(error: InvoiceLifecycleError) -> Error:
    """Copy a domain error into a Result Error"""
    return Error(code=error.code, message=error.message, reason=error.reason)
