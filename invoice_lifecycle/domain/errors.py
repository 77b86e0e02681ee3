"""Domain Errors

Exception taxonomy raised by the repository, the transition validator and
the batch processor. Each error carries a stable ``code`` that use cases
copy into their Result and the API maps onto an HTTP status.
"""

from typing import Optional


class InvoiceLifecycleError(Exception):
    """Base class for all invoice lifecycle errors"""

    code = "INVOICE_LIFECYCLE_ERROR"

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.reason = reason


class ValidationError(InvoiceLifecycleError):
    """Malformed invoice draft, patch or billing profile"""

    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str):
        super().__init__(f"Invalid {field}: {message}", reason=f"field={field}")
        self.field = field


class NotFoundError(InvoiceLifecycleError):
    """Operation referenced an unknown entity id"""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(
            f"{entity.capitalize()} with ID {entity_id} not found",
            reason=f"{entity}_id={entity_id}",
        )
        self.code = f"{entity.upper()}_NOT_FOUND"
        self.entity = entity
        self.entity_id = entity_id


class InvalidTransitionError(InvoiceLifecycleError):
    """Requested status change is not reachable under the active policy"""

    code = "INVALID_TRANSITION"

    def __init__(self, current, target, policy_name: str = "strict"):
        current_value = getattr(current, "value", current)
        target_value = getattr(target, "value", target)
        super().__init__(
            f"Cannot transition invoice from {current_value} to {target_value}",
            reason=f"policy={policy_name}",
        )
        self.current = current
        self.target = target


class DuplicateGenerationError(InvoiceLifecycleError):
    """An invoice already exists for the customer and billing period.

    Raised and swallowed inside monthly generation; never reaches callers.
    """

    code = "INVOICE_ALREADY_EXISTS"


class PersistenceError(InvoiceLifecycleError):
    """Storage collaborator failed or timed out"""

    code = "PERSISTENCE_ERROR"


class ConcurrentUpdateError(InvoiceLifecycleError):
    """Invoice was changed by another writer since it was read"""

    code = "CONCURRENT_UPDATE"

    def __init__(self, invoice_id: str, expected_version: int):
        super().__init__(
            f"Invoice {invoice_id} was modified concurrently",
            reason=f"expected_version={expected_version}",
        )
        self.invoice_id = invoice_id
        self.expected_version = expected_version
