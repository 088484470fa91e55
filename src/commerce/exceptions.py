"""Error taxonomy of the commerce engine.

Business-rule rejections derive from protean's ``ValidationError`` and
lookups that miss derive from ``ObjectNotFoundError``, so the protean
FastAPI exception handlers map them to 400 and 404 responses.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class ValidationFailed(ValidationError):
    """A business rule or payload check rejected the request."""

    field = "_entity"

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        super().__init__({field or self.field: [message]})

    def __str__(self):
        return self.message


class InvalidTransition(ValidationFailed):
    """The order state machine does not allow the requested status."""

    field = "status"

    def __init__(self, current_status: str, attempted_status: str, allowed: list[str] | tuple[str, ...]):
        self.current_status = current_status
        self.attempted_status = attempted_status
        self.allowed = list(allowed)
        allowed_text = ", ".join(self.allowed) if self.allowed else "none"
        super().__init__(f"Invalid transition: {current_status} → {attempted_status}. Allowed: {allowed_text}")


class InsufficientStock(ValidationFailed):
    """A stock mutation would leave a variant short."""

    field = "stock"

    def __init__(self, variant_id: str, available: int, requested: int, message: str | None = None):
        self.variant_id = variant_id
        self.available = available
        self.requested = requested
        super().__init__(message or f"Insufficient stock. Available: {available}")


class UnknownActionType(ValidationFailed):
    """No handler is registered for the action type."""

    field = "type"

    def __init__(self, action_type: str):
        self.action_type = action_type
        super().__init__(f"Unknown action type: {action_type}")


class NotFound(ObjectNotFoundError):
    """An entity does not exist within the caller's tenant."""

    def __init__(self, entity: str, identifier):
        self.entity = entity
        self.identifier = identifier
        self.message = f"{entity} {identifier} not found"
        super().__init__(self.message)

    def __str__(self):
        return self.message


class PersistenceError(Exception):
    """The underlying store failed to read or write."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
