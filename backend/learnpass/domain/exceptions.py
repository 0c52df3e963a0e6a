"""Domain exceptions, independent of any framework."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class DuplicateEntityError(Exception):
    """Raised when attempting to create a duplicate entity."""

    def __init__(self, entity_type: str, field: str, value: str):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(f"{entity_type} with {field}='{value}' already exists")


class WorkflowError(Exception):
    """Base class for every failure that stops a workflow.

    ``subsystem`` is the fixed tag reported to the caller as ``details``.
    ``http_status`` is the status the envelope is returned with.
    """

    http_status = 500

    def __init__(self, message: str, subsystem: str = "workflow"):
        self.message = message
        self.subsystem = subsystem
        super().__init__(message)


class ValidationError(WorkflowError):
    """A required input is missing or malformed. Nothing was written."""

    http_status = 400

    def __init__(self, message: str, subsystem: str = "validation"):
        super().__init__(message, subsystem)


class UnknownActionError(ValidationError):
    """The action tag does not name a known workflow."""

    def __init__(self, action: str | None):
        self.action = action
        super().__init__(f"Unknown action: {action}", subsystem="routing")


class AuthenticityError(WorkflowError):
    """The payment callback signature did not match."""

    def __init__(self, message: str = "Invalid payment signature"):
        super().__init__(message, subsystem="signature")


class UpstreamError(WorkflowError):
    """Raised when the payment gateway rejects a request.

    Provider-agnostic; carries the gateway's own message where it sent one.
    """

    def __init__(self, provider: str, status_code: int, message: str):
        self.provider = provider
        self.status_code = status_code
        super().__init__(message, subsystem="gateway")


class StorageFault(WorkflowError):
    """A write on the critical path failed. Earlier steps stay committed."""

    def __init__(self, message: str, subsystem: str = "storage"):
        super().__init__(message, subsystem)


class ConfigurationError(WorkflowError):
    """Required configuration or reference data is absent."""

    def __init__(self, message: str, subsystem: str = "configuration"):
        super().__init__(message, subsystem)
