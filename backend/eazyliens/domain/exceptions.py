"""Domain-specific exceptions — framework-independent."""


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


class InvalidValueError(Exception):
    """Raised when a value is rejected before anything is written."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class PermissionDeniedError(Exception):
    """Raised when the caller's role lacks the capability for an action."""

    def __init__(self, role: str, capability: str):
        self.role = role
        self.capability = capability
        super().__init__(f"Role '{role}' is not allowed to {capability.lower().replace('_', ' ')}")


class RemoteOperationError(Exception):
    """Raised by the grid client when the backend rejects or fails a call.

    Covers both non-2xx responses and transport errors (status_code 0).
    """

    def __init__(self, operation: str, status_code: int, message: str):
        self.operation = operation
        self.status_code = status_code
        self.message = message
        super().__init__(f"[{operation}] {status_code}: {message}")
