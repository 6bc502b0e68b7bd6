# medicaledu/core/domain/exceptions.py
class DomainError(Exception):
    """Base class for all domain-level exceptions."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

# --- Validation Errors ---

class DomainValidationError(DomainError):
    """Raised when an argument violates an entity or value-object invariant."""

# --- Process/State Errors ---

class InvalidOperationError(DomainError):
    """Raised when an operation is not allowed in the aggregate's current state."""

# --- Entity Not Found Errors ---

class EntityNotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""
    def __init__(self, entity: str, entity_id: object):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with ID {entity_id} not found.")
