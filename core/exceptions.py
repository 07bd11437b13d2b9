"""
Custom Exception Classes

Provides specific exception types for the goal, membership and
achievement services. Views map each kind to an HTTP status via
core.utils.error_handlers.handle_service_errors.
"""


class WellnessException(Exception):
    """Base exception for all service-layer errors"""
    pass


class ValidationError(WellnessException):
    """Raised when input is invalid for the requested operation"""
    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"Validation error for '{field}': {message}")


class NotFoundError(WellnessException):
    """Raised when a referenced entity does not exist"""
    pass


class TaskNotFoundError(NotFoundError):
    """Raised when a task does not exist"""
    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task '{task_id}' not found")


class UserNotFoundError(NotFoundError):
    """Raised when a user cannot be resolved by id or username"""
    def __init__(self, identifier):
        self.identifier = identifier
        super().__init__(f"User '{identifier}' not found")


class UnauthorizedError(WellnessException):
    """Raised when the actor lacks the owner/collaborator role for an action"""
    def __init__(self, action: str, resource: str = 'this task'):
        self.action = action
        self.resource = resource
        super().__init__(f"Not authorized to {action} {resource}")


class InvalidStateError(WellnessException):
    """Raised when a membership transition is not valid from the current state"""
    pass


class ConflictError(WellnessException):
    """Raised when a concurrent update could not be applied; callers may retry"""
    def __init__(self, message: str, details: dict = None):
        self.details = details or {}
        super().__init__(message)
