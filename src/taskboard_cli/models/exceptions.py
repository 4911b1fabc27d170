"""Exception taxonomy shared by repositories, services and commands."""


class TaskboardError(Exception):
    """Base exception for all Taskboard errors."""


class AuthError(TaskboardError):
    """Raised when the bearer credential is missing or invalid."""


class NotFoundError(TaskboardError):
    """Raised when a task does not exist or is not owned by the caller."""


class AuthorizationError(NotFoundError):
    """Raised when the caller is authenticated but does not own the resource.

    Subclasses NotFoundError so callers report it as a plain "not found".
    """


class ValidationError(TaskboardError):
    """Raised when a required field is missing or a value is not allowed."""


class NetworkError(TaskboardError):
    """Raised on transport failures or unexpected server errors."""
