class AppException(Exception):
    """Base exception class for the application."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class InvalidCredentialsError(AppException):
    """Raised for any failed sign-in (unknown login ID, wrong password or deactivated account)."""
    def __init__(self, message: str = "Invalid login ID or password."):
        super().__init__(message)

class AccessDeniedError(AppException):
    """Raised when the current identity may not open a route or perform an action."""
    pass

class AccountDeactivatedError(AccessDeniedError):
    pass

class RoleDeniedError(AccessDeniedError):
    pass

class PermissionDeniedError(AccessDeniedError):
    def __init__(self, message: str, missing_permissions=()):
        super().__init__(message)
        self.missing_permissions = tuple(missing_permissions)

class UserNotFoundError(AppException):
    """Raised when a specific user is expected but not found (e.g., when updating by ID)."""
    pass

class LeadNotFoundError(AppException):
    """Raised when a lead is expected but not found or not visible to the requester."""
    pass

class ValidationError(AppException):
    """Raised for data validation errors (e.g., missing fields, invalid format)."""
    pass

class DatabaseError(AppException):
    """Raised for errors during database operations (e.g., integrity constraints, connection issues)."""
    pass

class FetchError(DatabaseError):
    """Raised when records could not be read from the store."""
    pass

class WriteError(DatabaseError):
    """Raised when a record could not be written to the store."""
    pass

class SessionDataError(AppException):
    """Raised when a persisted session record cannot be turned back into an identity."""
    pass

class DuplicateSubmissionError(AppException):
    """Raised when an action is triggered again while the previous run is still in flight."""
    pass
