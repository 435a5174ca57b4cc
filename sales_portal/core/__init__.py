from .exceptions import (
    AppException,
    InvalidCredentialsError,
    AccessDeniedError,
    AccountDeactivatedError,
    RoleDeniedError,
    PermissionDeniedError,
    UserNotFoundError,
    LeadNotFoundError,
    ValidationError,
    DatabaseError,
    FetchError,
    WriteError,
    SessionDataError,
    DuplicateSubmissionError,
)
