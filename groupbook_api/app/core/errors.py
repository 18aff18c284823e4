"""
Application error types and the fixed return code vocabulary.

Services raise subclasses of ``GroupbookError`` where a failure is
detected.  Each class carries the ``return_code`` sent to clients and a
message that is safe to show them.  ``main.create_app`` registers the
handlers that turn these exceptions into the response envelope.
"""

from enum import Enum
from typing import Optional


class ReturnCode(str, Enum):
    """Discriminator carried in every response body."""

    SUCCESS = "SUCCESS"
    MISSING_FIELDS = "MISSING_FIELDS"
    INVALID_EMAIL = "INVALID_EMAIL"
    INVALID_PASSWORD = "INVALID_PASSWORD"
    EMAIL_EXISTS = "EMAIL_EXISTS"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_DATE = "INVALID_DATE"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    REGISTRATION_CLOSED = "REGISTRATION_CLOSED"
    REGISTRATION_LOCKED = "REGISTRATION_LOCKED"
    SERVER_ERROR = "SERVER_ERROR"


class GroupbookError(Exception):
    """Base class for anticipated failures."""

    return_code: ReturnCode = ReturnCode.SERVER_ERROR
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingFields(GroupbookError):
    return_code = ReturnCode.MISSING_FIELDS
    default_message = "Required fields are missing"


class InvalidEmail(GroupbookError):
    return_code = ReturnCode.INVALID_EMAIL
    default_message = "Please provide a valid email address"


class InvalidPassword(GroupbookError):
    return_code = ReturnCode.INVALID_PASSWORD
    default_message = "Password must be at least 6 characters long"


class EmailExists(GroupbookError):
    return_code = ReturnCode.EMAIL_EXISTS
    default_message = "An account with this email already exists"


class InvalidCredentials(GroupbookError):
    return_code = ReturnCode.INVALID_CREDENTIALS
    default_message = "Invalid email or password"


class InvalidDate(GroupbookError):
    return_code = ReturnCode.INVALID_DATE
    default_message = "Invalid date/time format"


class NotFound(GroupbookError):
    return_code = ReturnCode.NOT_FOUND
    default_message = "Not found"


class Unauthorized(GroupbookError):
    return_code = ReturnCode.UNAUTHORIZED
    default_message = "Not authenticated"


class InvalidToken(Unauthorized):
    default_message = "Invalid token"


class TokenExpired(Unauthorized):
    default_message = "Token has expired"


class Forbidden(GroupbookError):
    return_code = ReturnCode.FORBIDDEN
    default_message = "You do not have permission to access this event"


class RegistrationClosed(GroupbookError):
    return_code = ReturnCode.REGISTRATION_CLOSED
    default_message = "Registration for this event has closed"


class RegistrationLocked(GroupbookError):
    return_code = ReturnCode.REGISTRATION_LOCKED
    default_message = "Registration for this event is locked"
