"""
Error taxonomy for the job board API.

Every domain failure raised by a route or dependency is a JobBoardError
subclass. The global handler in app.api.error_handlers turns it into
{"message": ...} with the class's status code. Anything else is a 500.
"""

from typing import Optional


class JobBoardError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequest(JobBoardError):
    status_code = 400
    default_message = "Bad request"


class AlreadyApplied(BadRequest):
    default_message = "You have already applied for this job"


class Unauthenticated(JobBoardError):
    status_code = 401
    default_message = "Authentication required"


class InvalidCredentials(JobBoardError):
    status_code = 401
    default_message = "Invalid credentials"


class Forbidden(JobBoardError):
    status_code = 403
    default_message = "Invalid or expired token"


class NotFound(JobBoardError):
    status_code = 404
    default_message = "Not found"


class Conflict(JobBoardError):
    status_code = 409
    default_message = "Conflict"


class PayloadTooLarge(JobBoardError):
    status_code = 413
    default_message = "File too large"
