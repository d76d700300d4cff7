"""
Error taxonomy.

Routes and services raise these; the handlers registered in main.py turn
them into `{"detail": ...}` responses with the matching status code.
Anything that is not an AppError becomes an opaque 500.
"""

from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid or expired token"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class JobNotFound(NotFound):
    default_detail = "Job not found"


class ApplicationNotFound(NotFound):
    default_detail = "Application not found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


class DuplicateApplication(Conflict):
    default_detail = "Already applied"


class ValidationFailed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class ProfileMissing(ValidationFailed):
    default_detail = "Profile missing"


class PayloadTooLarge(AppError):
    status_code = 413
    default_detail = "File too large"


class Internal(AppError):
    pass
