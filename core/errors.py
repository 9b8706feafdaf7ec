from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import HTTPException, status

from utils.datetime_helpers import format_utc_datetime


# Base for every refusal the scheduling engine raises on purpose.
# Subclasses HTTPException so routes can let it propagate untouched.
class AppError(HTTPException):
    def __init__(
        self,
        message: str,
        status_code: int,
        error_code: str,
    ):
        super().__init__(
            status_code=status_code,
            detail={"message": message, "errorCode": error_code},
        )
        self.message = message
        self.error_code = error_code
        self.timestamp = datetime.now(timezone.utc)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": type(self).__name__,
            "message": self.message,
            "statusCode": self.status_code,
            "errorCode": self.error_code,
            "timestamp": format_utc_datetime(self.timestamp),
        }


class NotFoundError(AppError):
    def __init__(self, message: str, error_code: str):
        super().__init__(message, status.HTTP_404_NOT_FOUND, error_code)


class InvalidStateError(AppError):
    def __init__(self, message: str, error_code: str = "INVALID_SHIFT_STATUS"):
        super().__init__(message, status.HTTP_409_CONFLICT, error_code)


class ForbiddenError(AppError):
    def __init__(
        self,
        message: str = "You are not assigned to this shift",
        error_code: str = "UNAUTHORIZED_SHIFT_ACCESS",
    ):
        super().__init__(message, status.HTTP_403_FORBIDDEN, error_code)


class TimeWindowViolation(AppError):
    def __init__(self, message: str, error_code: str):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, error_code)


class ShiftValidationError(AppError):
    """A merged shift record failed whole-entity validation before saving."""

    def __init__(self, message: str, error_code: str = "VALIDATION_ERROR"):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, error_code)


def shift_not_found() -> NotFoundError:
    return NotFoundError("Shift not found", "SHIFT_NOT_FOUND")


def user_not_found() -> NotFoundError:
    return NotFoundError("User not found", "USER_NOT_FOUND")
