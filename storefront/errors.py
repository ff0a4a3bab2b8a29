from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

ERROR_MESSAGES = {
    "NETWORK_ERROR": "Unable to connect to the server. Please check your internet connection.",
    "TIMEOUT": "Request timed out. Please try again.",
    "AUTHENTICATION_REQUIRED": "Please log in to continue.",
    "UNAUTHORIZED": "You do not have permission to perform this action.",
    "VALIDATION_FAILED": "Please check your input and try again.",
    "NOT_FOUND": "The requested resource was not found.",
    "ALREADY_EXISTS": "This resource already exists.",
    "SERVER_ERROR": "Something went wrong on our end. Please try again later.",
    "RATE_LIMIT_EXCEEDED": "Too many requests. Please wait a moment and try again.",
    "UNKNOWN_ERROR": "An unexpected error occurred. Please try again.",
}


@dataclass(eq=False)
class ApiError(Exception):
    """Ошибка удалённого API, уже переведённая в понятный пользователю вид."""

    message: str
    status_code: Optional[int] = None
    code: str = "API_ERROR"
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return self.message


class NetworkError(ApiError):
    def __init__(self, message: str = ERROR_MESSAGES["NETWORK_ERROR"]):
        super().__init__(message, 0, "NETWORK_ERROR")


class RequestTimeout(ApiError):
    def __init__(self, message: str = ERROR_MESSAGES["TIMEOUT"]):
        super().__init__(message, 408, "TIMEOUT_ERROR")


class ValidationError(ApiError):
    def __init__(self, message: str = ERROR_MESSAGES["VALIDATION_FAILED"], errors=None, status_code: int = 400):
        super().__init__(message, status_code, "VALIDATION_ERROR", errors)


class AuthenticationError(ApiError):
    def __init__(self, message: str = ERROR_MESSAGES["AUTHENTICATION_REQUIRED"]):
        super().__init__(message, 401, "AUTHENTICATION_ERROR")


class AuthorizationError(ApiError):
    def __init__(self, message: str = ERROR_MESSAGES["UNAUTHORIZED"]):
        super().__init__(message, 403, "AUTHORIZATION_ERROR")


class NotFoundError(ApiError):
    def __init__(self, message: str = ERROR_MESSAGES["NOT_FOUND"]):
        super().__init__(message, 404, "NOT_FOUND_ERROR")


class ConflictError(ApiError):
    def __init__(self, message: str = ERROR_MESSAGES["ALREADY_EXISTS"]):
        super().__init__(message, 409, "CONFLICT_ERROR")


class RateLimitError(ApiError):
    def __init__(self, message: str = ERROR_MESSAGES["RATE_LIMIT_EXCEEDED"]):
        super().__init__(message, 429, "RATE_LIMIT_ERROR")


class ServerError(ApiError):
    def __init__(self, message: str = ERROR_MESSAGES["SERVER_ERROR"], status_code: int = 500):
        super().__init__(message, status_code, "SERVER_ERROR")


def _payload_message(payload: Any) -> Optional[str]:
    if isinstance(payload, dict):
        msg = payload.get("message") or payload.get("error")
        if isinstance(msg, str) and msg.strip():
            return msg
    return None


def error_from_status(status_code: int, payload: Any = None) -> ApiError:
    """HTTP-статус + тело ответа -> конкретный класс ошибки"""
    message = _payload_message(payload)
    errors = payload.get("errors") if isinstance(payload, dict) else None

    if status_code in (400, 422):
        if errors:
            return ValidationError(message or ERROR_MESSAGES["VALIDATION_FAILED"], errors, status_code)
        code = "BAD_REQUEST" if status_code == 400 else "UNPROCESSABLE_ENTITY"
        return ApiError(message or ERROR_MESSAGES["VALIDATION_FAILED"], status_code, code)
    if status_code == 401:
        return AuthenticationError(message or ERROR_MESSAGES["AUTHENTICATION_REQUIRED"])
    if status_code == 403:
        return AuthorizationError(message or ERROR_MESSAGES["UNAUTHORIZED"])
    if status_code == 404:
        return NotFoundError(message or ERROR_MESSAGES["NOT_FOUND"])
    if status_code == 408:
        return RequestTimeout(message or ERROR_MESSAGES["TIMEOUT"])
    if status_code == 409:
        return ConflictError(message or ERROR_MESSAGES["ALREADY_EXISTS"])
    if status_code == 429:
        return RateLimitError(message or ERROR_MESSAGES["RATE_LIMIT_EXCEEDED"])
    if status_code >= 500:
        return ServerError(message or ERROR_MESSAGES["SERVER_ERROR"], status_code)
    return ApiError(message or ERROR_MESSAGES["UNKNOWN_ERROR"], status_code)


def get_error_message(error: BaseException) -> str:
    if isinstance(error, ApiError):
        return error.message
    return str(error) or ERROR_MESSAGES["UNKNOWN_ERROR"]
