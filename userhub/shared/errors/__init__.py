from .base import (
    AppError,
    ConflictError,
    DomainError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
    UploadError,
    ValidationError,
)
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "ConflictError",
    "DomainError",
    "InternalError",
    "NotFoundError",
    "UnauthorizedError",
    "UploadError",
    "ValidationError",
    "handle_app_error",
    "register_error_handler",
]
