"""
Custom exceptions package.
"""
from fatturazione.exceptions.custom_exceptions import (
    AppError,
    NotFoundError,
    InvalidInputError,
    ForbiddenOperationError,
    ConflictError,
    DatabaseError,
    ConfigurationError,
    require_fields
)

__all__ = [
    "AppError",
    "NotFoundError",
    "InvalidInputError",
    "ForbiddenOperationError",
    "ConflictError",
    "DatabaseError",
    "ConfigurationError",
    "require_fields"
]
