"""
Custom exceptions for the invoicing engine.
Every error is recoverable and carries an HTTP-like status code so the
calling workflow can report it without inspecting the type hierarchy.
"""
from typing import Optional, Any, Dict, List, Iterable


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppError):
    """Resource not found error (404)."""

    def __init__(self, resource: str, identifier: Optional[str] = None):
        message = f"{resource} not found"
        if identifier:
            message += f": {identifier}"
        super().__init__(message, status_code=404, details={"resource": resource, "identifier": identifier})
        self.resource = resource
        self.identifier = identifier


class InvalidInputError(AppError):
    """
    Structural or business validation failure (400).

    Always carries the full list of violated rules, never just the first one.
    """

    def __init__(self, errors: Iterable[str] | str, details: Optional[Dict[str, Any]] = None):
        if isinstance(errors, str):
            errors = [errors]
        self.errors: List[str] = list(errors)
        payload = dict(details or {})
        payload["errors"] = self.errors
        super().__init__("; ".join(self.errors), status_code=400, details=payload)


class ForbiddenOperationError(AppError):
    """Legal-but-blocked action such as an illegal status transition (403)."""

    def __init__(self, operation: str, entity: str, reason: str):
        message = f"Operazione '{operation}' non consentita su {entity}: {reason}"
        super().__init__(
            message,
            status_code=403,
            details={"operation": operation, "entity": entity, "reason": reason}
        )
        self.operation = operation
        self.entity = entity
        self.reason = reason


class ConflictError(AppError):
    """Concurrent update collision or duplicate unique key (409)."""

    def __init__(self, entity: str, reason: str, details: Optional[Dict[str, Any]] = None):
        message = f"Conflitto su {entity}: {reason}"
        payload = {"entity": entity, "reason": reason}
        payload.update(details or {})
        super().__init__(message, status_code=409, details=payload)
        self.entity = entity
        self.reason = reason


class DatabaseError(AppError):
    """Database operation error (500)."""

    def __init__(self, message: str = "Database operation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=500, details=details)


class ConfigurationError(AppError):
    """Configuration/setup error (500)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=500, details=details)


def require_fields(data: Dict[str, Any], required_fields: list[str]) -> List[str]:
    """
    Collect the names of required fields that are missing or empty.

    Args:
        data: Data dictionary to inspect
        required_fields: List of required field names

    Returns:
        One message per missing field (empty list when all are present)
    """
    return [
        f"{field} è obbligatorio"
        for field in required_fields
        if field not in data or data[field] is None or data[field] == ""
    ]
