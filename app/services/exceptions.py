"""
Service-layer error types.

Raised by the service classes and translated into HTTP responses by the
handlers registered in ``main.py``.
"""
from typing import Any, Dict, Optional


class ServiceError(Exception):
    """Base class for errors raised by the service layer."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    """A referenced id does not exist."""

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity.capitalize()} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class ConstraintViolationError(ServiceError):
    """A write would break a relationship the cascade logic does not cover."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class ValidationError(ServiceError):
    """Input is well-formed but refers to something that cannot be used."""


def reject_nulls(update_data: Dict[str, Any], fields) -> None:
    """Raise ValidationError when a patch explicitly clears a required field."""
    cleared = [field for field in fields if field in update_data and update_data[field] is None]
    if cleared:
        raise ValidationError(f"Field(s) cannot be null: {', '.join(cleared)}")
