# File: app/core/errors.py
# Project: community-reports-backend

from typing import Iterable, Optional


class DomainError(Exception):
    """Base for errors that are reported to the end user in plain language."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """A required submission field is missing or has an invalid value."""

    def __init__(self, message: str, missing: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.missing = list(missing or [])

    @classmethod
    def missing_fields(cls, fields: Iterable[str]) -> "ValidationError":
        fields = list(fields)
        return cls(f"Missing required fields: {', '.join(fields)}", missing=fields)


class StorageError(DomainError):
    """The database (or media storage) could not be read or written."""


class InvalidTransition(DomainError):
    """An issue was asked to move to a status it cannot reach from its current one."""
