from __future__ import annotations


class DomainError(Exception):
    """Base class for errors raised by the domain layer."""


class MalformedSnapshotError(DomainError):
    """Stored task data could not be parsed back into tasks."""
