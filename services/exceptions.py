"""Errors raised while handling a single record request."""
from typing import List, Optional


class RecordNotFoundError(LookupError):
    """Raised when an identifier does not resolve to a stored record."""

    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} '{record_id}' not found")
        self.kind = kind
        self.record_id = record_id


class BadRequestError(ValueError):
    """Raised when a write request carries no recognised intent."""


class BadInputError(ValueError):
    """Raised when submitted update fields are missing or malformed."""

    def __init__(self, message: str, problems: Optional[List[str]] = None):
        super().__init__(message)
        self.problems = problems or []


class MissingIdentifierError(RuntimeError):
    """Raised when a handler is invoked without a record identifier (a routing bug)."""
