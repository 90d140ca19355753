"""Shared identity and timestamp helpers for domain entities."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4


def domain_generate_identifier() -> str:
    """Generate one random entity identifier.

    Returns:
        str: UUID4 identifier rendered as text.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return str(uuid4())


def domain_utc_now() -> datetime:
    """Return the current offset-aware UTC timestamp.

    Returns:
        datetime: Current UTC timestamp.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return datetime.now(timezone.utc)


def domain_require_identifier(value: str, field_name: str) -> str:
    """Validate one entity identifier and return its normalized form.

    Args:
        value: Identifier candidate.
        field_name: Field label used in error messages.

    Returns:
        str: Stripped identifier.

    Raises:
        ValueError: Raised when identifier is not a non-blank string.
    """

    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field_name} must not be blank")
    return value.strip()


def domain_require_utc_timestamp(value: datetime, field_name: str) -> datetime:
    """Validate one timestamp and convert it to UTC.

    Args:
        value: Timestamp candidate.
        field_name: Field label used in error messages.

    Returns:
        datetime: Offset-aware timestamp converted to UTC.

    Raises:
        ValueError: Raised when timestamp is missing or offset-naive.
    """

    if not isinstance(value, datetime):
        raise ValueError(f"{field_name} must be a datetime")
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{field_name} must be offset-aware")
    return value.astimezone(timezone.utc)


__all__ = [
    "domain_generate_identifier",
    "domain_require_identifier",
    "domain_require_utc_timestamp",
    "domain_utc_now",
]
