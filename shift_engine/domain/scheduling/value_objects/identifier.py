"""Opaque identifiers shared by shifts, employees, locations and templates."""

from typing import Annotated, Any

from pydantic import BeforeValidator


def coerce_identifier(v: Any) -> str:
    """Backends hand out integer or UUID ids; the engine compares them as text."""
    if isinstance(v, bool) or v is None:
        raise ValueError(f"invalid identifier: {v!r}")
    value = str(v).strip()
    if not value:
        raise ValueError("identifier must not be empty")
    return value


Identifier = Annotated[str, BeforeValidator(coerce_identifier)]
