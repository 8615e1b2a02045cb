"""
Address normalizer.

Checkout clients send addresses in several shapes; everything stored on an
order is the canonical ``Address``.
"""
from collections.abc import Mapping
from typing import Any, Optional

from core.domain.value_objects import Address

_STREET_KEYS = ("street", "address", "address1", "line1")
_ZIP_KEYS = ("zipCode", "zip_code", "postalCode", "postal_code", "zip")


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _first(payload: Mapping, keys) -> str:
    for key in keys:
        value = _text(payload.get(key))
        if value:
            return value
    return ""


def normalize_address(payload: Any, fallback: Optional[Mapping] = None) -> Optional[Address]:
    """
    Map an inbound address payload onto ``Address``.

    ``firstName`` + ``lastName`` are merged into ``name``; missing name and
    phone are filled from ``fallback`` (customer info or requester).

    Returns:
        None for a missing, empty or non-mapping payload
    """
    if not isinstance(payload, Mapping) or not payload:
        return None

    fallback = fallback or {}
    name = _text(payload.get("name"))
    if not name:
        parts = [_text(payload.get("firstName")), _text(payload.get("lastName"))]
        name = " ".join(part for part in parts if part)
    if not name:
        name = _text(fallback.get("name"))

    phone = _text(payload.get("phone")) or _text(fallback.get("phone")) or None

    return Address(
        name=name,
        street=_first(payload, _STREET_KEYS),
        city=_text(payload.get("city")),
        state=_text(payload.get("state")),
        zip_code=_first(payload, _ZIP_KEYS),
        country=_text(payload.get("country")),
        phone=phone,
    )
