# src/order_shipping_manifest/rules/fields.py
from __future__ import annotations

import re
from typing import Any, Iterable, Tuple

from order_shipping_manifest.errors import InvalidInputError
from order_shipping_manifest.rules.lookups import DELIVERY_WINDOWS, REGION_NAMES

# Country calling code of the source shop (Japan)
INTERNATIONAL_PREFIX = "+81"

_PHONE_SEPARATORS = re.compile(r"[-\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_phone(raw: Any) -> str:
    """
    Canonical domestic phone display form:
      "+81 90-1234-5678" -> "090-1234-5678"
      "09012345678"      -> "090-1234-5678"

    A hyphen always goes four characters from the end; a head longer than
    four characters is split once more the same way. Digit count is not
    validated, so very short input comes out malformed ("123" -> "-123")
    instead of raising.
    """
    if not isinstance(raw, str):
        raise InvalidInputError(
            f"phone number must be a string, got {type(raw).__name__}")

    phone = _PHONE_SEPARATORS.sub("", raw)
    if phone.startswith(INTERNATIONAL_PREFIX):
        phone = "0" + phone[len(INTERNATIONAL_PREFIX):]

    head, tail = phone[:-4], phone[-4:]
    if len(head) > 4:
        head = head[:-4] + "-" + head[-4:]
    return head + "-" + tail


def strip_whitespace(value: Any) -> str:
    """Remove every whitespace run; non-strings (None included) become ""."""
    if not isinstance(value, str):
        return ""
    return _WHITESPACE.sub("", value)


def translate_region(code: Any) -> str:
    # unknown names are not an error; the cell is simply left blank
    if not isinstance(code, str):
        return ""
    return REGION_NAMES.get(code, "")


def map_delivery_window(free_text: Any) -> str:
    if not isinstance(free_text, str):
        return ""
    return DELIVERY_WINDOWS.get(free_text, "")


def custom_attribute(attributes: Iterable[Tuple[str, str]], key: str) -> str:
    """First value stored under `key`, or "" when the attribute is absent."""
    for k, v in attributes:
        if k == key:
            return v if isinstance(v, str) else ""
    return ""


def normalize_date_separators(value: str, *, old: str = "-", new: str = "/") -> str:
    """"2024-05-01" -> "2024/05/01" (every occurrence)."""
    return (value or "").replace(old, new)


__all__ = [
    "INTERNATIONAL_PREFIX",
    "normalize_phone",
    "strip_whitespace",
    "translate_region",
    "map_delivery_window",
    "custom_attribute",
    "normalize_date_separators",
]
