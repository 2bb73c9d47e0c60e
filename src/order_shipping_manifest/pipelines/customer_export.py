# src/order_shipping_manifest/pipelines/customer_export.py
from __future__ import annotations

from typing import Iterable

from order_shipping_manifest.models import NormalizedCustomer
from order_shipping_manifest.rules.fields import normalize_phone, translate_region


def _tags_cell(customer: NormalizedCustomer) -> str:
    raw = customer.raw_tags
    if not raw:
        return ""
    if isinstance(raw, str):
        return ",".join(t.strip() for t in raw.split(","))
    return " ".join(str(t) for t in raw)


def customer_row(customer: NormalizedCustomer) -> list[str]:
    """One export line; only the first address is used."""
    addr = customer.addresses[0] if customer.addresses else None
    phone = addr.phone if addr is not None else None
    return [
        customer.numeric_id,
        _tags_cell(customer),
        customer.full_name,
        customer.email,
        normalize_phone(phone) if phone else "",
        addr.zip if addr else "",
        translate_region(addr.province) if addr and addr.province else "",
        addr.city if addr else "",
        addr.address1 if addr else "",
        (addr.address2 or "") if addr else "",
    ]


def customer_rows(customers: Iterable[NormalizedCustomer]) -> list[list[str]]:
    return [customer_row(c) for c in customers]
