# src/order_shipping_manifest/pipelines/profiles.py
from __future__ import annotations

import datetime as dt
from typing import Optional

from order_shipping_manifest.errors import InvalidInputError
from order_shipping_manifest.io import schema
from order_shipping_manifest.models import NormalizedOrder
from order_shipping_manifest.pipelines.column_contract import (
    CarrierProfile,
    ColumnSpec,
    ExportRow,
    RowContext,
    layout,
)
from order_shipping_manifest.rules.fields import (
    custom_attribute,
    map_delivery_window,
    normalize_date_separators,
    normalize_phone,
    strip_whitespace,
    translate_region,
)
from order_shipping_manifest.rules.lookups import (
    DELIVERY_WINDOW_ATTRIBUTE,
    INVOICE_TYPES,
    REQUESTED_DATE_ATTRIBUTE,
)

C = ColumnSpec


# ---- derived cells -----------------------------------------------------------

def _ship_date(order: NormalizedOrder, ctx: RowContext) -> str:
    return ctx.today.strftime("%Y/%m/%d")


def _requested_date(order: NormalizedOrder, ctx: RowContext) -> str:
    return normalize_date_separators(
        custom_attribute(order.custom_attributes, REQUESTED_DATE_ATTRIBUTE))


def _delivery_window(order: NormalizedOrder, ctx: RowContext) -> str:
    return map_delivery_window(
        custom_attribute(order.custom_attributes, DELIVERY_WINDOW_ATTRIBUTE))


def _phone(order: NormalizedOrder, ctx: RowContext) -> str:
    return normalize_phone(order.shipping_address.phone)


def _yamato_address(order: NormalizedOrder, ctx: RowContext) -> str:
    a = order.shipping_address
    return translate_region(a.province) + a.city + a.address1


def _address2(order: NormalizedOrder, ctx: RowContext) -> str:
    return order.shipping_address.address2 or ""


def _seino_reference(order: NormalizedOrder, ctx: RowContext) -> str:
    return schema.SEINO_REFERENCE_PREFIX + order.numeric_id[: schema.SEINO_REFERENCE_DIGITS]


def _seino_zip(order: NormalizedOrder, ctx: RowContext) -> str:
    # only the first separator is dropped
    return order.shipping_address.zip.replace("-", "", 1)


def _seino_address(order: NormalizedOrder, ctx: RowContext) -> str:
    a = order.shipping_address
    return (
        translate_region(strip_whitespace(a.province))
        + strip_whitespace(a.city)
        + strip_whitespace(a.address1)
        + strip_whitespace(a.address2)
    )


# ---- profiles ----------------------------------------------------------------

YAMATO_PROFILE = CarrierProfile(
    "yamato",
    layout(
        schema.YAMATO_COLUMN_COUNT,
        {
            2: C.param("shipment_type"),
            5: C.derived(_ship_date),
            6: C.derived(_requested_date),
            7: C.derived(_delivery_window),
            9: C.derived(_phone),
            11: C.field("shipping_address.zip"),
            12: C.derived(_yamato_address),
            13: C.derived(_address2),
            16: C.field("shipping_address.full_name"),
            20: C.constant(schema.SHIPPER_PHONE),
            22: C.constant(schema.SHIPPER_ZIP),
            23: C.constant(schema.SHIPPER_ADDRESS),
            24: C.constant(schema.SHIPPER_BUILDING),
            25: C.constant(schema.SHIPPER_NAME),
            28: C.constant(schema.SHIPPER_ITEM_NAME),
            39: C.constant(schema.YAMATO_BILLING_CUSTOMER_CODE),
            41: C.constant(schema.YAMATO_FREIGHT_MANAGEMENT_NO),
        },
        headers=schema.YAMATO_HEADERS,
    ),
    column_count=schema.YAMATO_COLUMN_COUNT,
    filename=schema.YAMATO_FILENAME,
    container="csv",
    with_header=True,
)

SEINO_PROFILE = CarrierProfile(
    "seino",
    layout(
        schema.SEINO_COLUMN_COUNT,
        {
            1: C.constant(schema.SHIPPER_PHONE_DIGITS),
            5: C.derived(_seino_reference),
            6: C.constant(schema.SEINO_PACKAGE_COUNT),
            8: C.constant(schema.SEINO_PACKAGE_COUNT),
            12: C.constant(schema.SEINO_SHIPPER_NAME),
            13: C.constant(schema.SEINO_SHIPPER_ADDRESS),
            14: C.constant(schema.SHIPPER_BUILDING),
            15: C.constant(schema.SHIPPER_PHONE_DIGITS),
            19: C.derived(_seino_zip),
            20: C.field("shipping_address.full_name"),
            22: C.derived(_seino_address),
            24: C.derived(_phone),
            # the older 45-wide upload carried the email in cell 45
            34: C.field("email"),
        },
    ),
    column_count=schema.SEINO_COLUMN_COUNT,
    filename=schema.SEINO_FILENAME,
    container="xlsx",
    with_header=False,
)

PROFILES: dict[str, CarrierProfile] = {
    YAMATO_PROFILE.name: YAMATO_PROFILE,
    SEINO_PROFILE.name: SEINO_PROFILE,
}


def profile_for(carrier: str) -> CarrierProfile:
    try:
        return PROFILES[(carrier or "").strip().lower()]
    except KeyError:
        raise InvalidInputError(
            f"Unknown carrier profile: {carrier!r} (expected one of {', '.join(PROFILES)})") from None


def validate_shipment_type(shipment_type: str) -> str:
    if shipment_type not in INVOICE_TYPES:
        raise InvalidInputError(
            f"Unknown shipment type: {shipment_type!r} (expected one of {', '.join(INVOICE_TYPES)})")
    return shipment_type


def serialize_profile_a(
    order: NormalizedOrder,
    shipment_type: str = "0",
    *,
    today: Optional[dt.date] = None,
) -> ExportRow:
    """Yamato manifest row (95 cells) for one order."""
    ctx = RowContext(shipment_type=validate_shipment_type(shipment_type), today=today or dt.date.today())
    return YAMATO_PROFILE.serialize(order, ctx)


def serialize_profile_b(order: NormalizedOrder) -> ExportRow:
    """Seino manifest row (34 cells) for one order."""
    return SEINO_PROFILE.serialize(order)


__all__ = [
    "YAMATO_PROFILE",
    "SEINO_PROFILE",
    "PROFILES",
    "profile_for",
    "validate_shipment_type",
    "serialize_profile_a",
    "serialize_profile_b",
]
