# src/order_shipping_manifest/pipelines/settlement.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Sequence

from order_shipping_manifest.errors import InvalidInputError
from order_shipping_manifest.io.schema import (
    SETTLEMENT_COMMISSION_LABEL,
    SETTLEMENT_TOTAL_LABEL,
)
from order_shipping_manifest.models import NormalizedOrder

# Subtotal basis. The settlement sheet has always summed unit prices without
# looking at quantity; "extended" (unit price x quantity) is opt-in.
BASIS_UNIT_PRICE = "unit_price"
BASIS_EXTENDED = "extended"
BASES = (BASIS_UNIT_PRICE, BASIS_EXTENDED)

_ONE_DECIMAL = Decimal("0.1")


def one_decimal(value: Decimal) -> str:
    """Display form used for subtotals and the grand total: 350 -> "350.0"."""
    return str(value.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def plain_number(value: Decimal) -> str:
    """Unrounded display: 35.00 -> "35", 12.345 -> "12.345"."""
    return format(value.normalize(), "f")


def parse_percentage(value: object) -> Decimal:
    try:
        pct = Decimal(str(value).strip())
    except (InvalidOperation, AttributeError):
        raise InvalidInputError(f"commission percentage must be numeric, got {value!r}") from None
    if not pct.is_finite():
        raise InvalidInputError(f"commission percentage must be finite, got {value!r}")
    return pct


def order_subtotal(order: NormalizedOrder, *, basis: str = BASIS_UNIT_PRICE) -> Decimal:
    if basis == BASIS_UNIT_PRICE:
        return sum((li.unit_price for li in order.line_items), Decimal("0"))
    if basis == BASIS_EXTENDED:
        return sum((li.unit_price * li.quantity for li in order.line_items), Decimal("0"))
    raise ValueError(f"Unknown subtotal basis: {basis!r} (expected one of {BASES})")


@dataclass(frozen=True)
class Settlement:
    """
    Totals for one affiliate payout.

    `subtotals` and `grand_total` are exact; their *_display forms are rounded
    to one decimal. `commission` is reported as computed, without rounding.
    """
    subtotals: tuple[Decimal, ...]
    grand_total: Decimal
    percentage_text: str
    percentage: Decimal
    commission: Decimal
    basis: str = BASIS_UNIT_PRICE

    @property
    def subtotal_displays(self) -> list[str]:
        return [one_decimal(s) for s in self.subtotals]

    @property
    def grand_total_display(self) -> str:
        return one_decimal(self.grand_total)

    @property
    def commission_display(self) -> str:
        return plain_number(self.commission)


def aggregate(
    orders: Sequence[NormalizedOrder],
    percentage: object,
    *,
    basis: str = BASIS_UNIT_PRICE,
) -> Settlement:
    pct = parse_percentage(percentage)
    subtotals = tuple(order_subtotal(o, basis=basis) for o in orders)
    grand = sum(subtotals, Decimal("0"))
    return Settlement(
        subtotals=subtotals,
        grand_total=grand,
        percentage_text=str(percentage).strip(),
        percentage=pct,
        commission=grand * pct / Decimal(100),
        basis=basis,
    )


def _items_summary(order: NormalizedOrder) -> str:
    return "、".join(
        f"{li.title}、 価格: ¥{li.amount_text}、 数量: {li.quantity}点、"
        for li in order.line_items
    )


def settlement_rows(orders: Iterable[NormalizedOrder], settlement: Settlement) -> list[list[str]]:
    """
    Report body (header excluded):
      one row per order, a blank row, the grand total, the commission.
    """
    orders = list(orders)
    rows: list[list[str]] = []
    for order, subtotal in zip(orders, settlement.subtotal_displays):
        cust = order.customer
        rows.append([
            order.created_date,
            cust.full_name if cust else "",
            cust.email if cust else "",
            "、".join(order.tags),
            subtotal,
            _items_summary(order),
        ])
    rows.append([""])
    rows.append([SETTLEMENT_TOTAL_LABEL, settlement.grand_total_display])
    rows.append([
        SETTLEMENT_COMMISSION_LABEL.format(percentage=settlement.percentage_text),
        settlement.commission_display,
    ])
    return rows

