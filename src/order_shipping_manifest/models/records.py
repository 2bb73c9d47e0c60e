# src/order_shipping_manifest/models/records.py
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from order_shipping_manifest.models.tags import TagSet


def _text(value: Any) -> str:
    """None -> "", everything else -> str."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _edges(value: Any) -> list[Any]:
    """
    Unwrap a GraphQL connection ({"edges": [{"node": ...}]}) or pass a plain
    list through. Anything else is treated as empty.
    """
    if isinstance(value, dict):
        edges = value.get("edges") or []
        return [e.get("node", e) if isinstance(e, dict) else e for e in edges]
    if isinstance(value, list):
        return value
    return []


def _decimal(value: Any) -> Decimal:
    try:
        return Decimal(str(value)) if value not in (None, "") else Decimal("0")
    except InvalidOperation:
        return Decimal("0")


@dataclass(frozen=True)
class ShippingAddress:
    zip: str = ""
    last_name: str = ""
    first_name: str = ""
    # phone stays untyped: a missing phone (None) must reach normalize_phone
    # so the invalid-input rule applies
    phone: Any = None
    province: str = ""
    city: str = ""
    address1: str = ""
    address2: Optional[str] = None

    @classmethod
    def from_json(cls, data: Optional[dict[str, Any]]) -> "ShippingAddress":
        data = data or {}
        return cls(
            zip=_text(data.get("zip")),
            last_name=_text(data.get("lastName")),
            first_name=_text(data.get("firstName")),
            phone=data.get("phone"),
            province=_text(data.get("province")),
            city=_text(data.get("city")),
            address1=_text(data.get("address1")),
            address2=data.get("address2"),
        )

    @property
    def full_name(self) -> str:
        return self.last_name + self.first_name


@dataclass(frozen=True)
class LineItem:
    title: str
    quantity: int
    unit_price: Decimal
    currency_code: str = "JPY"

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "LineItem":
        money = ((data.get("originalUnitPriceSet") or {}).get("shopMoney") or {})
        if not money and "unitPrice" in data:
            money = {"amount": data.get("unitPrice")}
        quantity = int(data.get("quantity") or 0)
        if quantity < 0:
            raise ValueError(f"line item quantity must be >= 0, got {quantity}")
        return cls(
            title=_text(data.get("title")),
            quantity=quantity,
            unit_price=_decimal(money.get("amount")),
            currency_code=_text(money.get("currencyCode")) or "JPY",
        )

    @property
    def amount_text(self) -> str:
        """Price as the backend rendered it ("1000.0")."""
        return str(self.unit_price)


@dataclass(frozen=True)
class CustomerRef:
    """The purchasing customer embedded on an order (settlement report)."""
    email: str = ""
    last_name: str = ""
    first_name: str = ""

    @property
    def full_name(self) -> str:
        return self.last_name + self.first_name


@dataclass(frozen=True)
class NormalizedOrder:
    id: str
    email: str = ""
    custom_attributes: tuple[tuple[str, str], ...] = ()
    shipping_address: ShippingAddress = field(default_factory=ShippingAddress)
    line_items: tuple[LineItem, ...] = ()
    tags: TagSet = field(default_factory=TagSet)
    created_at: str = ""
    customer: Optional[CustomerRef] = None

    # raw payload for audit
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "NormalizedOrder":
        attrs = tuple(
            (_text(a.get("key")), _text(a.get("value")))
            for a in (data.get("customAttributes") or [])
            if isinstance(a, dict)
        )
        cust = data.get("customer")
        customer = None
        if isinstance(cust, dict):
            customer = CustomerRef(
                email=_text(cust.get("email")),
                last_name=_text(cust.get("lastName")),
                first_name=_text(cust.get("firstName")),
            )
        return cls(
            id=_text(data.get("id")),
            email=_text(data.get("email")),
            custom_attributes=attrs,
            shipping_address=ShippingAddress.from_json(data.get("shippingAddress")),
            line_items=tuple(LineItem.from_json(n) for n in _edges(data.get("lineItems"))),
            tags=TagSet.parse(data.get("tags")),
            created_at=_text(data.get("createdAt")),
            customer=customer,
            raw=data,
        )

    @property
    def numeric_id(self) -> str:
        """'gid://shopify/Order/5512345678901' -> '5512345678901'."""
        return self.id.split("Order/", 1)[1] if "Order/" in self.id else self.id

    @property
    def created_date(self) -> str:
        return self.created_at.split("T")[0]


@dataclass(frozen=True)
class NormalizedCustomer:
    id: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    tags: TagSet = field(default_factory=TagSet)
    addresses: tuple[ShippingAddress, ...] = ()
    # tags exactly as received (list or comma string); the customer export
    # renders the two shapes differently
    raw_tags: Any = field(default=None, compare=False, repr=False)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "NormalizedCustomer":
        return cls(
            id=_text(data.get("id")),
            email=_text(data.get("email")),
            first_name=_text(data.get("firstName")),
            last_name=_text(data.get("lastName")),
            tags=TagSet.parse(data.get("tags")),
            addresses=tuple(
                ShippingAddress.from_json(a) for a in (data.get("addresses") or []) if isinstance(a, dict)
            ),
            raw_tags=data.get("tags"),
        )

    @property
    def full_name(self) -> str:
        return self.last_name + self.first_name

    @property
    def numeric_id(self) -> str:
        return self.id.split("/Customer/", 1)[1] if "/Customer/" in self.id else self.id


def _nodes(payload: Any, connection: str) -> list[dict[str, Any]]:
    """Accept a bare list of nodes or a GraphQL response wrapping them."""
    if isinstance(payload, list):
        return [n for n in payload if isinstance(n, dict)]
    if isinstance(payload, dict):
        data = payload.get("data", payload)
        if isinstance(data, dict) and connection in data:
            return [n for n in _edges(data[connection]) if isinstance(n, dict)]
        return [payload]
    return []


def parse_orders(payload: Any) -> list[NormalizedOrder]:
    return [NormalizedOrder.from_json(n) for n in _nodes(payload, "orders")]


def parse_customers(payload: Any) -> list[NormalizedCustomer]:
    return [NormalizedCustomer.from_json(n) for n in _nodes(payload, "customers")]
