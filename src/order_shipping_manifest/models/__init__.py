from .env_cfg import EnvCfg
from .records import (
    CustomerRef,
    LineItem,
    NormalizedCustomer,
    NormalizedOrder,
    ShippingAddress,
    parse_customers,
    parse_orders,
)
from .tags import Add, Remove, Replace, TagOperation, TagSet, TagUpdate, TagUpdateResult

__all__ = [
    "EnvCfg",
    "CustomerRef",
    "LineItem",
    "NormalizedCustomer",
    "NormalizedOrder",
    "ShippingAddress",
    "parse_customers",
    "parse_orders",
    "Add",
    "Remove",
    "Replace",
    "TagOperation",
    "TagSet",
    "TagUpdate",
    "TagUpdateResult",
]
