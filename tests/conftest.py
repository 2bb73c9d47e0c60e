# tests/conftest.py
import copy

import pytest


ORDER_NODE = {
    "id": "gid://shopify/Order/5512345678901",
    "email": "hanako@example.com",
    "createdAt": "2024-05-01T09:15:00Z",
    "tags": ["b2b", "affiliate"],
    "customAttributes": [
        {"key": "shipandco-配達希望日", "value": "2024-05-03"},
        {"key": "shipandco-配達希望時間帯", "value": "14-16"},
    ],
    "customer": {
        "email": "hanako@example.com",
        "lastName": "山田",
        "firstName": "花子",
    },
    "shippingAddress": {
        "zip": "150-0001",
        "lastName": "山田",
        "firstName": "花子",
        "phone": "+81 90-1234-5678",
        "province": "Tōkyō",
        "city": "渋谷区",
        "address1": "神宮前1-2-3",
        "address2": "ABCビル 5F",
    },
    "lineItems": {
        "edges": [
            {"node": {
                "title": "美容液",
                "quantity": 2,
                "originalUnitPriceSet": {"shopMoney": {"amount": "1000.0", "currencyCode": "JPY"}},
            }},
            {"node": {
                "title": "化粧水",
                "quantity": 1,
                "originalUnitPriceSet": {"shopMoney": {"amount": "500.0", "currencyCode": "JPY"}},
            }},
        ]
    },
}

CUSTOMER_NODE = {
    "id": "gid://shopify/Customer/7001",
    "email": "taro@example.com",
    "firstName": "太郎",
    "lastName": "佐藤",
    "tags": ["vip", "b2b"],
    "addresses": [
        {
            "zip": "530-0001",
            "lastName": "佐藤",
            "firstName": "太郎",
            "phone": "06 1234 5678",
            "province": "Ōsaka",
            "city": "大阪市北区",
            "address1": "梅田1-1",
            "address2": None,
        }
    ],
}


def _merged(base, overrides):
    node = copy.deepcopy(base)
    for k, v in overrides.items():
        if isinstance(v, dict) and isinstance(node.get(k), dict):
            node[k] = {**node[k], **v}
        else:
            node[k] = v
    return node


@pytest.fixture
def order_node():
    """Factory: order JSON as returned by the Admin API, with overrides."""
    def _make(**overrides):
        return _merged(ORDER_NODE, overrides)
    return _make


@pytest.fixture
def customer_node():
    def _make(**overrides):
        return _merged(CUSTOMER_NODE, overrides)
    return _make
