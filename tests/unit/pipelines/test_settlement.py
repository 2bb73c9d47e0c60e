from decimal import Decimal

import pytest

from order_shipping_manifest.errors import InvalidInputError
from order_shipping_manifest.models import NormalizedOrder
from order_shipping_manifest.pipelines.settlement import (
    BASIS_EXTENDED,
    aggregate,
    one_decimal,
    plain_number,
    settlement_rows,
)


def _order(prices, quantity=1, **extra):
    node = {
        "id": "gid://shopify/Order/1",
        "createdAt": "2024-05-01T10:00:00Z",
        "lineItems": [
            {"title": f"item{i}", "quantity": quantity, "unitPrice": p}
            for i, p in enumerate(prices)
        ],
    }
    node.update(extra)
    return NormalizedOrder.from_json(node)


def test_aggregate_sums_unit_prices_and_commission_is_unrounded():
    result = aggregate([_order(["100", "200"]), _order(["50"])], "10")

    assert result.grand_total == Decimal("350")
    assert result.grand_total_display == "350.0"
    assert result.subtotal_displays == ["300.0", "50.0"]
    assert result.commission == Decimal("35")
    assert result.commission_display == "35"


def test_subtotal_of_single_item_order():
    result = aggregate([_order(["100"]), _order(["200"]), _order(["50"])], "10")
    assert result.subtotal_displays[0] == "100.0"
    assert result.grand_total == Decimal("350")


def test_default_basis_ignores_quantity():
    # quantity is deliberately not multiplied in; the extended basis is opt-in
    orders = [_order(["100"], quantity=3)]
    assert aggregate(orders, "10").grand_total == Decimal("100")
    assert aggregate(orders, "10", basis=BASIS_EXTENDED).grand_total == Decimal("300")


def test_rounding_applies_to_totals_but_not_commission():
    result = aggregate([_order(["10.25"]), _order(["0.2"])], "3")

    assert result.subtotal_displays == ["10.3", "0.2"]
    assert result.grand_total_display == "10.5"
    assert result.commission_display == "0.3135"


def test_empty_order_list():
    result = aggregate([], "10")
    assert result.grand_total_display == "0.0"
    assert result.commission_display == "0"


@pytest.mark.parametrize("bad", ["", "ten", None, "NaN"])
def test_invalid_percentage(bad):
    with pytest.raises(InvalidInputError):
        aggregate([_order(["1"])], bad)


def test_unknown_basis():
    with pytest.raises(ValueError):
        aggregate([_order(["1"])], "10", basis="gross")


def test_number_formatting_helpers():
    assert one_decimal(Decimal("0.05")) == "0.1"
    assert plain_number(Decimal("35.00")) == "35"
    assert plain_number(Decimal("1E+3")) == "1000"


def test_settlement_rows_layout(order_node):
    orders = [NormalizedOrder.from_json(order_node())]
    result = aggregate(orders, "10")
    rows = settlement_rows(orders, result)

    assert rows[0] == [
        "2024-05-01",
        "山田花子",
        "hanako@example.com",
        "b2b、affiliate",
        "1500.0",
        "美容液、 価格: ¥1000.0、 数量: 2点、、化粧水、 価格: ¥500.0、 数量: 1点、",
    ]
    assert rows[1] == [""]
    assert rows[2] == ["合計金額", "1500.0"]
    assert rows[3] == ["お支払い金額(10%)", "150"]


def test_settlement_row_without_customer():
    orders = [_order(["100"])]
    rows = settlement_rows(orders, aggregate(orders, "5"))
    assert rows[0][1:3] == ["", ""]
    assert rows[-1] == ["お支払い金額(5%)", "5"]
