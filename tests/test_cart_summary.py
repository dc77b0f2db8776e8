from decimal import Decimal
from types import SimpleNamespace

from app.domain.cart_summary import build_cart_view, build_line, summarize
from tests.fakes import product

FEE = Decimal("15.90")


def _line(line_id, product_id, quantity, price):
    return SimpleNamespace(id=line_id, product_id=product_id, quantity=quantity, price=Decimal(price))


def test_summary_sums_lines_and_charges_shipping_per_store():
    lines = [
        _line(1, 1, 2, "10.00"),
        _line(2, 2, 1, "20.00"),
        _line(3, 3, 3, "7.50"),
    ]
    products = {
        1: product(1, store_id=100, point_yield=2),
        2: product(2, store_id=100, point_yield=5),
        3: product(3, store_id=200, point_yield=1),
    }

    items, stores, summary = build_cart_view(lines, products, FEE)

    assert summary.subtotal == Decimal("62.50")
    assert summary.shipping == Decimal("31.80")
    assert summary.total == Decimal("94.30")
    assert summary.total_points == 2 * 2 + 5 + 3
    assert summary.total_items == 6
    assert [s.store_id for s in stores] == [100, 200]
    assert stores[0].subtotal == Decimal("40.00")
    assert len(items) == 3


def test_line_uses_price_stored_on_line_not_current_price():
    line = _line(1, 1, 2, "10.00")
    item = build_line(line, product(1, price="99.99"))

    assert item.price == Decimal("10.00")
    assert item.subtotal == Decimal("20.00")


def test_missing_product_keeps_line_without_points_and_store():
    line = _line(1, 42, 3, "5.00")
    item = build_line(line, None)

    assert item.subtotal == Decimal("15.00")
    assert item.points == 0
    assert item.store_id is None

    summary = summarize([item], FEE)
    assert summary.shipping == Decimal("0")
    assert summary.total == Decimal("15.00")


def test_empty_cart_summary_is_zero():
    items, stores, summary = build_cart_view([], {}, FEE)

    assert items == []
    assert stores == []
    assert summary.total == Decimal("0")
    assert summary.total_points == 0
