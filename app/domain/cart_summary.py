# app/domain/cart_summary.py
"""
Podsumowanie koszyka jest zawsze wyliczane, nigdy zapisywane.

subtotal = suma(ilosc * cena z chwili dodania)
total_points = suma(ilosc * punkty produktu)
shipping = stala oplata * liczba roznych sklepow
"""
from decimal import Decimal
from typing import Iterable, Mapping

from app.domain.schemas import (
    CartLineOut,
    CartSummaryOut,
    ProductSnapshot,
    StoreGroupOut,
)

ZERO = Decimal("0.00")


def build_line(line, product: ProductSnapshot | None) -> CartLineOut:
    #produkt moze byc niedostepny - linia zostaje, bez punktow i sklepu
    price = Decimal(line.price)
    return CartLineOut(
        id=line.id,
        product_id=line.product_id,
        product_name=product.name if product else "",
        quantity=line.quantity,
        price=price,
        subtotal=price * line.quantity,
        points=(product.point_yield if product else 0) * line.quantity,
        store_id=product.store_id if product else None,
    )


def group_by_store(lines: Iterable[CartLineOut]) -> list[StoreGroupOut]:
    groups: dict[int | None, list[CartLineOut]] = {}
    for line in lines:
        groups.setdefault(line.store_id, []).append(line)

    return [
        StoreGroupOut(
            store_id=store_id,
            lines=store_lines,
            subtotal=sum((l.subtotal for l in store_lines), ZERO),
        )
        for store_id, store_lines in groups.items()
    ]


def summarize(lines: list[CartLineOut], fee_per_store: Decimal) -> CartSummaryOut:
    subtotal = sum((l.subtotal for l in lines), ZERO)
    store_ids = {l.store_id for l in lines if l.store_id is not None}
    shipping = fee_per_store * len(store_ids)

    return CartSummaryOut(
        subtotal=subtotal,
        shipping=shipping,
        total=subtotal + shipping,
        total_points=sum(l.points for l in lines),
        total_items=sum(l.quantity for l in lines),
    )


def build_cart_view(
    lines: Iterable,
    products: Mapping[int, ProductSnapshot],
    fee_per_store: Decimal,
) -> tuple[list[CartLineOut], list[StoreGroupOut], CartSummaryOut]:
    items = [build_line(line, products.get(line.product_id)) for line in lines]
    return items, group_by_store(items), summarize(items, fee_per_store)
