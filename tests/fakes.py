from contextlib import contextmanager
from decimal import Decimal

import requests

from app.domain.errors import ConcurrentModification, NotFound, StoreUnavailable
from app.domain.schemas import ProductSnapshot


def product(
    product_id: int,
    *,
    price: str = "10.00",
    stock: int = 10,
    store_id: int | None = 1,
    point_yield: int = 0,
) -> ProductSnapshot:
    return ProductSnapshot(
        id=product_id,
        name=f"produto-{product_id}",
        price=Decimal(price),
        stock=stock,
        store_id=store_id,
        point_yield=point_yield,
    )


class FakeProductClient:
    def __init__(self, products: list[ProductSnapshot]) -> None:
        self.products = {p.id: p for p in products}
        self.calls: list[int] = []
        self.down = False

    def fetch_product(self, product_id: int) -> ProductSnapshot:
        self.calls.append(product_id)
        if self.down:
            raise StoreUnavailable("Serwis produktow jest niedostepny")
        if product_id not in self.products:
            raise NotFound(f"Produkt {product_id} nie istnieje")
        return self.products[product_id]

    def fetch_many(self, product_ids, strict: bool = False) -> dict[int, ProductSnapshot]:
        if strict:
            return {pid: self.fetch_product(pid) for pid in set(product_ids)}

        found = {}
        for product_id in set(product_ids):
            try:
                found[product_id] = self.fetch_product(product_id)
            except (NotFound, StoreUnavailable):
                continue
        return found

    def set(self, product_id: int, **changes) -> None:
        self.products[product_id] = self.products[product_id].model_copy(update=changes)


class FakeLockService:
    def __init__(self) -> None:
        self.acquired: list[int] = []
        self.held: set[int] = set()
        self.busy: set[int] = set()

    @contextmanager
    def user_lock(self, user_id: int):
        if user_id in self.busy or user_id in self.held:
            raise ConcurrentModification()
        self.acquired.append(user_id)
        self.held.add(user_id)
        try:
            yield
        finally:
            self.held.discard(user_id)


class FakeNotificationService:
    def __init__(self) -> None:
        self.sent: list[tuple[int, int, str]] = []

    def send_points_notification(self, user_id: int, amount: int, cause: str) -> None:
        self.sent.append((user_id, amount, cause))


class FakeRedis:
    """SET NX EX i porownaj-usun skryptem, bez prawdziwego serwera."""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}

    def set(self, name, value, nx=False, ex=None):
        if nx and name in self.store:
            return None
        self.store[name] = value
        return True

    def eval(self, script, numkeys, key, token):
        if self.store.get(key) == token:
            del self.store[key]
            return 1
        return 0


class FakeResponse:
    def __init__(self, status_code: int, payload: dict | None = None) -> None:
        self.status_code = status_code
        self.payload = payload or {}

    def json(self) -> dict:
        return self.payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)
