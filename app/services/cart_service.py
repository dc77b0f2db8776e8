# app/services/cart_service.py
from decimal import Decimal

from sqlalchemy.orm import Session

from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.domain.cart_summary import build_cart_view
from app.domain.enums import CartStatus
from app.domain.errors import ConcurrentModification, InvalidQuantity, NotFound, OutOfStock
from app.domain.schemas import CartOut
from app.repos.cart_repo import CartRepo
from app.services.cart_consolidator import CartConsolidator
from app.services.product_client import ProductClient
from app.services.lock_service import LockService
from app.utils.settings import SHIPPING_FEE_PER_STORE
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Linie koszyka: dodanie (scalanie ilosci), zmiana ilosci, usuniecie.

    commands (add, set, remove, clear) modyfikuja stan pod lockiem uzytkownika
    i z optimistic locking na carts.version, query (get) tylko odczyt + konsolidacja.
    Podsumowanie koszyka zawsze wyliczane.
    """

    def __init__(
        self,
        db: Session,
        product_client: ProductClient,
        lock_service: LockService,
        fee_per_store: Decimal = SHIPPING_FEE_PER_STORE,
    ):
        self.repo = CartRepo(db)
        self.consolidator = CartConsolidator(db)
        self.product_client = product_client
        self.lock_service = lock_service
        self.fee_per_store = fee_per_store

    #query
    def get_cart(self, user_id: int) -> CartOut:
        #konsolidacja moze pisac, wiec tez pod lockiem
        with self.lock_service.user_lock(user_id):
            cart = self.consolidator.ensure_single_active_cart(user_id)
        return self.build_view(cart)

    def build_view(self, cart: CartModel, strict: bool = False) -> CartOut:
        """strict=True: kazdy produkt musi sie wczytac, inaczej blad (checkout)."""
        lines = self.repo.get_cart_items(cart.id)
        products = self.product_client.fetch_many((l.product_id for l in lines), strict=strict)
        items, stores, summary = build_cart_view(lines, products, self.fee_per_store)

        return CartOut(
            cart_id=cart.id,
            user_id=cart.user_id,
            status=cart.status,
            items=items,
            stores=stores,
            summary=summary,
        )

    #commands na poziomie uzytkownika
    def add_to_cart(self, user_id: int, product_id: int, quantity: int) -> CartOut:
        with self.lock_service.user_lock(user_id):
            cart = self.consolidator.ensure_single_active_cart(user_id)
            self.add_line(cart, product_id, quantity)
        return self.build_view(cart)

    def update_line(self, user_id: int, line_id: int, quantity: int) -> CartOut:
        with self.lock_service.user_lock(user_id):
            cart = self.consolidator.ensure_single_active_cart(user_id)
            self._owned_line(cart, user_id, line_id)
            self.set_quantity(line_id, quantity)
        return self.build_view(cart)

    def delete_line(self, user_id: int, line_id: int) -> CartOut:
        with self.lock_service.user_lock(user_id):
            cart = self.consolidator.ensure_single_active_cart(user_id)
            self._owned_line(cart, user_id, line_id)
            self.remove_line(line_id)
        return self.build_view(cart)

    def clear_cart(self, user_id: int) -> int:
        """Dezaktywuje aktywny koszyk; nowy powstanie przy nastepnym odczycie."""
        with self.lock_service.user_lock(user_id):
            cart = self.consolidator.ensure_single_active_cart(user_id)
            self.deactivate_cart(cart)

        logger.info(f"Koszyk {cart.id} uzytkownika {user_id} wyczyszczony")
        return cart.id

    def deactivate_cart(self, cart: CartModel) -> None:
        self._swap_version(cart, {"status": CartStatus.INACTIVE.value})

    #operacje na liniach
    def add_line(self, cart: CartModel, product_id: int, quantity: int) -> CartItemModel:
        if quantity < 1:
            raise InvalidQuantity()

        product = self.product_client.fetch_product(product_id)

        existing = self.repo.get_cart_item(cart.id, product_id)
        current = existing.quantity if existing else 0
        if current + quantity > product.stock:
            raise OutOfStock(product_id, current + quantity, product.stock)

        if existing:
            logger.info(
                f"Produkt {product_id} już jest w koszyku, zwiekszam ilosc "
                f"z {current} do {current + quantity}"
            )
        else:
            logger.info(f"Dodaje nowy produkt {product_id} do koszyka {cart.id}")

        #cena tylko dla nowej linii, istniejaca zachowuje cene z chwili dodania
        line = self.repo.merge_line(cart.id, product_id, quantity, product.price)
        self._swap_version(cart)
        return line

    def set_quantity(self, line_id: int, quantity: int) -> CartItemModel:
        if quantity < 1:
            raise InvalidQuantity("Ilosc musi byc wieksza niz 0, uzyj usuniecia linii")

        line = self.repo.get_line(line_id)
        if not line:
            raise NotFound(f"Linia koszyka {line_id} nie istnieje")

        product = self.product_client.fetch_product(line.product_id)
        if quantity > product.stock:
            raise OutOfStock(line.product_id, quantity, product.stock)

        cart = self.repo.get_cart(line.cart_id)
        line.quantity = quantity
        self._swap_version(cart)

        logger.info(f"Linia {line_id} ustawiona na ilosc {quantity}")
        return line

    def remove_line(self, line_id: int) -> None:
        line = self.repo.get_line(line_id)
        if not line:
            raise NotFound(f"Linia koszyka {line_id} nie istnieje")

        cart = self.repo.get_cart(line.cart_id)
        self.repo.delete_line(line_id)
        self._swap_version(cart)

        logger.info(f"Linia {line_id} usunieta z koszyka {cart.id}")

    def _owned_line(self, cart: CartModel, user_id: int, line_id: int) -> CartItemModel:
        line = self.repo.get_line(line_id)
        if not line:
            raise NotFound(f"Linia koszyka {line_id} nie istnieje")

        if line.cart_id != cart.id:
            owner = self.repo.get_cart(line.cart_id)
            if owner is None or owner.user_id != user_id:
                raise PermissionError("Brak dostępu do koszyka")
            raise NotFound(f"Linia {line_id} nie nalezy do aktywnego koszyka")

        return line

    def _swap_version(self, cart: CartModel, extra: dict | None = None) -> None:
        # Optimistic locking
        # np w bazie update set version 2 where id 1 and version 1
        old_version = cart.version
        rowcount = self.repo.update_cart_version(
            cart_id=cart.id,
            old_version=old_version,
            new_data={"version": old_version + 1, **(extra or {})},
        )

        if rowcount == 0:
            self.repo.rollback()
            raise ConcurrentModification(
                "Konflikt wspolbieznosci - koszyk zostal zmodyfikowany przez inna operacje"
            )

        self.repo.commit()
