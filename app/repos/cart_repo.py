# app/repos/cart_repo.py
from sqlalchemy import select, update, delete

from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.domain.enums import CartStatus
from app.repos.base import BaseRepo, store_call


class CartRepo(BaseRepo):
    """
    Dostep do carts i cart_items. Metody nie commituja, chyba ze nazwa mowi inaczej,
    granice jednostki pracy ustala serwis.
    """

    # ------- carts -------
    @store_call
    def get_cart(self, cart_id: int) -> CartModel | None:
        return self.db.get(CartModel, cart_id)

    @store_call
    def list_active_carts(self, user_id: int, limit: int) -> list[CartModel]:
        #najnowszy pierwszy, id jako remis przy tym samym created_at
        stmt = (
            select(CartModel)
            .where(CartModel.user_id == user_id, CartModel.status == CartStatus.ACTIVE.value)
            .order_by(CartModel.created_at.desc(), CartModel.id.desc())
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())

    @store_call
    def create_cart(self, user_id: int) -> CartModel:
        cart = CartModel(user_id=user_id, status=CartStatus.ACTIVE.value, version=1)
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    @store_call
    def update_cart_version(self, cart_id: int, old_version: int, new_data: dict) -> int:
        #compare-and-swap: update set version = old + 1 where id = ? and version = old
        stmt = (
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.version == old_version)
            .values(**new_data)
        )
        result = self.db.execute(stmt)
        return result.rowcount

    @store_call
    def bump_version(self, cart_id: int) -> int:
        stmt = (
            update(CartModel)
            .where(CartModel.id == cart_id)
            .values(version=CartModel.version + 1)
        )
        return self.db.execute(stmt).rowcount

    @store_call
    def set_cart_status(self, cart_id: int, status: CartStatus) -> int:
        stmt = (
            update(CartModel)
            .where(CartModel.id == cart_id)
            .values(status=status.value, version=CartModel.version + 1)
        )
        return self.db.execute(stmt).rowcount

    # ------- cart items -------
    @store_call
    def get_cart_items(self, cart_id: int) -> list[CartItemModel]:
        stmt = (
            select(CartItemModel)
            .where(CartItemModel.cart_id == cart_id)
            .order_by(CartItemModel.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    @store_call
    def get_cart_item(self, cart_id: int, product_id: int) -> CartItemModel | None:
        stmt = select(CartItemModel).where(
            CartItemModel.cart_id == cart_id,
            CartItemModel.product_id == product_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    @store_call
    def get_line(self, line_id: int) -> CartItemModel | None:
        return self.db.get(CartItemModel, line_id)

    @store_call
    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    @store_call
    def merge_line(self, cart_id: int, product_id: int, quantity: int, price) -> CartItemModel:
        """
        Regula scalania linii: ta sama para (koszyk, produkt) -> dodaj ilosc,
        inaczej nowa linia z podana cena. Bez walidacji stanu.
        """
        existing = self.get_cart_item(cart_id, product_id)
        if existing:
            existing.quantity += quantity
            self.db.flush()
            return existing

        return self.add_cart_item(
            CartItemModel(
                cart_id=cart_id,
                product_id=product_id,
                quantity=quantity,
                price=price,
            )
        )

    @store_call
    def delete_line(self, line_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel)
            .where(CartItemModel.id == line_id)
        )
        return result.rowcount

    @store_call
    def delete_lines(self, line_ids: list[int]) -> int:
        if not line_ids:
            return 0
        result = self.db.execute(
            delete(CartItemModel)
            .where(CartItemModel.id.in_(line_ids))
        )
        return result.rowcount
