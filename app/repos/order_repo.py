# app/repos/order_repo.py
from datetime import datetime, timezone

from sqlalchemy import update

from app.data.models.order import OrderModel
from app.domain.enums import OrderStatus
from app.repos.base import BaseRepo, store_call


class OrderRepo(BaseRepo):

    @store_call
    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    @store_call
    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    @store_call
    def mark_confirmed(self, order_id: int) -> int:
        #tylko PENDING -> CONFIRMED, drugi raz rowcount 0
        stmt = (
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.status == OrderStatus.PENDING.value)
            .values(status=OrderStatus.CONFIRMED.value, confirmed_at=datetime.now(timezone.utc))
        )
        return self.db.execute(stmt).rowcount
