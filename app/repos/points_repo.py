# app/repos/points_repo.py
from sqlalchemy import select, func

from app.data.models.points_transaction import PointsTransactionModel
from app.repos.base import BaseRepo, store_call


class PointsRepo(BaseRepo):
    """points_transactions - tylko insert i odczyt, bez update/delete."""

    @store_call
    def find_by_reference(
        self, user_id: int, cause: str, reference_id: str
    ) -> PointsTransactionModel | None:
        stmt = (
            select(PointsTransactionModel)
            .where(
                PointsTransactionModel.user_id == user_id,
                PointsTransactionModel.cause == cause,
                PointsTransactionModel.reference_id == reference_id,
            )
            .order_by(PointsTransactionModel.id)
            .limit(1)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    @store_call
    def insert(self, tx: PointsTransactionModel) -> PointsTransactionModel:
        self.db.add(tx)
        self.db.commit()
        self.db.refresh(tx)
        return tx

    @store_call
    def list_all(self, user_id: int) -> list[PointsTransactionModel]:
        stmt = (
            select(PointsTransactionModel)
            .where(PointsTransactionModel.user_id == user_id)
            .order_by(PointsTransactionModel.created_at, PointsTransactionModel.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    @store_call
    def list_page(
        self, user_id: int, page: int, page_size: int
    ) -> tuple[list[PointsTransactionModel], int]:
        if page <= 0:
            page = 1
        if page_size <= 0 or page_size > 100:
            page_size = 20

        total = self.db.execute(
            select(func.count())
            .select_from(PointsTransactionModel)
            .where(PointsTransactionModel.user_id == user_id)
        ).scalar_one()

        stmt = (
            select(PointsTransactionModel)
            .where(PointsTransactionModel.user_id == user_id)
            .order_by(PointsTransactionModel.created_at.desc(), PointsTransactionModel.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return list(self.db.execute(stmt).scalars().all()), total
