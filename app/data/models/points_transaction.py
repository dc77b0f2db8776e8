from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Index
from app.data.database import Base


class PointsTransactionModel(Base):
    """
    Ksiega punktow - tylko dopisywanie. Korekta = nowy wiersz przeciwny.
    Brak unique na (user_id, cause, reference_id): duplikaty maja byc widoczne dla audytu.
    """

    __tablename__ = "points_transactions"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=False)

    amount = Column(Integer, nullable=False)
    cause = Column(String(32), nullable=False)
    reference_id = Column(String(64), nullable=True)
    description = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_points_tx_user_cause_ref", "user_id", "cause", "reference_id"),
    )
