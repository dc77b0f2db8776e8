from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime
from app.data.database import Base


class ProfileModel(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    referral_code = Column(String(16), unique=True, nullable=True)

    # cache salda - projekcja sumy points_transactions, nie zrodlo prawdy
    points_balance = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
