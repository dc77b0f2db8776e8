from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, DateTime
from app.data.database import Base


class ReferralModel(Base):
    __tablename__ = "referrals"

    id = Column(Integer, primary_key=True)
    referrer_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    # uzytkownik moze byc polecony tylko raz
    referred_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, unique=True)

    status = Column(String, nullable=False, default="pendente")  # pendente, aprovado
    points = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    approved_at = Column(DateTime(timezone=True), nullable=True)
