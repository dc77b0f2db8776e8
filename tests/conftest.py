import os

# baza w pamieci zamiast postgresa, ustawione przed importem app.*
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import datetime, timedelta, timezone

import pytest

import app.data.models  # noqa: F401
from app.data.database import Base, SessionLocal, engine
from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.data.models.points_transaction import PointsTransactionModel
from app.data.models.profile import ProfileModel
from app.services.cart_service import CartService
from app.services.points_auditor import PointsAuditor
from app.services.points_ledger import PointsLedger
from app.services.referral_service import ReferralService
from tests.fakes import FakeLockService, FakeProductClient, product


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def products() -> FakeProductClient:
    return FakeProductClient(
        [
            product(1, price="10.00", stock=10, store_id=100, point_yield=2),
            product(2, price="20.00", stock=5, store_id=100, point_yield=5),
            product(3, price="7.50", stock=3, store_id=200, point_yield=1),
        ]
    )


@pytest.fixture
def locks() -> FakeLockService:
    return FakeLockService()


@pytest.fixture
def cart_service(db, products, locks) -> CartService:
    return CartService(db=db, product_client=products, lock_service=locks)


@pytest.fixture
def ledger(db, locks) -> PointsLedger:
    return PointsLedger(db, locks)


@pytest.fixture
def auditor(db, ledger) -> PointsAuditor:
    return PointsAuditor(db, ledger)


@pytest.fixture
def referrals(db, ledger) -> ReferralService:
    return ReferralService(db, ledger, points=20)


@pytest.fixture
def make_profile(db):
    def _make(user_id: int, name: str = "user", code: str | None = None, balance: int = 0):
        profile = ProfileModel(
            id=user_id,
            name=name,
            referral_code=code,
            points_balance=balance,
        )
        db.add(profile)
        db.commit()
        return profile

    return _make


@pytest.fixture
def make_cart(db):
    def _make(user_id: int, lines=(), age_minutes: int = 0, status: str = "active"):
        cart = CartModel(
            user_id=user_id,
            status=status,
            version=1,
            created_at=datetime.now(timezone.utc) - timedelta(minutes=age_minutes),
        )
        db.add(cart)
        db.flush()
        for product_id, quantity, price in lines:
            db.add(
                CartItemModel(
                    cart_id=cart.id,
                    product_id=product_id,
                    quantity=quantity,
                    price=price,
                )
            )
        db.commit()
        db.refresh(cart)
        return cart

    return _make


@pytest.fixture
def add_tx(db):
    """Wiersz wpisany wprost do ksiegi, z pominieciem cache i idempotencji."""
    counter = {"n": 0}

    def _add(user_id: int, amount: int, cause: str, reference_id: str | None = None):
        counter["n"] += 1
        tx = PointsTransactionModel(
            user_id=user_id,
            amount=amount,
            cause=cause,
            reference_id=reference_id,
            created_at=datetime.now(timezone.utc) + timedelta(seconds=counter["n"]),
        )
        db.add(tx)
        db.commit()
        db.refresh(tx)
        return tx

    return _add
