# app/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List
from decimal import Decimal
from datetime import datetime


class ProductSnapshot(BaseModel):
    """Odczyt produktu z product-service (tylko do odczytu)."""

    id: int
    name: str = ""
    price: Decimal
    stock: int
    store_id: int | None = None
    point_yield: int = 0


class ItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")
    quantity: int = Field(1, description="Ilość produktu")


class QuantityIn(BaseModel):
    """Schema dla ustawienia ilosci linii."""

    quantity: int


class CartLineOut(BaseModel):
    id: int
    product_id: int
    product_name: str = ""
    quantity: int
    price: Decimal
    subtotal: Decimal
    points: int
    store_id: int | None = None


class StoreGroupOut(BaseModel):
    """Linie koszyka pogrupowane po sklepie wlasciciela produktu."""

    store_id: int | None
    lines: List[CartLineOut]
    subtotal: Decimal


class CartSummaryOut(BaseModel):
    subtotal: Decimal
    shipping: Decimal
    total: Decimal
    total_points: int
    total_items: int


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    cart_id: int
    user_id: int
    status: str
    items: List[CartLineOut]
    stores: List[StoreGroupOut]
    summary: CartSummaryOut

    model_config = ConfigDict(from_attributes=True)


class ProfileCreate(BaseModel):
    """Schema dla tworzenia profilu."""

    id: int = Field(..., gt=0, description="ID użytkownika (musi być > 0)")
    name: str = Field(..., min_length=1, max_length=100, description="Imię użytkownika")


class ProfileOut(BaseModel):
    id: int
    name: str
    referral_code: str | None = None
    points_balance: int

    model_config = ConfigDict(from_attributes=True)


class PointsTransactionOut(BaseModel):
    id: int
    user_id: int
    amount: int
    cause: str
    reference_id: str | None = None
    description: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LedgerResult(BaseModel):
    """Wynik zapisu w ksiedze; created=False gdy zapis byl duplikatem (no-op)."""

    transaction: PointsTransactionOut
    created: bool


class TransactionPage(BaseModel):
    items: List[PointsTransactionOut]
    total: int


class RedeemIn(BaseModel):
    points: int = Field(..., gt=0)
    reference_id: str | None = None
    description: str | None = None


class AdjustIn(BaseModel):
    amount: int
    reason: str = Field(..., min_length=1, max_length=200)
    reference_id: str | None = None


class AuditDetails(BaseModel):
    """Sumy z wierszy liczonych do salda (bez duplikatow i ajuste-automatico)."""

    total_earned: int
    total_redeemed: int
    audit_timestamp: datetime


class AuditResult(BaseModel):
    user_id: int
    profile_balance: int
    transaction_balance: int
    difference: int
    duplicate_transactions: int
    status: str  # "ok" | "discrepancy"
    details: AuditDetails


class TransactionSummary(BaseModel):
    total_earned: int
    total_redeemed: int
    net_balance: int


class ReferralApplyIn(BaseModel):
    user_id: int = Field(..., gt=0)
    code: str = Field(..., min_length=1, max_length=32)


class ReferralOut(BaseModel):
    id: int
    referrer_id: int
    referred_id: int
    status: str
    points: int
    created_at: datetime
    approved_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ReferralInfoOut(BaseModel):
    code: str
    points_balance: int
    total_referrals: int
    pending_referrals: int
    approved_referrals: int
    points_earned: int
    referrals: List[ReferralOut]


class OrderOut(BaseModel):
    """Schema dla zamówienia (response)."""

    id: int
    cart_id: int
    user_id: int
    status: str
    subtotal: Decimal
    shipping: Decimal
    total: Decimal
    points: int
    created_at: datetime
    confirmed_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
