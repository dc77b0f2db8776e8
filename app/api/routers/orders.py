# app/api/routers/orders.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.deps import get_cart_service, get_ledger
from app.data.database import get_db
from app.domain.schemas import OrderOut
from app.services.cart_service import CartService
from app.services.order_service import OrderService
from app.services.points_ledger import PointsLedger

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(
    db: Session = Depends(get_db),
    cart_service: CartService = Depends(get_cart_service),
    ledger: PointsLedger = Depends(get_ledger),
):
    return OrderService(db, cart_service, ledger)


@router.post("/", response_model=OrderOut, status_code=201)
def checkout(
    user_id: int = Query(...),
    svc: OrderService = Depends(get_service),
):
    """
    Tworzy zamówienie z aktywnego koszyka i dezaktywuje koszyk.
    """
    return svc.checkout(user_id)


@router.post("/{order_id}/confirm", response_model=OrderOut)
def confirm(order_id: int, svc: OrderService = Depends(get_service)):
    """
    Potwierdzenie zakupu: punkty compra + zatwierdzenie polecenia.
    """
    return svc.confirm_order(order_id)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user_id: int = Query(...),
    svc: OrderService = Depends(get_service),
):
    """
    Pobiera szczegóły zamówienia.
    """
    try:
        return svc.get_order(order_id, user_id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
