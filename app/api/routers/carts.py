#app/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException, Query, Response

from app.api.deps import get_cart_service
from app.domain.schemas import CartOut, ItemIn, QuantityIn
from app.services.cart_service import CartService

router = APIRouter(prefix="/carts", tags=["carts"])


@router.get("/me", response_model=CartOut)
def get_cart(
    user_id: int = Query(...),
    svc: CartService = Depends(get_cart_service),
):
    return svc.get_cart(user_id)


@router.post("/me/items", response_model=CartOut)
def add_item(
    payload: ItemIn,
    user_id: int = Query(...),
    svc: CartService = Depends(get_cart_service),
):
    return svc.add_to_cart(
        user_id=user_id,
        product_id=payload.product_id,
        quantity=payload.quantity,
    )


@router.patch("/me/items/{line_id}", response_model=CartOut)
def set_quantity(
    line_id: int,
    payload: QuantityIn,
    user_id: int = Query(...),
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.update_line(user_id, line_id, payload.quantity)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))


@router.delete("/me/items/{line_id}", response_model=CartOut)
def remove_item(
    line_id: int,
    user_id: int = Query(...),
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.delete_line(user_id, line_id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))


@router.post("/me/clear", status_code=204)
def clear_cart(
    user_id: int = Query(...),
    svc: CartService = Depends(get_cart_service),
):
    svc.clear_cart(user_id)
    return Response(status_code=204)
