# checkout/api/routers/cart.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from checkout.api.deps import get_lock_service, get_notification_service
from checkout.data.database import get_db
from checkout.domain.schemas import (
    ItemIn,
    QuantityIn,
    CartOut,
    DiscountIn,
    PriceBreakdownOut,
)
from checkout.services.cart_service import CartService
from checkout.services.order_service import OrderService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("/", response_model=CartOut)
def get_cart(user_id: int = Query(...), db: Session = Depends(get_db)):
    return CartService(db).get_cart(user_id)


@router.post("/items", response_model=CartOut, status_code=201)
def add_item(
    payload: ItemIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = CartService(db)
    try:
        return svc.add_product(user_id, payload.product_id, payload.quantity)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/items/{product_id}", response_model=CartOut)
def update_item(
    product_id: int,
    payload: QuantityIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = CartService(db)
    try:
        return svc.update_quantity(user_id, product_id, payload.quantity)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_item(
    product_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = CartService(db)
    try:
        return svc.remove_product(user_id, product_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/", response_model=CartOut)
def clear_cart(user_id: int = Query(...), db: Session = Depends(get_db)):
    return CartService(db).clear_cart(user_id)


@router.post("/calculate-total", response_model=PriceBreakdownOut)
def calculate_total(
    payload: DiscountIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
    lock_service=Depends(get_lock_service),
    notification_service=Depends(get_notification_service),
):
    """
    Podglad sumy z kuponem i punktami, bez zapisu.
    """
    svc = OrderService(db, lock_service, notification_service)
    return svc.preview_total(user_id, payload.coupon_code, payload.wallet_points_used)
