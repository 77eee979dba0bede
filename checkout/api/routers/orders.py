# checkout/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from checkout.api.deps import (
    get_lock_service,
    get_notification_service,
    get_payment_simulator,
    http_error,
)
from checkout.data.database import get_db
from checkout.data.models.order import PAYMENT_PENDING
from checkout.domain.errors import CheckoutError, PaymentAlreadySettled
from checkout.domain.schemas import (
    DiscountIn,
    OrderPlacedOut,
    OrderOut,
    PaymentStatusIn,
    SettlementOut,
    PaymentScheduledOut,
)
from checkout.services.order_service import OrderService
from checkout.services.payment_service import PaymentService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db, lock_service, notification_service):
    return OrderService(db, lock_service, notification_service)


@router.post("/place", response_model=OrderPlacedOut, status_code=201)
def place_order(
    payload: DiscountIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
    lock_service=Depends(get_lock_service),
    notification_service=Depends(get_notification_service),
):
    """
    Sklada zamowienie z koszyka usera, platnosc w stanie pending.
    """
    svc = get_service(db, lock_service, notification_service)
    try:
        return svc.place_order(user_id, payload.coupon_code, payload.wallet_points_used)
    except CheckoutError as e:
        raise http_error(e)


@router.get("/", response_model=List[OrderOut])
def list_orders(
    user_id: int = Query(...),
    db: Session = Depends(get_db),
    lock_service=Depends(get_lock_service),
    notification_service=Depends(get_notification_service),
):
    return get_service(db, lock_service, notification_service).list_orders(user_id)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
    lock_service=Depends(get_lock_service),
    notification_service=Depends(get_notification_service),
):
    """
    Pobiera szczegóły zamówienia.
    """
    svc = get_service(db, lock_service, notification_service)
    try:
        return svc.get_order(order_id, user_id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except CheckoutError as e:
        raise http_error(e)


@router.post("/{order_id}/pay", response_model=PaymentScheduledOut, status_code=202)
def pay_order(
    order_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
    lock_service=Depends(get_lock_service),
    notification_service=Depends(get_notification_service),
    simulator=Depends(get_payment_simulator),
):
    """
    Uruchamia symulowana platnosc - wynik przyjdzie pozniej na /orders/payment/{id}.
    """
    svc = get_service(db, lock_service, notification_service)
    try:
        order = svc.get_order(order_id, user_id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except CheckoutError as e:
        raise http_error(e)

    if order["payment_status"] != PAYMENT_PENDING:
        raise http_error(PaymentAlreadySettled(order_id))

    task_id = simulator.schedule(order_id)
    return {"order_id": order_id, "payment_status": PAYMENT_PENDING, "task_id": task_id}


@router.put("/payment/{order_id}", response_model=SettlementOut)
def settle_payment(
    order_id: int,
    payload: PaymentStatusIn,
    db: Session = Depends(get_db),
    notification_service=Depends(get_notification_service),
):
    """
    Callback bramki platnosci: pending -> success | failed.
    """
    svc = PaymentService(db, notification_service)
    try:
        return svc.settle_payment(order_id, payload.status)
    except CheckoutError as e:
        raise http_error(e)
