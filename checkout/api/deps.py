# checkout/api/deps.py
from fastapi import HTTPException

from checkout.domain.errors import (
    CheckoutError,
    EmptyCart,
    InsufficientStock,
    CheckoutInProgress,
    InvalidPaymentStatus,
    PaymentAlreadySettled,
    OrderNotFound,
)
from checkout.services.lock_service import LockService
from checkout.services.notification_service import NotificationService
from checkout.services.payment_simulator import PaymentSimulator

_STATUS_CODES = {
    EmptyCart: 400,
    InsufficientStock: 409,
    CheckoutInProgress: 409,
    InvalidPaymentStatus: 422,
    PaymentAlreadySettled: 409,
    OrderNotFound: 404,
}


def get_lock_service() -> LockService:
    return LockService()


def get_notification_service() -> NotificationService:
    return NotificationService()


def get_payment_simulator() -> PaymentSimulator:
    return PaymentSimulator()


def http_error(e: CheckoutError) -> HTTPException:
    return HTTPException(status_code=_STATUS_CODES.get(type(e), 400), detail=e.to_dict())
