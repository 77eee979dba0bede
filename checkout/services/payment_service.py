# checkout/services/payment_service.py
from typing import Dict, Any

from sqlalchemy.orm import Session

from checkout.data.models.order import (
    PAYMENT_SUCCESS,
    PAYMENT_FAILED,
    ORDER_PROCESSING,
    ORDER_CANCELLED,
)
from checkout.domain.errors import InvalidPaymentStatus, OrderNotFound, PaymentAlreadySettled
from checkout.repos.order_repo import OrderRepo
from checkout.repos.product_repo import ProductRepo
from checkout.repos.user_repo import UserRepo
from checkout.services.notification_service import NotificationService, notify_after_commit
from checkout.utils.logging import get_logger

logger = get_logger(__name__)

# pending -> success | failed, oba koncowe
_TRANSITIONS = {
    PAYMENT_SUCCESS: ORDER_PROCESSING,
    PAYMENT_FAILED: ORDER_CANCELLED,
}


class PaymentService:
    """
    Rozliczenie platnosci zamowienia.

    Wynik (success/failed) przychodzi z zewnatrz, ten serwis go nie losuje.
    Przejscie z pending jest jednorazowe - powtorka konczy sie
    PaymentAlreadySettled, wiec kompensacja nie wykona sie dwa razy.
    """

    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.products = ProductRepo(db)
        self.users = UserRepo(db)
        self.notification_service = notification_service or NotificationService()

    def settle_payment(self, order_id: int, outcome: str) -> Dict[str, Any]:
        if not isinstance(outcome, str) or outcome not in _TRANSITIONS:
            raise InvalidPaymentStatus(outcome)

        order_status = _TRANSITIONS[outcome]

        try:
            order = self.repo.get_order(order_id)
            if not order:
                raise OrderNotFound(order_id)

            user_id = order.user_id
            wallet_points_used = order.wallet_points_used

            # warunek payment_status = pending w samym UPDATE
            rowcount = self.repo.settle_payment_status(order_id, outcome, order_status)
            if rowcount == 0:
                logger.info(f"Order {order_id} juz rozliczony ({order.payment_status}), pomijam {outcome}")
                raise PaymentAlreadySettled(order_id)

            if outcome == PAYMENT_FAILED:
                self._compensate(order_id, user_id, wallet_points_used)

            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Order {order_id} payment {outcome}, order status {order_status}")
        notify_after_commit(self.notification_service.payment_settled, user_id, order_id, outcome)

        return {
            "order_id": order_id,
            "payment_status": outcome,
            "order_status": order_status,
        }

    def _compensate(self, order_id: int, user_id: int, wallet_points_used: int):
        """Oddaj stan magazynu i punkty zdjete przy checkoucie."""
        for item in self.repo.get_order_items(order_id):
            self.products.increment_stock(item.product_id, item.quantity)
            logger.info(f"Order {order_id}: zwrot {item.quantity} szt. produktu {item.product_id}")

        if wallet_points_used and wallet_points_used > 0:
            self.users.credit_wallet(user_id, wallet_points_used)
            logger.info(f"Order {order_id}: zwrot {wallet_points_used} punktow dla usera {user_id}")
