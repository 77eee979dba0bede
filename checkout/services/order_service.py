# checkout/services/order_service.py
from typing import Dict, Any

from sqlalchemy.orm import Session

from checkout.data.models.order import OrderModel, PAYMENT_PENDING, ORDER_PENDING
from checkout.data.models.order_item import OrderItemModel
from checkout.domain.errors import EmptyCart, InsufficientStock, OrderNotFound
from checkout.repos.cart_repo import CartRepo
from checkout.repos.order_repo import OrderRepo
from checkout.repos.product_repo import ProductRepo
from checkout.repos.user_repo import UserRepo
from checkout.services.discount_service import DiscountService
from checkout.services.lock_service import LockService
from checkout.services.notification_service import NotificationService, notify_after_commit
from checkout.services.pricing import calculate_breakdown, to_money
from checkout.utils.logging import get_logger

logger = get_logger(__name__)


def order_to_dict(order: OrderModel, with_items: bool = True) -> Dict[str, Any]:
    data = {
        "id": order.id,
        "user_id": order.user_id,
        "total_price": order.total_price,
        "discount_amount": order.discount_amount,
        "wallet_points_used": order.wallet_points_used,
        "coupon_code": order.coupon_code,
        "payment_status": order.payment_status,
        "order_status": order.order_status,
        "created_at": order.created_at,
        "items": [],
    }
    if with_items:
        data["items"] = [
            {"product_id": i.product_id, "quantity": i.quantity, "price": i.price}
            for i in order.items
        ]
    return data


class OrderService:
    """
    Serwis odpowiedzialny za checkout: koszyk -> zamowienie.

    query - podglad ceny, odczyt zamowien
    command - place_order, jedna transakcja albo nic
    """

    def __init__(
        self,
        db: Session,
        lock_service: LockService | None = None,
        notification_service: NotificationService | None = None,
    ):
        self.db = db
        self.carts = CartRepo(db)
        self.products = ProductRepo(db)
        self.users = UserRepo(db)
        self.repo = OrderRepo(db)
        self.discounts = DiscountService(db)
        self.lock_service = lock_service or LockService()
        self.notification_service = notification_service or NotificationService()

    #query
    def preview_total(
        self,
        user_id: int,
        coupon_code: str | None = None,
        wallet_points_used: int | None = None,
    ) -> Dict[str, Any]:
        """
        Use Case: podglad sumy koszyka z rabatem (Query).
        Mozna wolac dowolnie czesto, niczego nie zapisuje.
        """
        rows = self.carts.list_cart_lines(user_id)

        if not rows:
            breakdown = calculate_breakdown([])
            return {**breakdown.as_dict(), "coupon_applied": False}

        resolved = self.discounts.resolve(user_id, coupon_code, wallet_points_used)
        breakdown = calculate_breakdown(
            [(product.price, item.quantity) for item, product in rows],
            discount_percent=resolved.discount_percent,
            wallet_points=resolved.wallet_points,
            wallet_balance=resolved.wallet_balance,
        )
        return {**breakdown.as_dict(), "coupon_applied": resolved.coupon_applied}

    #commands
    def place_order(
        self,
        user_id: int,
        coupon_code: str | None = None,
        wallet_points_used: int | None = None,
    ) -> Dict[str, Any]:
        """
        Use Case: zlozenie zamowienia z koszyka (Command).

        1. Linie koszyka z aktualna cena i stanem (wiersze produktow zablokowane)
        2. Kazda linia quantity <= stock, inaczej InsufficientStock
        3. Kupon i punkty walidowane jeszcze raz po stronie serwera
        4. Wyliczenie ceny
        5. Zamowienie + linie, zdjecie stanu, obciazenie portfela, czyszczenie koszyka
           - wszystko w jednej transakcji
        """
        with self.lock_service.checkout_lock(user_id):
            try:
                result = self._place_order(user_id, coupon_code, wallet_points_used)
                self.repo.commit()
            except Exception:
                self.repo.rollback()
                raise

        logger.info(
            f"Order {result['order_id']} placed for user {user_id}: "
            f"total {result['total_price']}, discount {result['discount_amount']}, "
            f"points {result['wallet_points_used']}"
        )
        notify_after_commit(self.notification_service.order_placed, user_id, result["order_id"])
        return result

    def _place_order(self, user_id, coupon_code, wallet_points_used) -> Dict[str, Any]:
        rows = self.carts.list_cart_lines(user_id)
        if not rows:
            raise EmptyCart(user_id)

        # FOR UPDATE na produktach - drugi checkout tych samych produktow czeka na nasz commit
        locked = self.products.lock_products(item.product_id for item, _ in rows)

        lines = []
        for item, _ in rows:
            product = locked.get(item.product_id)
            if product is None or item.quantity > product.stock:
                logger.warning(
                    f"Brak stanu dla produktu {item.product_id} (user {user_id}, "
                    f"chce {item.quantity}, jest {product.stock if product else 0})"
                )
                raise InsufficientStock(item.product_id)
            lines.append((product.id, product.price, item.quantity))

        resolved = self.discounts.resolve(user_id, coupon_code, wallet_points_used)
        breakdown = calculate_breakdown(
            [(price, qty) for _, price, qty in lines],
            discount_percent=resolved.discount_percent,
            wallet_points=resolved.wallet_points,
            wallet_balance=resolved.wallet_balance,
        )

        order = self.repo.add_order(
            OrderModel(
                user_id=user_id,
                total_price=breakdown.total,
                discount_amount=breakdown.discount,
                wallet_points_used=breakdown.wallet_deduction,
                coupon_code=coupon_code or None,
                payment_status=PAYMENT_PENDING,
                order_status=ORDER_PENDING,
            )
        )

        for product_id, price, quantity in lines:
            self.db.add(
                OrderItemModel(
                    order_id=order.id,
                    product_id=product_id,
                    quantity=quantity,
                    price=to_money(price),
                )
            )
            # warunkowy UPDATE, 0 rows affected = ktos zdazyl wykupic
            if self.products.decrement_stock(product_id, quantity) == 0:
                logger.warning(f"Konflikt stanu produktu {product_id} przy zamowieniu usera {user_id}")
                raise InsufficientStock(product_id)

        if breakdown.wallet_deduction > 0:
            if self.users.debit_wallet(user_id, breakdown.wallet_deduction) == 0:
                raise RuntimeError(
                    "Konflikt wspolbieznosci - saldo portfela zmienilo sie w trakcie checkoutu"
                )

        self.carts.clear_cart(user_id)
        self.db.flush()

        return {
            "order_id": order.id,
            "total_price": breakdown.total,
            "discount_amount": breakdown.discount,
            "wallet_points_used": breakdown.wallet_deduction,
            "coupon_code": coupon_code or None,
            "payment_status": PAYMENT_PENDING,
        }

    #query
    def get_order(self, order_id: int, user_id: int) -> Dict[str, Any]:
        order = self.repo.get_order(order_id)

        if not order:
            raise OrderNotFound(order_id)

        if order.user_id != user_id:
            raise PermissionError("Brak dostępu do zamówienia")

        return order_to_dict(order)

    def list_orders(self, user_id: int):
        return [order_to_dict(o, with_items=False) for o in self.repo.list_orders(user_id)]
