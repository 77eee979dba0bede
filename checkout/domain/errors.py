# checkout/domain/errors.py
"""
Bledy domenowe checkoutu i rozliczania platnosci.

Kazdy blad ma stabilny ``kind`` - klient API rozpoznaje po nim przypadek,
message jest tylko dla czlowieka.
"""


class CheckoutError(Exception):
    kind = "checkout_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class EmptyCart(CheckoutError):
    kind = "empty_cart"

    def __init__(self, user_id: int):
        super().__init__("Cart is empty")
        self.user_id = user_id


class InsufficientStock(CheckoutError):
    kind = "insufficient_stock"

    def __init__(self, product_id: int):
        super().__init__(f"Insufficient stock for product {product_id}")
        self.product_id = product_id


class CheckoutInProgress(CheckoutError):
    kind = "checkout_in_progress"

    def __init__(self, user_id: int):
        super().__init__(f"Another checkout is already running for user {user_id}")
        self.user_id = user_id


class InvalidPaymentStatus(CheckoutError):
    kind = "invalid_payment_status"

    def __init__(self, outcome):
        super().__init__(f"Invalid payment status: {outcome!r}")
        self.outcome = outcome


class PaymentAlreadySettled(CheckoutError):
    kind = "payment_already_settled"

    def __init__(self, order_id: int):
        super().__init__(f"Order {order_id} payment already processed")
        self.order_id = order_id


class OrderNotFound(CheckoutError):
    kind = "order_not_found"

    def __init__(self, order_id: int):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id
