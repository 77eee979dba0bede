#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from checkout.data.models.user import UserModel
from checkout.data.models.product import ProductModel
from checkout.data.models.coupon import CouponModel, UserCouponModel
from checkout.data.models.cart_item import CartItemModel
from checkout.data.models.order import OrderModel
from checkout.data.models.order_item import OrderItemModel

__all__ = [
    "UserModel",
    "ProductModel",
    "CouponModel",
    "UserCouponModel",
    "CartItemModel",
    "OrderModel",
    "OrderItemModel",
]
