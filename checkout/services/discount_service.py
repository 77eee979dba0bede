# checkout/services/discount_service.py
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from checkout.repos.coupon_repo import CouponRepo
from checkout.repos.user_repo import UserRepo
from checkout.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ResolvedDiscount:
    discount_percent: int
    wallet_points: int
    wallet_balance: int
    coupon_applied: bool


class DiscountService:
    """
    Walidacja kuponu i punktow z portfela.
    Niepasujacy kupon to nie blad - po prostu 0% rabatu.
    """

    def __init__(self, db: Session):
        self.coupons = CouponRepo(db)
        self.users = UserRepo(db)

    def resolve(
        self,
        user_id: int,
        coupon_code: str | None = None,
        wallet_points_requested: int | None = None,
        now: datetime | None = None,
    ) -> ResolvedDiscount:
        now = now or datetime.now(timezone.utc)

        discount_percent = 0
        coupon_applied = False
        if coupon_code:
            coupon = self.coupons.resolve_coupon(user_id, coupon_code, now)
            if coupon:
                discount_percent = coupon.discount_percent
                coupon_applied = True
            else:
                # literowka w kodzie da 0 rabatu bez bledu, wiec przynajmniej zostaw slad w logach
                logger.warning(
                    f"Kupon {coupon_code!r} nie dotyczy usera {user_id} (nieznany, wygasly lub nieprzypisany)"
                )

        balance = self.users.get_wallet_balance(user_id)
        wallet_points = 0
        if wallet_points_requested and wallet_points_requested > 0:
            wallet_points = min(wallet_points_requested, balance)

        return ResolvedDiscount(
            discount_percent=discount_percent,
            wallet_points=wallet_points,
            wallet_balance=balance,
            coupon_applied=coupon_applied,
        )
