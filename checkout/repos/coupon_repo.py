# checkout/repos/coupon_repo.py
from datetime import datetime

from sqlalchemy import select, or_
from sqlalchemy.orm import Session

from checkout.data.models.coupon import CouponModel, UserCouponModel


class CouponRepo:
    def __init__(self, db: Session):
        self.db = db

    def resolve_coupon(self, user_id: int, code: str, now: datetime) -> CouponModel | None:
        """Kupon tylko jesli jest przypisany do usera i nie wygasl."""
        stmt = (
            select(CouponModel)
            .join(UserCouponModel, UserCouponModel.coupon_id == CouponModel.id)
            .where(
                CouponModel.code == code,
                UserCouponModel.user_id == user_id,
                or_(CouponModel.valid_until.is_(None), CouponModel.valid_until > now),
            )
            .limit(1)
        )
        return self.db.execute(stmt).scalar_one_or_none()

