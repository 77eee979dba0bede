# checkout/data/seed.py
from datetime import datetime, timezone, timedelta
from decimal import Decimal

from checkout.data.database import SessionLocal
from checkout.data.models import UserModel, ProductModel, CouponModel, UserCouponModel
from checkout.utils.logging import get_logger

logger = get_logger(__name__)


def seed(session_factory=SessionLocal):
    db = session_factory()
    try:
        # tylko pusta baza
        if db.query(UserModel).first():
            return

        db.add_all(
            [
                UserModel(id=1, name="Alice", wallet_points=20),
                UserModel(id=2, name="Bob", wallet_points=0),
                ProductModel(id=1, seller_id=1, name="Keyboard", price=Decimal("199.99"), stock=10),
                ProductModel(id=2, seller_id=1, name="Mouse", price=Decimal("49.50"), stock=25),
                ProductModel(id=3, seller_id=2, name="Monitor", price=Decimal("899.00"), stock=1),
                CouponModel(id=1, code="WELCOME10", discount_percent=10, valid_until=None),
                CouponModel(
                    id=2,
                    code="SPRING25",
                    discount_percent=25,
                    valid_until=datetime.now(timezone.utc) + timedelta(days=30),
                ),
            ]
        )
        db.flush()
        db.add_all(
            [
                UserCouponModel(user_id=1, coupon_id=1),
                UserCouponModel(user_id=1, coupon_id=2),
                UserCouponModel(user_id=2, coupon_id=1),
            ]
        )
        db.commit()
        logger.info("Seed data inserted")
    finally:
        db.close()


if __name__ == "__main__":
    from checkout.main import init_db

    init_db()
    seed()
