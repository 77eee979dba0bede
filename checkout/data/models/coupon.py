from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    CheckConstraint,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from checkout.data.database import Base


class CouponModel(Base):
    __tablename__ = "coupons"
    __table_args__ = (
        CheckConstraint(
            "discount_percent >= 0 AND discount_percent <= 100",
            name="ck_coupons_discount_percent",
        ),
    )

    id = Column(Integer, primary_key=True)
    code = Column(String(50), nullable=False, unique=True)
    discount_percent = Column(Integer, nullable=False)
    valid_until = Column(DateTime(timezone=True), nullable=True)  # NULL = bezterminowy

    assignments = relationship(
        "UserCouponModel",
        back_populates="coupon",
        cascade="all, delete-orphan",
    )


class UserCouponModel(Base):
    """Przypisanie kuponu do konkretnego usera (kupony nie sa publiczne)."""

    __tablename__ = "user_coupons"
    __table_args__ = (UniqueConstraint("user_id", "coupon_id", name="u_user_coupon"),)

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    coupon_id = Column(Integer, ForeignKey("coupons.id", ondelete="CASCADE"), nullable=False)

    coupon = relationship("CouponModel", back_populates="assignments")
