# checkout/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Literal
from decimal import Decimal
from datetime import datetime


class UserCreate(BaseModel):
    """Schema dla tworzenia użytkownika."""

    id: int = Field(..., gt=0, description="ID użytkownika (musi być > 0)")
    name: str = Field(..., min_length=1, max_length=100, description="Imię użytkownika")
    wallet_points: int = Field(0, ge=0, description="Początkowe saldo punktów")


class UserRead(BaseModel):
    id: int
    name: str
    wallet_points: int

    model_config = ConfigDict(from_attributes=True)


class ItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")
    quantity: int = Field(..., gt=0, description="Ilość produktu (musi być > 0)")


class QuantityIn(BaseModel):
    quantity: int = Field(..., gt=0, description="Nowa ilość (musi być > 0)")


class CartLineOut(BaseModel):
    product_id: int
    name: str
    quantity: int
    price: Decimal
    stock: int


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    user_id: int
    items: List[CartLineOut]
    subtotal: Decimal


class DiscountIn(BaseModel):
    """Kupon i punkty - wspólne dla podglądu i składania zamówienia."""

    coupon_code: str | None = Field(None, max_length=50)
    wallet_points_used: int | None = Field(None, description="Ile punktów user chce użyć")


class PriceBreakdownOut(BaseModel):
    subtotal: Decimal
    discount: Decimal
    wallet_deduction: int
    total: Decimal
    item_count: int
    coupon_applied: bool = False


class OrderPlacedOut(BaseModel):
    order_id: int
    total_price: Decimal
    discount_amount: Decimal
    wallet_points_used: int
    coupon_code: str | None = None
    payment_status: str


class OrderItemOut(BaseModel):
    product_id: int
    quantity: int
    price: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema dla zamówienia (response)."""

    id: int
    user_id: int
    total_price: Decimal
    discount_amount: Decimal
    wallet_points_used: int
    coupon_code: str | None = None
    payment_status: str
    order_status: str
    created_at: datetime
    items: List[OrderItemOut] = []

    model_config = ConfigDict(from_attributes=True)


class PaymentStatusIn(BaseModel):
    # walidacja wartosci jest w PaymentService, tu przyjmujemy dowolny string
    status: str


class SettlementOut(BaseModel):
    order_id: int
    payment_status: Literal["success", "failed"]
    order_status: str


class PaymentScheduledOut(BaseModel):
    order_id: int
    payment_status: str
    task_id: str | None = None
