# checkout/services/pricing.py
"""
Silnik cen - czysta funkcja, bez dostepu do bazy.

Wolany przy kazdym podgladzie koszyka i jeszcze raz przy skladaniu
zamowienia, wiec nie moze niczego zmieniac.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: Decimal
    discount: Decimal
    wallet_deduction: int
    total: Decimal
    item_count: int

    def as_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "discount": self.discount,
            "wallet_deduction": self.wallet_deduction,
            "total": self.total,
            "item_count": self.item_count,
        }


def to_money(value) -> Decimal:
    # float idzie przez str, zeby nie ciagnac bledu zaokraglen binarnych
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_breakdown(
    lines: Iterable[Tuple[Decimal, int]],
    discount_percent: int = 0,
    wallet_points: int | None = 0,
    wallet_balance: int | None = None,
) -> PriceBreakdown:
    """
    lines - pary (cena jednostkowa, ilosc) z aktualnego koszyka
    discount_percent - juz rozwiazany procent kuponu (0 gdy kupon nie pasuje)
    wallet_points - ile punktow user chce uzyc
    wallet_balance - saldo portfela; gdy None, punkty sa juz przyciete do salda
    """
    lines = list(lines)
    if not lines:
        return PriceBreakdown(ZERO, ZERO, 0, ZERO, 0)

    subtotal = to_money(sum((to_money(price) * qty for price, qty in lines), ZERO))

    percent = Decimal(discount_percent or 0)
    if percent < 0 or percent > 100:
        raise ValueError(f"discount_percent poza zakresem 0-100: {discount_percent}")
    discount = to_money(subtotal * percent / Decimal(100))

    points = max(int(wallet_points or 0), 0)
    if wallet_balance is not None:
        points = min(points, max(int(wallet_balance), 0))

    total = max(ZERO, to_money(subtotal - discount - Decimal(points)))

    return PriceBreakdown(
        subtotal=subtotal,
        discount=discount,
        wallet_deduction=points,
        total=total,
        item_count=len(lines),
    )
