# checkout/services/payment_simulator.py
import random

from checkout.utils.settings import PAYMENT_SUCCESS_RATE, PAYMENT_DELAY_SECONDS
from checkout.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentSimulator:
    """
    Udawana bramka platnosci: po opoznieniu losuje wynik (domyslnie ~70% sukcesow).
    Sam wynik rozlicza PaymentService - tu tylko decyzja i kolejkowanie.
    """

    def __init__(
        self,
        success_rate: float = PAYMENT_SUCCESS_RATE,
        delay_seconds: int = PAYMENT_DELAY_SECONDS,
        rng: random.Random | None = None,
    ):
        if not 0 <= success_rate <= 1:
            raise ValueError("success_rate musi byc w zakresie 0-1")
        self.success_rate = success_rate
        self.delay_seconds = delay_seconds
        self.rng = rng or random.Random()

    def decide(self) -> str:
        return "success" if self.rng.random() < self.success_rate else "failed"

    def schedule(self, order_id: int) -> str:
        from checkout.tasks.payments import simulate_payment_task

        result = simulate_payment_task.apply_async(args=[order_id], countdown=self.delay_seconds)
        logger.info(f"Platnosc zamowienia {order_id} zaplanowana za {self.delay_seconds}s (task {result.id})")
        return result.id
