# checkout/services/payment_client.py
import requests

from checkout.utils.retry import http_retry
from checkout.utils.settings import PAYMENT_CALLBACK_URL
from checkout.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentCallbackClient:
    """
    Odpowiedz "bramki" platnosci - PUT na endpoint rozliczenia zamowienia.
    Tak jak prawdziwa bramka, wola serwis z zewnatrz po HTTP.
    """

    def __init__(self, base_url: str | None = None, timeout: int = 2):
        self.base_url = (base_url or PAYMENT_CALLBACK_URL).rstrip("/")
        self.timeout = timeout

    @http_retry()
    def report_outcome(self, order_id: int, outcome: str) -> dict:
        url = f"{self.base_url}/orders/payment/{order_id}"
        logger.info(f"PaymentCallbackClient PUT {url} status={outcome}")

        resp = requests.put(url, json={"status": outcome}, timeout=self.timeout)

        # powtorzony callback - zamowienie juz rozliczone, mozna olac
        if resp.status_code == 409:
            logger.info(f"Order {order_id} juz rozliczony, ignoruje duplikat callbacku")
            return resp.json()

        resp.raise_for_status()
        return resp.json()
