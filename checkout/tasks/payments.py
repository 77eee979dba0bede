# checkout/tasks/payments.py
from checkout.celery_worker import celery_app
from checkout.services.payment_client import PaymentCallbackClient
from checkout.services.payment_simulator import PaymentSimulator
from checkout.utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(name="checkout.tasks.payments.simulate_payment_task")
def simulate_payment_task(order_id: int):
    outcome = PaymentSimulator().decide()
    logger.info(f"Symulacja platnosci zamowienia {order_id}: {outcome}")

    return PaymentCallbackClient().report_outcome(order_id, outcome)
