# checkout/repos/order_repo.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from checkout.data.models.order import OrderModel, PAYMENT_PENDING
from checkout.data.models.order_item import OrderItemModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        # bez commita - zamowienie jest czescia wiekszej transakcji checkoutu
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .where(OrderModel.id == order_id)
            .options(selectinload(OrderModel.items))
        ).scalar_one_or_none()

    def get_order_items(self, order_id: int):
        return self.db.execute(
            select(OrderItemModel)
            .where(OrderItemModel.order_id == order_id)
            .order_by(OrderItemModel.id)
        ).scalars().all()

    def list_orders(self, user_id: int):
        return self.db.execute(
            select(OrderModel)
            .where(OrderModel.user_id == user_id)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        ).scalars().all()

    def settle_payment_status(self, order_id: int, payment_status: str, order_status: str) -> int:
        """
        Jednorazowe przejscie z pending.
        np. update orders set payment_status='failed' where id 1 and payment_status 'pending'
        """
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.payment_status == PAYMENT_PENDING)
            .values(payment_status=payment_status, order_status=order_status)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
