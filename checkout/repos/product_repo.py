# checkout/repos/product_repo.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from checkout.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_price_and_stock(self, product_id: int) -> dict | None:
        row = self.db.execute(
            select(ProductModel.price, ProductModel.stock).where(ProductModel.id == product_id)
        ).one_or_none()
        if row is None:
            return None
        return {"price": row.price, "stock": row.stock}

    def lock_products(self, product_ids) -> dict:
        """
        SELECT ... FOR UPDATE na wierszach produktow.
        Zawsze w kolejnosci id, zeby dwa checkouty nie zakleszczyly sie nawzajem.
        """
        ids = sorted(set(product_ids))
        rows = self.db.execute(
            select(ProductModel)
            .where(ProductModel.id.in_(ids))
            .order_by(ProductModel.id)
            .with_for_update()
            # nadpisz obiekty juz siedzace w sesji swiezym stanem z bazy
            .execution_options(populate_existing=True)
        ).scalars().all()
        return {p.id: p for p in rows}

    def decrement_stock(self, product_id: int, quantity: int) -> int:
        # warunek stock >= quantity w samym UPDATE, stan nigdy nie zejdzie ponizej zera
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock >= quantity)
            .values(stock=ProductModel.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def increment_stock(self, product_id: int, quantity: int) -> int:
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(stock=ProductModel.stock + quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
