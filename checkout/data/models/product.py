from sqlalchemy import Column, Integer, String, Numeric, CheckConstraint

from checkout.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"
    __table_args__ = (CheckConstraint("stock >= 0", name="ck_products_stock"),)

    id = Column(Integer, primary_key=True)
    # katalog sprzedawcow zyje poza tym serwisem
    seller_id = Column(Integer, nullable=False)
    name = Column(String, nullable=False)

    price = Column(Numeric(10, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
