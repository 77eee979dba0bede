from sqlalchemy import Column, Integer, String, CheckConstraint
from checkout.data.database import Base


class UserModel(Base):
    __tablename__ = "users"
    __table_args__ = (CheckConstraint("wallet_points >= 0", name="ck_users_wallet_points"),)

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    wallet_points = Column(Integer, nullable=False, default=0)
