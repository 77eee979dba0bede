from sqlalchemy import select, update
from sqlalchemy.orm import Session

from checkout.data.models.user import UserModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def get_wallet_balance(self, user_id: int) -> int:
        balance = self.db.execute(
            select(UserModel.wallet_points).where(UserModel.id == user_id)
        ).scalar_one_or_none()
        return balance or 0

    def debit_wallet(self, user_id: int, amount: int) -> int:
        result = self.db.execute(
            update(UserModel)
            .where(UserModel.id == user_id, UserModel.wallet_points >= amount)
            .values(wallet_points=UserModel.wallet_points - amount)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def credit_wallet(self, user_id: int, amount: int) -> int:
        result = self.db.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(wallet_points=UserModel.wallet_points + amount)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
