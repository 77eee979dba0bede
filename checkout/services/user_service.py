# checkout/services/user_service.py
from sqlalchemy.orm import Session

from checkout.data.models.user import UserModel
from checkout.domain.schemas import UserCreate, UserRead
from checkout.repos.user_repo import UserRepo
from checkout.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    """Tozsamosc i logowanie sa poza serwisem - tu tylko user z portfelem punktow."""

    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserRead:
        existing = self.repo.get_user(payload.id)
        if existing:
            logger.info(f"User {payload.id} juz istnieje, saldo bez zmian")
            return UserRead.model_validate(existing)

        created = self.repo.create_user(
            UserModel(id=payload.id, name=payload.name, wallet_points=payload.wallet_points)
        )
        logger.info(f"Utworzono usera {created.id} z saldem {created.wallet_points} pkt")
        return UserRead.model_validate(created)

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise LookupError(f"User {user_id} not found")
        return UserRead.model_validate(user)
