# checkout/api/routers/users.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from checkout.data.database import get_db
from checkout.domain.schemas import UserCreate, UserRead
from checkout.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/", response_model=UserRead, status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    """
    Zaklada usera z poczatkowym saldem punktow (seed / panel admina).
    Istniejacy user jest zwracany bez zmian.
    """
    return UserService(db).create_user(payload)


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, db: Session = Depends(get_db)):
    try:
        return UserService(db).get_user(user_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
