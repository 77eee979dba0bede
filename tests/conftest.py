import os
import threading
from decimal import Decimal

# baza z settings musi byc ustawiona zanim cokolwiek z checkout sie zaimportuje
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from sqlalchemy.orm import sessionmaker

from checkout.data.database import Base, make_engine
import checkout.data.models  # noqa: F401
from checkout.data.models import (
    UserModel,
    ProductModel,
    CouponModel,
    UserCouponModel,
    CartItemModel,
    OrderModel,
)
from checkout.services.lock_service import LockService


class InMemoryLockService(LockService):
    """Lock bez Redisa, ta sama semantyka SET NX + porownanie tokenu."""

    def __init__(self):
        self._held = {}
        self._mutex = threading.Lock()

    def acquire_checkout_lock(self, user_id, token, ttl):
        with self._mutex:
            if user_id in self._held:
                return False
            self._held[user_id] = token
            return True

    def release_checkout_lock(self, user_id, token):
        with self._mutex:
            if self._held.get(user_id) != token:
                return False
            del self._held[user_id]
            return True


class RecordingNotifier:
    def __init__(self):
        self.events = []

    def order_placed(self, user_id, order_id):
        self.events.append(("placed", user_id, order_id))

    def payment_settled(self, user_id, order_id, payment_status):
        self.events.append((f"payment_{payment_status}", user_id, order_id))


@pytest.fixture
def engine(tmp_path):
    eng = make_engine(f"sqlite:///{tmp_path / 'checkout.db'}")
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def lock_service():
    return InMemoryLockService()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_user(db):
    def _make(user_id, wallet_points=0, name=None):
        db.add(UserModel(id=user_id, name=name or f"user-{user_id}", wallet_points=wallet_points))
        db.commit()
        return user_id

    return _make


@pytest.fixture
def make_product(db):
    def _make(product_id, price, stock, seller_id=1):
        db.add(
            ProductModel(
                id=product_id,
                seller_id=seller_id,
                name=f"product-{product_id}",
                price=Decimal(price),
                stock=stock,
            )
        )
        db.commit()
        return product_id

    return _make


@pytest.fixture
def add_to_cart(db):
    def _add(user_id, product_id, quantity):
        db.add(CartItemModel(user_id=user_id, product_id=product_id, quantity=quantity))
        db.commit()

    return _add


@pytest.fixture
def make_coupon(db):
    def _make(code, discount_percent, valid_until=None, assign_to=()):
        coupon = CouponModel(code=code, discount_percent=discount_percent, valid_until=valid_until)
        db.add(coupon)
        db.flush()
        for user_id in assign_to:
            db.add(UserCouponModel(user_id=user_id, coupon_id=coupon.id))
        db.commit()
        return coupon.id

    return _make


@pytest.fixture
def snapshot(session_factory):
    """Stan magazynu, portfeli, koszykow i zamowien czytany swieza sesja."""

    def _snap():
        s = session_factory()
        try:
            return {
                "stock": {p.id: p.stock for p in s.query(ProductModel).all()},
                "wallets": {u.id: u.wallet_points for u in s.query(UserModel).all()},
                "cart": sorted(
                    (c.user_id, c.product_id, c.quantity) for c in s.query(CartItemModel).all()
                ),
                "orders": sorted(
                    (o.id, o.payment_status, o.order_status) for o in s.query(OrderModel).all()
                ),
            }
        finally:
            s.close()

    return _snap
