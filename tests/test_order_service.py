from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
import redis

from checkout.data.models import CouponModel, ProductModel
from checkout.domain.errors import (
    EmptyCart,
    InsufficientStock,
    CheckoutInProgress,
    OrderNotFound,
)
from checkout.services.order_service import OrderService


@pytest.fixture
def service(db, lock_service, notifier):
    return OrderService(db, lock_service=lock_service, notification_service=notifier)


@pytest.fixture
def shop(make_user, make_product, add_to_cart):
    make_user(1, wallet_points=20)
    make_product(1, "10.00", stock=5)
    make_product(2, "2.50", stock=3)
    add_to_cart(1, 1, 2)
    add_to_cart(1, 2, 1)


def test_preview_total(service, shop):
    preview = service.preview_total(1, wallet_points_used=5)

    assert preview["subtotal"] == Decimal("22.50")
    assert preview["discount"] == Decimal("0")
    assert preview["wallet_deduction"] == 5
    assert preview["total"] == Decimal("17.50")
    assert preview["item_count"] == 2
    assert preview["coupon_applied"] is False


def test_preview_does_not_change_state(service, shop, snapshot):
    before = snapshot()

    first = service.preview_total(1, wallet_points_used=5)
    second = service.preview_total(1, wallet_points_used=5)

    assert first == second
    assert snapshot() == before


def test_preview_of_empty_cart(service, make_user):
    make_user(1, wallet_points=20)

    preview = service.preview_total(1, coupon_code="ANY", wallet_points_used=5)

    assert preview["subtotal"] == Decimal("0")
    assert preview["total"] == Decimal("0")
    assert preview["wallet_deduction"] == 0
    assert preview["item_count"] == 0


def test_place_order(service, shop, snapshot, notifier):
    result = service.place_order(1, wallet_points_used=5)

    assert result["payment_status"] == "pending"
    assert result["total_price"] == Decimal("17.50")
    assert result["discount_amount"] == Decimal("0")
    assert result["wallet_points_used"] == 5

    state = snapshot()
    assert state["cart"] == []
    assert state["stock"] == {1: 3, 2: 2}
    assert state["wallets"][1] == 15
    assert state["orders"] == [(result["order_id"], "pending", "pending")]
    assert notifier.events == [("placed", 1, result["order_id"])]


def test_place_order_with_coupon(service, shop, make_coupon):
    make_coupon("SAVE10", 10, assign_to=[1])

    result = service.place_order(1, coupon_code="SAVE10", wallet_points_used=5)

    # 22.50 - 2.25 - 5
    assert result["discount_amount"] == Decimal("2.25")
    assert result["total_price"] == Decimal("15.25")
    assert result["coupon_code"] == "SAVE10"


def test_order_lines_keep_purchase_price(service, shop, db):
    order_id = service.place_order(1)["order_id"]

    db.get(ProductModel, 1).price = Decimal("99.00")
    db.commit()

    order = service.get_order(order_id, 1)
    assert [(i["product_id"], i["quantity"], i["price"]) for i in order["items"]] == [
        (1, 2, Decimal("10.00")),
        (2, 1, Decimal("2.50")),
    ]


def test_empty_cart(service, make_user, snapshot):
    make_user(1, wallet_points=20)
    before = snapshot()

    with pytest.raises(EmptyCart):
        service.place_order(1)

    assert snapshot() == before


def test_insufficient_stock_has_no_side_effects(service, shop, add_to_cart, make_product, snapshot, notifier):
    make_product(3, "1.00", stock=1)
    add_to_cart(1, 3, 2)
    before = snapshot()

    with pytest.raises(InsufficientStock) as exc:
        service.place_order(1, wallet_points_used=5)

    assert exc.value.product_id == 3
    assert exc.value.kind == "insufficient_stock"
    assert snapshot() == before
    assert notifier.events == []


def test_failed_decrement_rolls_back_everything(service, shop, snapshot, monkeypatch):
    before = snapshot()
    real_decrement = service.products.decrement_stock

    # produkt 2 wykupiony przez kogos innego miedzy sprawdzeniem a UPDATE
    def decrement(product_id, quantity):
        if product_id == 2:
            return 0
        return real_decrement(product_id, quantity)

    monkeypatch.setattr(service.products, "decrement_stock", decrement)

    with pytest.raises(InsufficientStock) as exc:
        service.place_order(1, wallet_points_used=5)

    assert exc.value.product_id == 2
    assert snapshot() == before


def test_discount_is_revalidated_at_placement(service, shop, make_coupon, db):
    coupon_id = make_coupon("FLASH", 50, assign_to=[1])
    assert service.preview_total(1, coupon_code="FLASH")["discount"] == Decimal("11.25")

    db.get(CouponModel, coupon_id).valid_until = datetime.now(timezone.utc) - timedelta(minutes=1)
    db.commit()

    result = service.place_order(1, coupon_code="FLASH")
    assert result["discount_amount"] == Decimal("0")
    assert result["total_price"] == Decimal("22.50")


def test_wallet_request_above_balance_is_capped(service, shop, snapshot):
    result = service.place_order(1, wallet_points_used=500)

    assert result["wallet_points_used"] == 20
    assert result["total_price"] == Decimal("2.50")
    assert snapshot()["wallets"][1] == 0


def test_checkout_already_running_for_user(service, shop, lock_service, snapshot):
    before = snapshot()
    lock_service.acquire_checkout_lock(1, "other-request", ttl=10)

    with pytest.raises(CheckoutInProgress):
        service.place_order(1)

    assert snapshot() == before


def test_lock_released_after_failure(service, make_user, lock_service):
    make_user(1)

    with pytest.raises(EmptyCart):
        service.place_order(1)

    assert lock_service.acquire_checkout_lock(1, "next", ttl=10) is True


def test_get_order_checks_owner(service, shop, make_user):
    make_user(2)
    order_id = service.place_order(1)["order_id"]

    with pytest.raises(PermissionError):
        service.get_order(order_id, 2)


def test_get_unknown_order(service):
    with pytest.raises(OrderNotFound):
        service.get_order(404, 1)


def test_list_orders_newest_first(service, shop, add_to_cart):
    first = service.place_order(1)["order_id"]
    add_to_cart(1, 1, 1)
    second = service.place_order(1)["order_id"]

    orders = service.list_orders(1)
    assert [o["id"] for o in orders] == [second, first]
    assert service.list_orders(2) == []


def test_order_kept_when_lock_release_fails(service, shop, lock_service, monkeypatch, snapshot):
    def broken_release(user_id, token):
        raise redis.ConnectionError("redis down")

    monkeypatch.setattr(lock_service, "release_checkout_lock", broken_release)

    result = service.place_order(1)

    state = snapshot()
    assert state["orders"] == [(result["order_id"], "pending", "pending")]
    assert state["cart"] == []
    assert state["stock"] == {1: 3, 2: 2}


def test_release_failure_keeps_checkout_error(service, make_user, lock_service, monkeypatch):
    make_user(1)

    def broken_release(user_id, token):
        raise redis.ConnectionError("redis down")

    monkeypatch.setattr(lock_service, "release_checkout_lock", broken_release)

    with pytest.raises(EmptyCart):
        service.place_order(1)


def test_order_kept_when_notification_fails(service, shop, notifier, monkeypatch, snapshot):
    def broker_down(user_id, order_id):
        raise ConnectionError("broker unreachable")

    monkeypatch.setattr(notifier, "order_placed", broker_down)

    result = service.place_order(1, wallet_points_used=5)

    assert result["payment_status"] == "pending"
    state = snapshot()
    assert state["orders"] == [(result["order_id"], "pending", "pending")]
    assert state["wallets"][1] == 15
