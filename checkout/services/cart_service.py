# checkout/services/cart_service.py
from decimal import Decimal
from typing import Dict, Any
from sqlalchemy.orm import Session
from checkout.data.models.cart_item import CartItemModel
from checkout.repos.cart_repo import CartRepo
from checkout.repos.product_repo import ProductRepo
from checkout.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Proste operacje na koszyku usera
    commands (add, update, remove, clear) modyfikuja stan
    query (get) tylko odczyt
    stanu magazynu tu nie sprawdzamy, to robi dopiero checkout
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    #query - odczyt
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        rows = self.repo.list_cart_lines(user_id)
        subtotal = sum((p.price * i.quantity for i, p in rows), Decimal("0.00"))

        #dict przyksztalcany w jsona
        return {
            "user_id": user_id,
            "items": [
                {
                    "product_id": i.product_id,
                    "name": p.name,
                    "quantity": i.quantity,
                    "price": p.price,
                    "stock": p.stock,
                }
                for i, p in rows
            ],
            "subtotal": subtotal,
        }

    #commands
    def add_product(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValueError("Ilosc musi być wieksza niz 0")

        if self.products.get_price_and_stock(product_id) is None:
            raise LookupError(f"Produkt {product_id} nie istnieje")

        try:
            existing_item = self.repo.get_cart_item(user_id, product_id)

            if existing_item:
                logger.info(
                    f"Produkt {product_id} już jest w koszyku usera {user_id}, zwiekszam ilosc "
                    f"z {existing_item.quantity} do {existing_item.quantity + quantity}"
                )
                existing_item.quantity += quantity
                self.repo.add_cart_item(existing_item)
            else:
                logger.info(f"Dodaje nowy produkt {product_id} do koszyka usera {user_id}")
                self.repo.add_cart_item(
                    CartItemModel(
                        user_id=user_id,
                        product_id=product_id,
                        quantity=quantity,
                    )
                )

            self.repo.commit()
        except Exception as e:
            logger.error(f"Blad podczas dodawania produktu: {e}")
            self.repo.rollback()
            raise

        return self.get_cart(user_id)

    def update_quantity(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValueError("Ilosc musi być wieksza niz 0")

        item = self.repo.get_cart_item(user_id, product_id)
        if not item:
            raise LookupError(f"Produktu {product_id} nie ma w koszyku")

        item.quantity = quantity
        self.repo.commit()

        logger.info(f"Koszyk usera {user_id}: produkt {product_id} ilosc {quantity}")
        return self.get_cart(user_id)

    def remove_product(self, user_id: int, product_id: int) -> Dict[str, Any]:
        logger.info(f"Usuwanie produktu {product_id} z koszyka usera {user_id}")

        if self.repo.delete_cart_item(user_id, product_id) == 0:
            self.repo.rollback()
            raise LookupError(f"Produktu {product_id} nie ma w koszyku")

        self.repo.commit()
        return self.get_cart(user_id)

    def clear_cart(self, user_id: int) -> Dict[str, Any]:
        removed = self.repo.clear_cart(user_id)
        self.repo.commit()

        logger.info(f"Wyczyszczono koszyk usera {user_id} ({removed} pozycji)")
        return self.get_cart(user_id)
