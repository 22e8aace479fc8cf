from collections import OrderedDict
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Any, List, Tuple

from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.product import ProductModel
from storefront.domain.errors import (
    ConcurrentModification,
    InsufficientStock,
    InvalidVariant,
    NoCartFound,
    ProductNotFound,
)
from storefront.domain.money import ZERO, line_total, lines_total
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.change_events import cart_changed
from storefront.utils.retry import cart_version_retry
from storefront.utils.settings import DEFAULT_VARIANT
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

LineKey = Tuple[int, str]


def cart_to_dict(cart: CartModel) -> Dict[str, Any]:
    return {
        "cart_id": cart.id,
        "user_id": cart.user_id,
        "version": cart.version,
        "lines": [
            {
                "product_id": i.product_id,
                "count": i.count,
                "color": i.color,
                "unit_price": i.price,
            }
            for i in cart.items
        ],
        "cart_total": Decimal(cart.cart_total),
        "total_after_discount": Decimal(cart.effective_total),
        "coupon_code": cart.coupon_code,
    }


class CartService:
    """
    Use case'y dla domeny cart
    commands (build, add_items, empty) modyfikuja stan
    query (get) tylko odczyt
    """

    def __init__(self, db: Session, publisher):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)
        self.publisher = publisher

    #query - odczyt
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NoCartFound(user_id)

        #linie rozwiniete o aktualne dane z katalogu (tylko do wyswietlenia)
        catalog = self.products.get_products(i.product_id for i in cart.items)
        data = cart_to_dict(cart)
        for line in data["lines"]:
            product = catalog.get(line["product_id"])
            line["title"] = product.title if product else None
            line["current_price"] = Decimal(product.price) if product else None
        return data

    #commands
    def build_cart(self, user_id: int, lines: List[dict]) -> Dict[str, Any]:
        """
        Zastepuje caly koszyk uzytkownika nowymi liniami.
        Poprzedni koszyk jest odrzucany, nie laczony.
        """
        requested = self._coalesce(lines)
        validated = self._validate(requested, existing={})

        cart = self.repo.get_cart_by_user(user_id)
        if cart is None:
            cart = self.repo.create_cart(CartModel(user_id=user_id, version=1, cart_total=ZERO))

        cart.items.clear()
        for (product_id, color), (product, count) in validated.items():
            cart.items.append(
                CartItemModel(
                    product_id=product_id,
                    count=count,
                    color=color,
                    price=Decimal(product.price),
                )
            )

        total = lines_total(cart.items)
        self._commit_cart(cart, {
            "cart_total": total,
            "total_after_discount": total,
            "coupon_code": None,
        })

        logger.info(f"Cart {cart.id} of user {user_id} replaced with {len(validated)} line(s), total {total}")
        self.publisher.publish(cart_changed(cart.id, user_id))
        return cart_to_dict(cart)

    @cart_version_retry()
    def add_items(self, user_id: int, lines: List[dict]) -> Dict[str, Any]:
        """
        Dokleja linie do istniejacego koszyka.

        Ta sama para (product_id, color) zwieksza count istniejacej linii,
        nowa para dodaje linie. Najpierw walidacja calosci, potem zapis,
        jedna zla linia przerywa cala operacje.
        """
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NoCartFound(user_id)

        existing = OrderedDict(((i.product_id, i.color), i) for i in cart.items)
        requested = self._coalesce(lines)
        validated = self._validate(requested, existing)

        increment = ZERO
        for key, (product, count) in validated.items():
            item = existing.get(key)
            if item is not None:
                logger.info(
                    f"Product {key[0]}/{key[1]} already in cart {cart.id}, "
                    f"count {item.count} -> {item.count + count}"
                )
                #cena linii zostaje z momentu pierwszego dodania
                item.count += count
                increment += line_total(item.price, count)
            else:
                cart.items.append(
                    CartItemModel(
                        product_id=key[0],
                        count=count,
                        color=key[1],
                        price=Decimal(product.price),
                    )
                )
                increment += line_total(product.price, count)

        total = Decimal(cart.cart_total) + increment
        self._commit_cart(cart, {
            "cart_total": total,
            "total_after_discount": total,
            "coupon_code": None,
        })

        logger.info(f"Merged {len(validated)} line(s) into cart {cart.id}, total {total}")
        self.publisher.publish(cart_changed(cart.id, user_id))
        return cart_to_dict(cart)

    def empty_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self.repo.get_cart_by_user(user_id)
        if cart is None:
            cart = self.repo.create_cart(CartModel(user_id=user_id, version=1, cart_total=ZERO))

        self.reset(cart)
        self.repo.commit()

        logger.info(f"Cart {cart.id} of user {user_id} emptied")
        self.publisher.publish(cart_changed(cart.id, user_id))
        return cart_to_dict(cart)

    def reset(self, cart: CartModel) -> None:
        """Zeruje koszyk w biezacej transakcji, bez commita."""
        cart.items.clear()
        rowcount = self.repo.update_cart_version(
            cart_id=cart.id,
            old_version=cart.version,
            new_data={
                "cart_total": ZERO,
                "total_after_discount": ZERO,
                "coupon_code": None,
                "version": cart.version + 1,
                "updated_at": datetime.now(timezone.utc),
            },
        )
        if rowcount == 0:
            self.repo.rollback()
            raise ConcurrentModification(cart.id)

    #helpers
    def _commit_cart(self, cart: CartModel, new_data: dict) -> None:
        # Optimistic locking
        # np w bazie update set version 2 where id 1 and version 1
        new_data = {
            **new_data,
            "version": cart.version + 1,
            "updated_at": datetime.now(timezone.utc),
        }
        rowcount = self.repo.update_cart_version(
            cart_id=cart.id,
            old_version=cart.version,
            new_data=new_data,
        )

        if rowcount == 0:
            self.repo.rollback()
            logger.warning(f"Version conflict on cart {cart.id}")
            raise ConcurrentModification(cart.id)

        self.repo.commit()

    def _coalesce(self, lines: List[dict]) -> "OrderedDict[Tuple[int, str | None], int]":
        #zlacz powtorzone pary (product_id, color) z jednego zadania
        merged: "OrderedDict[Tuple[int, str | None], int]" = OrderedDict()
        for line in lines:
            if line["count"] <= 0:
                raise ValueError("Count must be greater than 0")
            key = (line["product_id"], line.get("color"))
            merged[key] = merged.get(key, 0) + line["count"]
        return merged

    def _validate(
        self,
        requested: "OrderedDict[Tuple[int, str | None], int]",
        existing: Dict[LineKey, CartItemModel],
    ) -> "OrderedDict[LineKey, Tuple[ProductModel, int]]":
        catalog = self.products.get_products(pid for pid, _ in requested)

        validated: "OrderedDict[LineKey, Tuple[ProductModel, int]]" = OrderedDict()
        for (product_id, color), count in requested.items():
            product = catalog.get(product_id)
            if product is None:
                raise ProductNotFound(product_id)

            variants = list(product.colors or [])
            if color is None:
                color = variants[0] if variants else DEFAULT_VARIANT
            elif variants and color not in variants:
                raise InvalidVariant(product_id, color, variants)
            elif not variants and color != DEFAULT_VARIANT:
                raise InvalidVariant(product_id, color, [DEFAULT_VARIANT])

            key = (product_id, color)
            prior = validated[key][1] if key in validated else 0
            validated[key] = (product, prior + count)

        #stan magazynu jest per produkt, sumujemy wszystkie kolory (w koszyku + nowe)
        wanted: "OrderedDict[int, int]" = OrderedDict()
        for (product_id, _), (_, count) in validated.items():
            wanted[product_id] = wanted.get(product_id, 0) + count
        for (product_id, _), item in existing.items():
            if product_id in wanted:
                wanted[product_id] += item.count

        for product_id, total in wanted.items():
            product = catalog[product_id]
            if total > product.quantity:
                logger.info(
                    f"Insufficient stock for product {product_id}: "
                    f"requested {total}, available {product.quantity}"
                )
                raise InsufficientStock(product_id, product.title, product.quantity)

        return validated
