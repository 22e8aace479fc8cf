# storefront/services/order_service.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Any, List

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.user import UserModel
from storefront.domain.errors import (
    EmptyCart,
    IncompleteAddress,
    InsufficientStock,
    InvalidStatus,
    OrderNotFound,
    UnsupportedPaymentMethod,
    UserNotFound,
)
from storefront.domain.money import apply_discount
from storefront.domain.statuses import OrderStatus, PaymentStatus
from storefront.repos.cart_repo import CartRepo
from storefront.repos.coupon_repo import CouponRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.cart_service import CartService
from storefront.services.change_events import (
    cart_changed,
    order_created,
    order_updated,
    stock_changed,
)
from storefront.services.discount_service import resolve_coupon
from storefront.utils.settings import CURRENCY
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

COD = "COD"
REQUIRED_ADDRESS_FIELDS = ("city", "postal_code")


def missing_address_fields(user: UserModel) -> List[str]:
    return [f for f in REQUIRED_ADDRESS_FIELDS if not (getattr(user, f) or "").strip()]


def order_to_dict(order: OrderModel) -> Dict[str, Any]:
    return {
        "order_id": order.id,
        "user_id": order.user_id,
        "lines": [
            {
                "product_id": i.product_id,
                "count": i.count,
                "color": i.color,
                "unit_price": i.price,
            }
            for i in order.items
        ],
        "payment_intent": {
            "id": order.payment_intent_id,
            "method": order.payment_method,
            "amount": Decimal(order.payment_amount),
            "currency": order.payment_currency,
            "status": order.payment_status,
            "created_at": order.payment_created_at,
        },
        "order_status": order.order_status,
        "created_at": order.created_at,
    }


class OrderService:
    """
    Serwis odpowiedzialny za skladanie zamowien i zmiane ich statusu.
    Separacja od CartService, koszyk resetujemy przez jego publiczne reset().
    """

    def __init__(self, db: Session, publisher, notifier):
        self.repo = OrderRepo(db)
        self.users = UserRepo(db)
        self.carts = CartRepo(db)
        self.products = ProductRepo(db)
        self.coupons = CouponRepo(db)
        self.cart_service = CartService(db, publisher)
        self.publisher = publisher
        self.notifier = notifier

    def place_order(
        self,
        user_id: int,
        use_cash_on_delivery: bool,
        coupon_applied: bool = False,
    ) -> Dict[str, Any]:
        """
        Use Case: zamowienie z koszyka.

        1. Walidacja: platnosc COD, adres wysylki, niepusty koszyk
        2. Kwota: cart_total albo total po rabacie (kupon sprawdzany ponownie)
        3. Jedna transakcja: zamowienie + zdjecie stanow + reset koszyka
        4. Po commicie: zdarzenia zmian i powiadomienie (async)
        """
        if not use_cash_on_delivery:
            raise UnsupportedPaymentMethod()

        user = self.users.get_user(user_id)
        if not user:
            raise UserNotFound(user_id)

        missing = missing_address_fields(user)
        if missing:
            logger.info(f"User {user_id} cannot order, address missing {missing}")
            raise IncompleteAddress(missing)

        cart = self.carts.get_cart_by_user(user_id)
        if not cart or not cart.items:
            raise EmptyCart(user_id)

        amount = self._charged_amount(cart, coupon_applied)
        now = datetime.now(timezone.utc)

        order = OrderModel(
            user_id=user_id,
            order_status=OrderStatus.NOT_PROCESSED.value,
            payment_intent_id=uuid.uuid4().hex,
            payment_method=COD,
            payment_amount=amount,
            payment_currency=CURRENCY,
            payment_status=PaymentStatus.CASH_ON_DELIVERY.value,
            payment_created_at=now,
            created_at=now,
            items=[
                OrderItemModel(
                    product_id=i.product_id,
                    count=i.count,
                    color=i.color,
                    price=i.price,
                )
                for i in cart.items
            ],
        )
        self.repo.add_order(order)

        #zdejmij stany, kazda linia osobno i warunkowo
        product_ids = []
        for item in cart.items:
            if self.products.decrement_stock(item.product_id, item.count) == 0:
                product = self.products.get_product(item.product_id)
                available = product.quantity if product else 0
                title = product.title if product else str(item.product_id)
                self.repo.rollback()
                logger.warning(
                    f"Order for user {user_id} aborted, product {item.product_id} "
                    f"has {available} left, {item.count} requested"
                )
                raise InsufficientStock(item.product_id, title, available)
            product_ids.append(item.product_id)

        cart_id = cart.id
        self.cart_service.reset(cart)
        self.repo.commit()

        logger.info(f"Order {order.id} placed by user {user_id} from cart {cart_id}, amount {amount}")

        self.publisher.publish(order_created(order.id, user_id))
        for product_id in dict.fromkeys(product_ids):
            self.publisher.publish(stock_changed(product_id))
        self.publisher.publish(cart_changed(cart_id, user_id))

        # Wyslij powiadomienie asynchronicznie
        self.notifier.send_order_notification(user_id, order.id, amount)

        return order_to_dict(order)

    def update_order_status(self, order_id: int, order_status: str, payment_status: str) -> Dict[str, Any]:
        #oba statusy walidowane razem, zaden nie wchodzi jesli ktorys zly
        target = OrderStatus.parse(order_status)
        payment = PaymentStatus.parse(payment_status)

        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFound(order_id)

        current = OrderStatus(order.order_status)
        if not current.can_move_to(target):
            raise InvalidStatus(
                "orderStatus",
                order_status,
                [s.value for s in OrderStatus if current.can_move_to(s)],
                reason=f"Order {order_id} cannot move from '{current.value}' to '{target.value}'",
            )

        self.repo.update_order_status(order, target.value, payment.value)

        logger.info(f"Order {order_id} status -> {target.value}, payment -> {payment.value}")
        self.publisher.publish(order_updated(order.id, order.user_id))
        return order_to_dict(order)

    def _charged_amount(self, cart, coupon_applied: bool) -> Decimal:
        total = Decimal(cart.cart_total)
        if not coupon_applied or not cart.coupon_code:
            return total

        #rabat z koszyka moze byc nieaktualny, liczymy od nowa
        coupon = resolve_coupon(self.coupons, cart.coupon_code)
        return apply_discount(total, coupon.discount)
