# storefront/services/discount_service.py
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Any

from sqlalchemy.orm import Session

from storefront.data.models.coupon import CouponModel
from storefront.domain.errors import ConcurrentModification, InvalidCoupon, NoCartFound
from storefront.domain.money import apply_discount
from storefront.repos.cart_repo import CartRepo
from storefront.repos.coupon_repo import CouponRepo
from storefront.services.change_events import cart_changed
from storefront.utils.retry import cart_version_retry
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


def as_utc(value: datetime) -> datetime:
    #sqlite zwraca naive datetime
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def resolve_coupon(repo: CouponRepo, code: str, now: datetime | None = None) -> CouponModel:
    """Zwraca wazny kupon albo rzuca InvalidCoupon."""
    normalized = normalize_code(code)
    coupon = repo.get_by_code(normalized) if normalized else None
    if coupon is None:
        raise InvalidCoupon(normalized)

    now = now or datetime.now(timezone.utc)
    if as_utc(coupon.expiry) <= now:
        raise InvalidCoupon(normalized, "has expired")
    return coupon


class DiscountService:
    """
    Liczy total po rabacie dla koszyka.
    Zmienia tylko pole pochodne total_after_discount (i zapamietany kod),
    nigdy linii ani cart_total. Kupony sie nie sumuja.
    """

    def __init__(self, db: Session, publisher):
        self.carts = CartRepo(db)
        self.coupons = CouponRepo(db)
        self.publisher = publisher

    @cart_version_retry()
    def apply_coupon(self, user_id: int, code: str) -> Dict[str, Any]:
        coupon = resolve_coupon(self.coupons, code)

        cart = self.carts.get_cart_by_user(user_id)
        if not cart:
            raise NoCartFound(user_id)

        discounted = apply_discount(Decimal(cart.cart_total), coupon.discount)

        rowcount = self.carts.update_cart_version(
            cart_id=cart.id,
            old_version=cart.version,
            new_data={
                "total_after_discount": discounted,
                "coupon_code": coupon.code,
                "version": cart.version + 1,
                "updated_at": datetime.now(timezone.utc),
            },
        )
        if rowcount == 0:
            self.carts.rollback()
            logger.warning(f"Version conflict on cart {cart.id} while applying coupon")
            raise ConcurrentModification(cart.id)

        self.carts.commit()

        logger.info(
            f"Coupon {coupon.code} ({coupon.discount}%) applied to cart {cart.id}: "
            f"{cart.cart_total} -> {discounted}"
        )
        self.publisher.publish(cart_changed(cart.id, user_id))
        return {"total_after_discount": discounted, "coupon_code": coupon.code}
