# storefront/domain/errors.py
"""
Bledy domenowe koszyka i zamowien.

Kazdy blad ma stabilny ``kind`` (sprawdzany maszynowo przez klienta),
czytelny komunikat i opcjonalne ``details`` z kontekstem potrzebnym
do poprawienia zadania.
"""
from typing import Any, Dict, List, Optional


class ShopError(Exception):
    kind = "InternalError"
    status_code = 500

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "message": self.message, **self.details}


class ProductNotFound(ShopError):
    kind = "ProductNotFound"
    status_code = 404

    def __init__(self, product_id: int):
        super().__init__(f"Product {product_id} not found", productId=product_id)


class InsufficientStock(ShopError):
    kind = "InsufficientStock"
    status_code = 409

    def __init__(self, product_id: int, product_name: str, available: int):
        super().__init__(
            f"Only {available} unit(s) of '{product_name}' available",
            productId=product_id,
            productName=product_name,
            available=available,
        )


class InvalidVariant(ShopError):
    kind = "InvalidVariant"
    status_code = 400

    def __init__(self, product_id: int, color: str, allowed: List[str]):
        super().__init__(
            f"Color '{color}' is not available for product {product_id}. "
            f"Available colors: {', '.join(allowed)}",
            productId=product_id,
            allowedVariants=allowed,
        )


class NoCartFound(ShopError):
    kind = "NoCartFound"
    status_code = 404

    def __init__(self, user_id: int):
        super().__init__(f"No cart found for user {user_id}")


class InvalidCoupon(ShopError):
    kind = "InvalidCoupon"
    status_code = 400

    def __init__(self, code: str, reason: str = "does not exist"):
        super().__init__(f"Coupon '{code}' {reason}", couponCode=code)


class InvalidStatus(ShopError):
    kind = "InvalidStatus"
    status_code = 400

    def __init__(self, field: str, value: str, allowed: List[str], reason: Optional[str] = None):
        super().__init__(
            reason or f"Invalid {field} '{value}'. Allowed: {', '.join(allowed)}",
            field=field,
            value=value,
            allowed=allowed,
        )


class IncompleteAddress(ShopError):
    kind = "IncompleteAddress"
    status_code = 400

    def __init__(self, missing: List[str]):
        super().__init__(
            f"Shipping address is incomplete, missing: {', '.join(missing)}",
            missingFields=missing,
        )


class EmptyCart(ShopError):
    kind = "EmptyCart"
    status_code = 400

    def __init__(self, user_id: int):
        super().__init__(f"Cart of user {user_id} is empty")


class OrderNotFound(ShopError):
    kind = "OrderNotFound"
    status_code = 404

    def __init__(self, order_id: int):
        super().__init__(f"Order {order_id} not found", orderId=order_id)


class UserNotFound(ShopError):
    kind = "UserNotFound"
    status_code = 404

    def __init__(self, user_id: int):
        super().__init__(f"User {user_id} not found", userId=user_id)


class UnsupportedPaymentMethod(ShopError):
    kind = "UnsupportedPaymentMethod"
    status_code = 400

    def __init__(self):
        super().__init__("Only cash on delivery orders are supported")


class ConcurrentModification(ShopError):
    kind = "ConcurrentModification"
    status_code = 409

    def __init__(self, cart_id: int):
        super().__init__(
            f"Cart {cart_id} was modified by another request, please retry",
            cartId=cart_id,
        )


class Forbidden(ShopError):
    kind = "Forbidden"
    status_code = 403

    def __init__(self, message: str = "Not allowed"):
        super().__init__(message)


class InvalidRequest(ShopError):
    kind = "InvalidRequest"
    status_code = 400


class CouponNotFound(ShopError):
    kind = "CouponNotFound"
    status_code = 404

    def __init__(self, code: str):
        super().__init__(f"Coupon {code} not found", couponCode=code)


class EmailTaken(ShopError):
    kind = "EmailTaken"
    status_code = 400

    def __init__(self, email: str):
        super().__init__(f"Email {email} is already registered", email=email)


class UpstreamUnavailable(ShopError):
    kind = "UpstreamUnavailable"
    status_code = 503


class InternalError(ShopError):
    kind = "InternalError"
    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
