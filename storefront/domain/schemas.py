# storefront/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Baza: snake_case w Pythonie, camelCase na drucie."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# --- cart ---

class CartLineIn(ApiModel):
    """Linia koszyka w zadaniu."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi byc > 0)")
    count: int = Field(..., gt=0, description="Ilosc (musi byc > 0)")
    color: Optional[str] = Field(None, min_length=1, description="Wariant kolorystyczny")


class CartLineOut(ApiModel):
    product_id: int
    count: int
    color: str
    unit_price: Decimal
    title: Optional[str] = None
    current_price: Optional[Decimal] = None


class CartOut(ApiModel):
    """Schema dla koszyka (response)."""

    cart_id: int
    user_id: int
    version: int
    lines: List[CartLineOut]
    cart_total: Decimal
    total_after_discount: Decimal
    coupon_code: Optional[str] = None


class ApplyCouponIn(ApiModel):
    coupon_code: str = Field(..., min_length=1, max_length=50)


class ApplyCouponOut(ApiModel):
    total_after_discount: Decimal
    coupon_code: str


# --- orders ---

class PlaceOrderIn(ApiModel):
    use_cash_on_delivery: bool
    coupon_applied: bool = False


class OrderLineOut(ApiModel):
    product_id: int
    count: int
    color: str
    unit_price: Decimal
    title: Optional[str] = None


class PaymentIntentOut(ApiModel):
    id: str
    method: str
    amount: Decimal
    currency: str
    status: str
    created_at: datetime


class OrderedByOut(ApiModel):
    id: int
    name: Optional[str] = None
    email: Optional[str] = None


class OrderOut(ApiModel):
    """Schema dla zamowienia (response)."""

    order_id: int
    user_id: int
    lines: List[OrderLineOut]
    payment_intent: PaymentIntentOut
    order_status: str
    created_at: datetime
    ordered_by: Optional[OrderedByOut] = None


class OrderStatusIn(ApiModel):
    order_status: str = Field(..., min_length=1)
    payment_status: str = Field(..., min_length=1)


# --- coupons ---

class CouponCreate(ApiModel):
    code: str = Field(..., min_length=1, max_length=50)
    discount: int = Field(..., ge=1, le=99)
    expiry: datetime


class CouponUpdate(ApiModel):
    discount: Optional[int] = Field(None, ge=1, le=99)
    expiry: Optional[datetime] = None


class CouponOut(ApiModel):
    code: str
    discount: int
    expiry: datetime


# --- users ---

class UserCreate(ApiModel):
    """Schema dla tworzenia uzytkownika."""

    id: int = Field(..., gt=0, description="ID uzytkownika (musi byc > 0)")
    name: str = Field(..., min_length=1, max_length=100, description="Imie uzytkownika")
    email: Optional[str] = Field(None, max_length=254)
    role: str = Field("user", pattern="^(user|admin)$")


class AddressIn(ApiModel):
    address_line1: Optional[str] = None
    city: str = Field(..., min_length=1)
    postal_code: str = Field(..., min_length=1)
    country: Optional[str] = None


class UserRead(ApiModel):
    """Schema dla uzytkownika (response)."""

    id: int
    name: str
    email: Optional[str] = None
    role: str
    address_line1: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
