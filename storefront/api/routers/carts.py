#storefront/api/routers/carts.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_publisher
from storefront.data.database import get_db
from storefront.domain.errors import InvalidRequest
from storefront.domain.schemas import (
    ApplyCouponIn,
    ApplyCouponOut,
    CartLineIn,
    CartOut,
)
from storefront.services.cart_service import CartService
from storefront.services.discount_service import DiscountService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session = Depends(get_db), publisher=Depends(get_publisher)):
    return CartService(db=db, publisher=publisher)


def get_discount_service(db: Session = Depends(get_db), publisher=Depends(get_publisher)):
    return DiscountService(db=db, publisher=publisher)


def _lines(payload: List[CartLineIn]) -> List[dict]:
    return [line.model_dump() for line in payload]


@router.post("", response_model=CartOut)
def submit_cart(
    payload: List[CartLineIn],
    user_id: int = Query(...),
    svc: CartService = Depends(get_service),
):
    """Zastepuje caly koszyk uzytkownika."""
    try:
        return svc.build_cart(user_id, _lines(payload))
    except ValueError as e:
        raise InvalidRequest(str(e))


@router.post("/items", response_model=CartOut)
def merge_items(
    payload: List[CartLineIn],
    user_id: int = Query(...),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.add_items(user_id, _lines(payload))
    except ValueError as e:
        raise InvalidRequest(str(e))


@router.get("", response_model=CartOut)
def get_cart(user_id: int = Query(...), svc: CartService = Depends(get_service)):
    return svc.get_cart(user_id)


@router.delete("", response_model=CartOut)
def empty_cart(user_id: int = Query(...), svc: CartService = Depends(get_service)):
    return svc.empty_cart(user_id)


@router.post("/coupon", response_model=ApplyCouponOut)
def apply_coupon(
    payload: ApplyCouponIn,
    user_id: int = Query(...),
    svc: DiscountService = Depends(get_discount_service),
):
    return svc.apply_coupon(user_id, payload.coupon_code)
