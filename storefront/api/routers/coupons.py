from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import require_admin
from storefront.data.database import get_db
from storefront.domain.errors import InvalidRequest
from storefront.domain.schemas import CouponCreate, CouponOut, CouponUpdate
from storefront.services.coupon_service import CouponService

router = APIRouter(prefix="/coupons", tags=["coupons"], dependencies=[Depends(require_admin)])


def get_service(db: Session = Depends(get_db)):
    return CouponService(db)


@router.post("", response_model=CouponOut, status_code=201)
def create_coupon(payload: CouponCreate, svc: CouponService = Depends(get_service)):
    try:
        return svc.create_coupon(payload.code, payload.discount, payload.expiry)
    except ValueError as e:
        raise InvalidRequest(str(e))


@router.get("", response_model=List[CouponOut])
def list_coupons(svc: CouponService = Depends(get_service)):
    return svc.list_coupons()


@router.get("/{code}", response_model=CouponOut)
def get_coupon(code: str, svc: CouponService = Depends(get_service)):
    return svc.get_coupon(code)


@router.put("/{code}", response_model=CouponOut)
def update_coupon(code: str, payload: CouponUpdate, svc: CouponService = Depends(get_service)):
    try:
        return svc.update_coupon(code, discount=payload.discount, expiry=payload.expiry)
    except ValueError as e:
        raise InvalidRequest(str(e))


@router.delete("/{code}", response_model=CouponOut)
def delete_coupon(code: str, svc: CouponService = Depends(get_service)):
    """Usuwa kupon, zwraca jego ostatni stan."""
    return svc.delete_coupon(code)
