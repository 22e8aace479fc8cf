# storefront/repos/coupon_repo.py
from typing import List

from sqlalchemy import select

from storefront.data.models.coupon import CouponModel
from storefront.repos.base import BaseRepo


class CouponRepo(BaseRepo):

    def get_by_code(self, code: str) -> CouponModel | None:
        return self.db.execute(
            select(CouponModel).where(CouponModel.code == code)
        ).scalar_one_or_none()

    def list_coupons(self) -> List[CouponModel]:
        return list(self.db.execute(select(CouponModel).order_by(CouponModel.id)).scalars())

    def create_coupon(self, coupon: CouponModel) -> CouponModel:
        self.db.add(coupon)
        self.commit()
        self.db.refresh(coupon)
        return coupon

    def save(self, coupon: CouponModel) -> CouponModel:
        self.commit()
        self.db.refresh(coupon)
        return coupon

    def delete_coupon(self, coupon: CouponModel) -> None:
        self.db.delete(coupon)
        self.commit()
