# storefront/services/coupon_service.py
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from storefront.data.models.coupon import CouponModel
from storefront.domain.errors import CouponNotFound
from storefront.repos.coupon_repo import CouponRepo
from storefront.services.discount_service import as_utc, normalize_code
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def one_year_from(moment: datetime) -> datetime:
    try:
        return moment.replace(year=moment.year + 1)
    except ValueError:
        # 29 lutego
        return moment.replace(year=moment.year + 1, day=28)


def check_discount(discount: int) -> None:
    if not 1 <= discount <= 99:
        raise ValueError("Discount must be between 1 and 99 percent")


def check_expiry(expiry: datetime) -> datetime:
    now = datetime.now(timezone.utc)
    expiry = as_utc(expiry)
    if expiry <= now:
        raise ValueError("Expiry date must be in the future")
    if expiry > one_year_from(now):
        raise ValueError("Expiry date must not exceed 1 year from now")
    return expiry


class CouponService:
    def __init__(self, db: Session):
        self.repo = CouponRepo(db)

    def create_coupon(self, code: str, discount: int, expiry: datetime) -> CouponModel:
        normalized = normalize_code(code)
        if not normalized:
            raise ValueError("Coupon code is required")
        check_discount(discount)
        expiry = check_expiry(expiry)

        if self.repo.get_by_code(normalized):
            raise ValueError(f"Coupon {normalized} already exists")

        coupon = self.repo.create_coupon(
            CouponModel(code=normalized, discount=discount, expiry=expiry)
        )
        logger.info(f"Coupon {coupon.code} created ({coupon.discount}%, expires {coupon.expiry})")
        return coupon

    def list_coupons(self) -> List[CouponModel]:
        return self.repo.list_coupons()

    def get_coupon(self, code: str) -> CouponModel:
        normalized = normalize_code(code)
        coupon = self.repo.get_by_code(normalized)
        if not coupon:
            raise CouponNotFound(normalized)
        return coupon

    def update_coupon(
        self,
        code: str,
        discount: Optional[int] = None,
        expiry: Optional[datetime] = None,
    ) -> CouponModel:
        """
        Zmienia rabat i/lub date waznosci, kod zostaje.
        Te same reguly co przy tworzeniu, nic nie jest zapisane jesli ktores pole zle.
        """
        coupon = self.get_coupon(code)

        if discount is not None:
            check_discount(discount)
        if expiry is not None:
            expiry = check_expiry(expiry)

        if discount is not None:
            coupon.discount = discount
        if expiry is not None:
            coupon.expiry = expiry
        saved = self.repo.save(coupon)

        logger.info(f"Coupon {saved.code} updated ({saved.discount}%, expires {saved.expiry})")
        return saved

    def delete_coupon(self, code: str) -> Dict[str, Any]:
        #koszyki z tym kuponem zostaja, przy zamowieniu kupon jest sprawdzany ponownie
        coupon = self.get_coupon(code)
        deleted = {"code": coupon.code, "discount": coupon.discount, "expiry": coupon.expiry}
        self.repo.delete_coupon(coupon)

        logger.info(f"Coupon {deleted['code']} deleted")
        return deleted
