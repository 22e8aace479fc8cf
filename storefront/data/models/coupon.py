from sqlalchemy import Column, Integer, String, DateTime

from storefront.data.database import Base


class CouponModel(Base):
    __tablename__ = "coupons"

    id = Column(Integer, primary_key=True)
    code = Column(String(50), nullable=False, unique=True, index=True)  # zawsze UPPER
    discount = Column(Integer, nullable=False)  # procent 1-99
    expiry = Column(DateTime(timezone=True), nullable=False)
