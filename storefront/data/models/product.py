#storefront/data/models/product.py
from sqlalchemy import Column, Integer, String, Numeric, JSON

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    title = Column(String(100), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)

    quantity = Column(Integer, nullable=False, default=0)
    sold = Column(Integer, nullable=False, default=0)

    # warianty kolorystyczne, pierwszy jest domyslny
    colors = Column(JSON, nullable=False, default=list)
