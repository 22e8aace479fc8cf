from sqlalchemy import Column, Integer, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)

    count = Column(Integer, nullable=False)
    color = Column(String, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)  # cena z momentu dodania

    cart = relationship("CartModel", back_populates="items")
