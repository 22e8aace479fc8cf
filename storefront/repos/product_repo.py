# storefront/repos/product_repo.py
from typing import Dict, Iterable

from sqlalchemy import select, update

from storefront.data.models.product import ProductModel
from storefront.repos.base import BaseRepo


class ProductRepo(BaseRepo):
    """Odczyt katalogu i zmiana stanow magazynowych."""

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id, populate_existing=True)

    def get_products(self, product_ids: Iterable[int]) -> Dict[int, ProductModel]:
        ids = set(product_ids)
        if not ids:
            return {}
        rows = self.db.execute(
            select(ProductModel).where(ProductModel.id.in_(ids))
        ).scalars()
        return {p.id: p for p in rows}

    def decrement_stock(self, product_id: int, count: int) -> int:
        # warunkowy update, 0 rows = brak towaru
        res = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.quantity >= count)
            .values(
                quantity=ProductModel.quantity - count,
                sold=ProductModel.sold + count,
            )
            .execution_options(synchronize_session=False)
        )
        return res.rowcount
