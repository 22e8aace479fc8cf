# storefront/repos/cart_repo.py
from sqlalchemy import select, update

from storefront.data.models.cart import CartModel
from storefront.repos.base import BaseRepo


class CartRepo(BaseRepo):

    def get_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.user_id == user_id)
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        #bez commita, caller decyduje o granicy transakcji
        self.db.add(cart)
        self.db.flush()
        return cart

    def update_cart_version(self, cart_id: int, old_version: int, new_data: dict) -> int:
        # UPDATE carts SET ... WHERE id = :id AND version = :old_version
        # zmiany w liniach koszyka ida w tym samym flushu (autoflush)
        res = self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.version == old_version)
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        return res.rowcount
