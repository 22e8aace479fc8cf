# storefront/services/order_query_service.py
from typing import Dict, Any, List

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.domain.errors import OrderNotFound, UserNotFound
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.order_service import order_to_dict


class OrderQueryService:
    """Odczyt zamowien (query), bez zadnych zapisow."""

    def __init__(self, db: Session):
        self.repo = OrderRepo(db)
        self.products = ProductRepo(db)
        self.users = UserRepo(db)

    def get_order(self, order_id: int, user_id: int) -> Dict[str, Any]:
        requester = self.users.get_user(user_id)
        if not requester:
            raise UserNotFound(user_id)

        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFound(order_id)

        if order.user_id != user_id and not requester.is_admin:
            raise PermissionError("No access to this order")

        return self._expand([order])[0]

    def list_orders_for_user(self, user_id: int) -> List[Dict[str, Any]]:
        return self._expand(self.repo.list_orders_by_user(user_id))

    def list_all_orders(self) -> List[Dict[str, Any]]:
        return self._expand(self.repo.list_orders())

    def _expand(self, orders: List[OrderModel]) -> List[Dict[str, Any]]:
        #dociagnij tytuly produktow i dane zamawiajacego do wyswietlenia
        catalog = self.products.get_products(i.product_id for o in orders for i in o.items)
        owners = self.users.get_users(o.user_id for o in orders)

        result = []
        for order in orders:
            data = order_to_dict(order)
            for line in data["lines"]:
                product = catalog.get(line["product_id"])
                line["title"] = product.title if product else None
            owner = owners.get(order.user_id)
            data["ordered_by"] = {
                "id": order.user_id,
                "name": owner.name if owner else None,
                "email": owner.email if owner else None,
            }
            result.append(data)
        return result
