# storefront/repos/order_repo.py
from typing import List

from sqlalchemy import select

from storefront.data.models.order import OrderModel
from storefront.repos.base import BaseRepo


class OrderRepo(BaseRepo):

    def add_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def list_orders_by_user(self, user_id: int) -> List[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .where(OrderModel.user_id == user_id)
                .order_by(OrderModel.id.desc())
            ).scalars()
        )

    def list_orders(self) -> List[OrderModel]:
        return list(self.db.execute(select(OrderModel).order_by(OrderModel.id.desc())).scalars())

    def update_order_status(self, order: OrderModel, order_status: str, payment_status: str) -> OrderModel:
        order.order_status = order_status
        order.payment_status = payment_status
        self.commit()
        self.db.refresh(order)
        return order
