# storefront/repos/order_repo.py
from typing import List

from sqlalchemy import select

from storefront.data.models.order import OrderModel
from storefront.repos.base import BaseRepo, store_call


class OrderRepo(BaseRepo):

    @store_call("create order")
    def insert(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    @store_call("get orders")
    def get_by_user(self, user_id: str) -> List[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .where(OrderModel.user_id == user_id)
                .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            ).scalars()
        )

    @store_call("get order")
    def get_by_id(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    @store_call("update order")
    def update(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order
