# storefront/repos/product_repo.py
from typing import List

from sqlalchemy import select, func

from storefront.data.models.product import ProductModel
from storefront.repos.base import BaseRepo, store_call


class ProductRepo(BaseRepo):

    @store_call("fetch product")
    def get_by_id(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    @store_call("fetch paginated products")
    def get_page(self, limit: int, offset: int) -> List[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel).order_by(ProductModel.id).limit(limit).offset(offset)
            ).scalars()
        )

    @store_call("count products")
    def count(self) -> int:
        return self.db.execute(select(func.count()).select_from(ProductModel)).scalar_one()

    @store_call("create product")
    def create(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    @store_call("update product")
    def update(self, product: ProductModel, fields: dict) -> ProductModel:
        for name, value in fields.items():
            setattr(product, name, value)
        self.db.commit()
        self.db.refresh(product)
        return product

    @store_call("delete product")
    def delete(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.commit()
