# storefront/repos/cart_repo.py
from datetime import datetime, timezone

from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError

from storefront.data.models.cart import CartModel
from storefront.domain.errors import CartConflict
from storefront.repos.base import BaseRepo, store_call
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartRepo(BaseRepo):

    @store_call("retrieve cart")
    def get(self, user_id: str) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.user_id == user_id)
        ).scalar_one_or_none()

    @store_call("create/update cart")
    def upsert(self, user_id: str, product_info: str, expected_version: int | None) -> CartModel:
        """
        Create-if-absent, else update.

        expected_version is the version the caller read; None means the
        caller saw no cart. Either way a concurrent writer makes this raise
        CartConflict instead of overwriting its changes.
        """
        if expected_version is None:
            cart = CartModel(user_id=user_id, product_info=product_info, version=1)
            self.db.add(cart)
            try:
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                logger.warning(f"Cart for user {user_id} created concurrently")
                raise CartConflict()
            self.db.refresh(cart)
            return cart

        # e.g. UPDATE carts SET version = 3 WHERE user_id = 'u1' AND version = 2
        result = self.db.execute(
            update(CartModel)
            .where(CartModel.user_id == user_id, CartModel.version == expected_version)
            .values(
                product_info=product_info,
                version=expected_version + 1,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            logger.warning(f"Version conflict on cart of user {user_id} (expected {expected_version})")
            raise CartConflict()

        self.db.commit()
        return self.get(user_id)

    @store_call("delete cart")
    def delete(self, user_id: str, expected_version: int | None = None) -> bool:
        """
        Removes the cart. With expected_version the row is only removed if
        nobody wrote to it since; returns False when nothing was deleted.
        """
        stmt = delete(CartModel).where(CartModel.user_id == user_id)
        if expected_version is not None:
            stmt = stmt.where(CartModel.version == expected_version)
        result = self.db.execute(stmt.execution_options(synchronize_session=False))
        self.db.commit()
        return result.rowcount > 0
