# storefront/services/product_service.py
from pydantic import ValidationError as SchemaError

from storefront.data.models.product import ProductModel
from storefront.domain.errors import DependencyError, ProductNotFound, ValidationError
from storefront.domain.ports import CatalogStore, ListingCache
from storefront.domain.schemas import (
    PaginatedProducts,
    ProductIn,
    ProductOut,
    ProductUpdate,
)
from storefront.utils.deadline import Deadline
from storefront.utils.settings import DEFAULT_LIMIT, DEFAULT_PAGE, PRODUCT_CACHE_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# every cached listing page lives under this prefix
LISTING_KEY_PATTERN = "products:*"


def listing_cache_key(page: int, limit: int) -> str:
    return f"products:{page}:{limit}"


def normalize_paging(page: int | None, limit: int | None) -> tuple[int, int]:
    if page is None or page <= 0:
        page = DEFAULT_PAGE
    if limit is None or limit <= 0:
        limit = DEFAULT_LIMIT
    return page, limit


class ProductService:
    """
    Catalog reads and admin mutations.

    Listing pages are served from the cache when possible. Cache trouble
    never fails a request: reads fall through to the catalog and failed
    writes or invalidations are only logged.
    """

    def __init__(
        self,
        repo: CatalogStore,
        cache: ListingCache,
        deadline: Deadline | None = None,
        cache_ttl: int = PRODUCT_CACHE_TTL_SECONDS,
    ):
        self.repo = repo
        self.cache = cache
        self.deadline = deadline or Deadline.none()
        self.cache_ttl = cache_ttl

    # =====================================================
    # QUERIES
    # =====================================================
    def get_paginated_products(self, page: int | None, limit: int | None) -> PaginatedProducts:
        page, limit = normalize_paging(page, limit)
        key = listing_cache_key(page, limit)

        self.deadline.check("listing cache lookup")
        cached = self._read_cache(key)
        if cached is not None:
            logger.info(f"Cache hit for key: {key}")
            return cached

        self.deadline.check("catalog query")
        offset = (page - 1) * limit
        products = self.repo.get_page(limit, offset)
        total = self.repo.count()

        response = PaginatedProducts(
            products=[ProductOut.model_validate(p) for p in products],
            total=total,
            page=page,
            limit=limit,
        )

        try:
            self.cache.set(key, response.model_dump_json(by_alias=True), self.cache_ttl)
        except DependencyError as e:
            logger.warning(f"Failed to cache products page {key}: {e}")

        return response

    def get_product(self, product_id: int) -> ProductOut:
        self._check_id(product_id)
        self.deadline.check("catalog lookup")
        product = self.repo.get_by_id(product_id)
        if not product:
            raise ProductNotFound(message="Product not found")
        return ProductOut.model_validate(product)

    # =====================================================
    # COMMANDS
    # =====================================================
    def create_product(self, payload: ProductIn) -> ProductOut:
        self.deadline.check("product create")
        created = self.repo.create(
            ProductModel(
                name=payload.name,
                description=payload.description,
                image=payload.image,
                price=payload.price,
            )
        )
        logger.info(f"Product {created.id} created")
        self._invalidate_listing()
        return ProductOut.model_validate(created)

    def update_product(self, product_id: int, updates: ProductUpdate) -> ProductOut:
        self._check_id(product_id)
        fields = updates.model_dump(exclude_unset=True, exclude_none=True)
        if not fields:
            raise ValidationError("No valid fields provided for update")

        self.deadline.check("product update")
        product = self.repo.get_by_id(product_id)
        if not product:
            raise ProductNotFound(message="Product not found")

        updated = self.repo.update(product, fields)
        logger.info(f"Product {product_id} updated ({', '.join(sorted(fields))})")
        self._invalidate_listing()
        return ProductOut.model_validate(updated)

    def delete_product(self, product_id: int) -> ProductOut:
        self._check_id(product_id)
        self.deadline.check("product delete")
        product = self.repo.get_by_id(product_id)
        if not product:
            raise ProductNotFound(message="Product not found")

        snapshot = ProductOut.model_validate(product)
        self.repo.delete(product)
        logger.info(f"Product {product_id} deleted")
        self._invalidate_listing()
        return snapshot

    # =====================================================
    # helpers
    # =====================================================
    def _read_cache(self, key: str) -> PaginatedProducts | None:
        try:
            raw = self.cache.get(key)
        except DependencyError as e:
            logger.warning(f"Cache read for {key} failed, falling back to catalog: {e}")
            return None
        if raw is None:
            return None
        try:
            return PaginatedProducts.model_validate_json(raw)
        except SchemaError:
            logger.warning(f"Malformed cached payload under {key}, treating as miss")
            return None

    def _invalidate_listing(self) -> None:
        try:
            removed = self.cache.delete_by_pattern(LISTING_KEY_PATTERN)
            logger.info(f"Invalidated {removed} cached listing page(s)")
        except DependencyError as e:
            logger.error(f"Failed to invalidate product cache: {e}")

    @staticmethod
    def _check_id(product_id: int) -> None:
        if product_id <= 0:
            raise ValidationError("Invalid product ID")
