from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError as SchemaError

from storefront.domain.errors import DependencyError, ProductNotFound, ValidationError
from storefront.domain.schemas import ProductIn, ProductUpdate
from storefront.repos.product_repo import ProductRepo
from storefront.services.product_service import (
    ProductService,
    listing_cache_key,
    normalize_paging,
)


@pytest.fixture
def repo(db):
    return MagicMock(wraps=ProductRepo(db))


@pytest.fixture
def service(repo, cache):
    return ProductService(repo, cache)


def _new_product(name="Lamp", price="30.00"):
    return ProductIn(name=name, description="Desk lamp", image="lamp.png", price=Decimal(price))


@pytest.mark.parametrize(
    "page,limit,expected",
    [(None, None, (1, 5)), (0, -1, (1, 5)), (2, 10, (2, 10)), (3, None, (3, 5))],
)
def test_normalize_paging(page, limit, expected):
    assert normalize_paging(page, limit) == expected


def test_listing_is_cached(service, repo, cache, make_product):
    make_product(name="A")
    make_product(name="B")

    first = service.get_paginated_products(1, 5)
    second = service.get_paginated_products(1, 5)

    assert repo.get_page.call_count == 1
    assert [p.name for p in second.products] == [p.name for p in first.products]
    assert first.total == 2
    assert listing_cache_key(1, 5) in cache.data
    assert cache.ttls[listing_cache_key(1, 5)] == 3600


def test_listing_pages(service, make_product):
    for i in range(3):
        make_product(name=f"P{i}")

    page = service.get_paginated_products(2, 2)

    assert [p.name for p in page.products] == ["P2"]
    assert page.total == 3


def test_malformed_cache_entry_is_a_miss(service, repo, cache, make_product):
    make_product()
    cache.set(listing_cache_key(1, 5), "{not valid", 60)

    result = service.get_paginated_products(None, None)

    assert repo.get_page.call_count == 1
    assert len(result.products) == 1


def test_cache_outage_does_not_fail_requests(db, make_product):
    make_product()
    broken = MagicMock()
    broken.get.side_effect = DependencyError("Cache read failed")
    broken.set.side_effect = DependencyError("Cache write failed")
    broken.delete_by_pattern.side_effect = DependencyError("Cache invalidation failed")
    service = ProductService(ProductRepo(db), broken)

    assert service.get_paginated_products(1, 5).total == 1
    created = service.create_product(_new_product())
    assert created.id is not None


def test_create_invalidates_listing(service, cache, make_product):
    make_product()
    service.get_paginated_products(1, 5)
    service.get_paginated_products(2, 5)

    created = service.create_product(_new_product())

    assert cache.data == {}
    page = service.get_paginated_products(1, 5)
    assert page.total == 2
    assert created.id in [p.id for p in page.products]


def test_update_product(service, cache, make_product):
    product = make_product()
    service.get_paginated_products(1, 5)

    updated = service.update_product(product.id, ProductUpdate(price=Decimal("15.50")))

    assert updated.price == Decimal("15.50")
    assert updated.name == product.name
    assert cache.data == {}


def test_update_without_fields(service, make_product):
    product = make_product()

    with pytest.raises(ValidationError):
        service.update_product(product.id, ProductUpdate())


def test_update_unknown_product(service):
    with pytest.raises(ProductNotFound):
        service.update_product(77, ProductUpdate(name="x"))


def test_delete_returns_snapshot(service, make_product):
    product = make_product(name="Gone")
    product_id = product.id

    deleted = service.delete_product(product_id)

    assert deleted.name == "Gone"
    with pytest.raises(ProductNotFound):
        service.get_product(product_id)


def test_invalid_product_id(service):
    with pytest.raises(ValidationError):
        service.get_product(0)


@pytest.mark.parametrize("price", ["0.001", "12.345", "123456789.00"])
def test_price_must_fit_the_column(price):
    with pytest.raises(SchemaError):
        _new_product(price=price)
    with pytest.raises(SchemaError):
        ProductUpdate(price=Decimal(price))
