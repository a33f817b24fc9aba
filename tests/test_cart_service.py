from decimal import Decimal

import pytest

from storefront.domain.errors import (
    CartConflict,
    CartNotFound,
    InvalidCartData,
    MalformedCart,
    ProductNotInCart,
    ValidationError,
)
from storefront.domain.schemas import CartLineIn
from storefront.repos.cart_repo import CartRepo
from storefront.services.cart_service import CartService, decode_lines


@pytest.fixture
def repo(db):
    return CartRepo(db)


@pytest.fixture
def service(repo):
    return CartService(repo)


def test_add_line_creates_cart(service):
    cart = service.add_line("u1", product_id=1, quantity=2, price=Decimal("10.00"))

    assert cart.version == 1
    assert len(cart.lines) == 1
    assert cart.lines[0].product_id == 1
    assert cart.total == Decimal("20.00")


def test_add_existing_product_sums_quantity_and_takes_new_price(service):
    service.add_line("u1", product_id=1, quantity=2, price=Decimal("10.00"))
    cart = service.add_line("u1", product_id=1, quantity=3, price=Decimal("9.50"))

    assert len(cart.lines) == 1
    assert cart.lines[0].quantity == 5
    assert cart.lines[0].price == Decimal("9.50")
    assert cart.version == 2


def test_add_different_product_appends(service):
    service.add_line("u1", product_id=1, quantity=1, price=Decimal("10"))
    cart = service.add_line("u1", product_id=2, quantity=1, price=Decimal("5"))

    assert [line.product_id for line in cart.lines] == [1, 2]
    assert cart.total == Decimal("15")


@pytest.mark.parametrize(
    "product_id,quantity,price",
    [(0, 1, Decimal("1")), (1, 0, Decimal("1")), (1, 1, Decimal("0")), (1, -2, Decimal("1"))],
)
def test_add_line_rejects_invalid_values(service, repo, product_id, quantity, price):
    with pytest.raises(InvalidCartData) as exc:
        service.add_line("u1", product_id=product_id, quantity=quantity, price=price)

    assert exc.value.message == "Invalid product ID, quantity, or price"
    assert repo.get("u1") is None


def test_empty_user_id_is_rejected(service):
    with pytest.raises(ValidationError):
        service.get_cart("")


def test_get_cart_without_cart_returns_none(service):
    assert service.get_cart("nobody") is None


def test_remove_partial_quantity(service):
    service.add_line("u1", product_id=1, quantity=5, price=Decimal("2"))
    cart = service.remove_quantity("u1", 1, 2)

    assert cart.lines[0].quantity == 3


def test_remove_whole_quantity_drops_line(service):
    service.add_line("u1", product_id=1, quantity=2, price=Decimal("2"))
    service.add_line("u1", product_id=2, quantity=1, price=Decimal("3"))
    cart = service.remove_quantity("u1", 1, 5)

    assert [line.product_id for line in cart.lines] == [2]


def test_remove_from_missing_cart(service):
    with pytest.raises(CartNotFound):
        service.remove_quantity("u1", 1, 1)


def test_remove_product_not_in_cart_does_not_write(service, repo):
    service.add_line("u1", product_id=1, quantity=1, price=Decimal("2"))

    with pytest.raises(ProductNotInCart):
        service.remove_quantity("u1", 42, 1)

    assert repo.get("u1").version == 1


def test_remove_rejects_non_positive_quantity(service):
    with pytest.raises(InvalidCartData):
        service.remove_quantity("u1", 1, 0)


def test_replace_lines_creates_cart_when_absent(service):
    cart = service.replace_lines(
        "u1",
        [
            CartLineIn(product_id=1, quantity=1, price=Decimal("4")),
            {"productId": 2, "quantity": 3, "price": "1.5"},
        ],
    )

    assert cart.version == 1
    assert cart.total == Decimal("8.5")


def test_replace_lines_rejects_duplicates(service, repo):
    service.add_line("u1", product_id=1, quantity=1, price=Decimal("4"))

    with pytest.raises(InvalidCartData):
        service.replace_lines(
            "u1",
            [
                CartLineIn(product_id=1, quantity=1, price=Decimal("4")),
                CartLineIn(product_id=1, quantity=2, price=Decimal("4")),
            ],
        )

    assert len(decode_lines(repo.get("u1").product_info)) == 1


def test_replace_lines_rejects_invalid_line(service):
    with pytest.raises(InvalidCartData):
        service.replace_lines("u1", [CartLineIn(product_id=1, quantity=0, price=Decimal("4"))])


def test_clear_cart(service):
    service.add_line("u1", product_id=1, quantity=1, price=Decimal("4"))
    service.clear_cart("u1")

    assert service.get_cart("u1") is None


def test_stale_version_raises_conflict(service, repo):
    service.add_line("u1", product_id=1, quantity=1, price=Decimal("4"))
    stale_version = repo.get("u1").version

    repo.upsert("u1", "[]", stale_version)

    with pytest.raises(CartConflict):
        repo.upsert("u1", "[]", stale_version)


def test_concurrent_create_raises_conflict(repo):
    repo.upsert("u1", "[]", None)

    with pytest.raises(CartConflict):
        repo.upsert("u1", "[]", None)


def test_malformed_stored_cart(service, make_cart):
    make_cart("u1", "not json at all")

    with pytest.raises(MalformedCart):
        service.get_cart("u1")
    with pytest.raises(MalformedCart):
        service.add_line("u1", product_id=1, quantity=1, price=Decimal("1"))


def test_remove_exact_quantity_drops_line(service):
    service.add_line("u1", product_id=1, quantity=2, price=Decimal("2"))

    cart = service.remove_quantity("u1", 1, 2)

    assert cart.lines == []
    assert cart.total == Decimal("0")


def test_delete_with_stale_version_keeps_cart(service, repo):
    service.add_line("u1", product_id=1, quantity=1, price=Decimal("4"))
    stale_version = repo.get("u1").version
    service.add_line("u1", product_id=2, quantity=1, price=Decimal("4"))

    assert repo.delete("u1", stale_version) is False
    assert repo.get("u1") is not None

    assert repo.delete("u1", stale_version + 1) is True
    assert repo.get("u1") is None
