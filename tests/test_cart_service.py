"""
Tests for the shopper cart use cases.
"""
import pytest

from app.domain.errors import NotFoundError, ValidationFailure
from app.services.cart_service import CartService, CartStore
from tests.conftest import NOW, MemoryStorage


@pytest.fixture
def cart_store():
    return CartStore(MemoryStorage("local"), MemoryStorage("session"))


@pytest.fixture
def service(store, catalog, cart_store):
    return CartService(store=store, catalog=catalog, cart_store=cart_store)


class TestAddProduct:
    def test_discounted_price_captured(self, service, make_product, make_discount):
        product_id = make_product(price=1000)
        make_discount([product_id], discountPercentage=20)

        cart = service.add_product(product_id, quantity=3, now=NOW)

        item = cart["items"][0]
        assert item.price == 800
        assert item.original_price == 1000
        assert item.discount_applied == 20
        assert cart["subtotal"] == 2400
        assert cart["savings"] == 600
        assert cart["count"] == 3

    def test_repeat_add_merges(self, service, make_product):
        product_id = make_product(variations=["red", "blue"], sizes=["S", "M"])

        service.add_product(product_id, quantity=2, variation="red", size="M", now=NOW)
        cart = service.add_product(product_id, quantity=3, variation="red", size="M", now=NOW)

        assert len(cart["items"]) == 1
        assert cart["items"][0].quantity == 5

    def test_other_variation_new_entry(self, service, make_product):
        product_id = make_product(variations=["red", "blue"])

        service.add_product(product_id, variation="red", now=NOW)
        cart = service.add_product(product_id, variation="blue", now=NOW)

        assert [item.variation for item in cart["items"]] == ["red", "blue"]

    def test_merge_keeps_first_price(self, service, make_product, make_discount):
        product_id = make_product(price=1000)
        service.add_product(product_id, now=NOW)
        make_discount([product_id], discountPercentage=50)

        cart = service.add_product(product_id, now=NOW)

        assert cart["items"][0].price == 1000
        assert cart["items"][0].quantity == 2

    def test_defaults_to_first_options(self, service, make_product):
        product_id = make_product(variations=["red", "blue"], sizes=["S", "M"])

        item = service.add_product(product_id, now=NOW)["items"][0]

        assert (item.variation, item.size) == ("red", "S")

    def test_product_without_options_has_null_selection(self, service, make_product):
        product_id = make_product(variations=[], sizes=None)

        item = service.add_product(product_id, now=NOW)["items"][0]

        assert item.variation is None
        assert item.size is None

    def test_unknown_option_rejected(self, service, make_product):
        product_id = make_product(variations=["red"])

        with pytest.raises(ValidationFailure):
            service.add_product(product_id, variation="green", now=NOW)

    def test_option_on_product_without_options_rejected(self, service, make_product):
        product_id = make_product()

        with pytest.raises(ValidationFailure):
            service.add_product(product_id, size="XL", now=NOW)

    def test_unavailable_product_rejected(self, service, make_product, cart_store):
        product_id = make_product(available=False)

        with pytest.raises(ValidationFailure):
            service.add_product(product_id, now=NOW)
        assert cart_store.load_cart() == []

    def test_missing_product(self, service):
        with pytest.raises(NotFoundError):
            service.add_product("missing", now=NOW)

    def test_zero_quantity_rejected(self, service, make_product):
        with pytest.raises(ValidationFailure):
            service.add_product(make_product(), quantity=0, now=NOW)


class TestCartEdits:
    def test_change_quantity_and_remove(self, service, make_product):
        product_id = make_product(variations=["red", "blue"])
        service.add_product(product_id, variation="red", now=NOW)
        cart = service.add_product(product_id, variation="blue", now=NOW)
        red, blue = cart["items"]

        cart = service.change_quantity(red.id, 4)
        assert cart["items"][0].quantity == 4

        cart = service.change_quantity(red.id, 0)
        assert [item.id for item in cart["items"]] == [blue.id]

        cart = service.remove_entry(blue.id)
        assert cart["items"] == []

    def test_clear(self, service, make_product):
        service.add_product(make_product(), now=NOW)

        assert service.clear() == {"items": [], "count": 0, "subtotal": 0, "savings": 0}
        assert service.get_cart()["items"] == []


class TestBuyNow:
    def test_buy_now_not_merged_into_cart(self, service, make_product, make_discount):
        product_id = make_product(price=1000)
        make_discount([product_id], discountPercentage=20)

        item = service.buy_now(product_id, quantity=2, now=NOW)

        assert item.id == product_id
        assert item.price == 800
        assert service.get_cart()["items"] == []
        assert service.get_buy_now() == item

    def test_buy_now_overwrites(self, service, make_product):
        first = make_product(title="First")
        second = make_product(title="Second")

        service.buy_now(first, now=NOW)
        service.buy_now(second, quantity=4, now=NOW)

        assert service.get_buy_now().title == "Second"

    def test_no_buy_now_item(self, service):
        with pytest.raises(NotFoundError):
            service.get_buy_now()
