"""
Tests for the pure cart operations.
"""
import pytest

from app.domain import cart as cart_ops
from app.domain.errors import NotFoundError, ValidationFailure
from app.domain.schemas import CartItem, PriceQuote, Product
from tests.conftest import NOW


def make_item(entry_id="e1", product_id="p1", variation="red", size="M", quantity=1, price=1000, **extra) -> CartItem:
    return CartItem(
        id=entry_id,
        product_id=product_id,
        title="Rose Lawn Suit",
        price=price,
        original_price=extra.pop("original_price", 1000),
        quantity=quantity,
        variation=variation,
        size=size,
        created_at=NOW,
        **extra,
    )


class TestAddItem:
    def test_identical_configuration_merges(self):
        cart = cart_ops.add_item([], make_item("e1", quantity=2))
        cart = cart_ops.add_item(cart, make_item("e2", quantity=3))

        assert len(cart) == 1
        assert cart[0].id == "e1"
        assert cart[0].quantity == 5

    def test_different_variation_is_new_entry(self):
        cart = cart_ops.add_item([], make_item("e1", variation="red"))
        cart = cart_ops.add_item(cart, make_item("e2", variation="blue"))

        assert [item.variation for item in cart] == ["red", "blue"]

    def test_different_size_is_new_entry(self):
        cart = cart_ops.add_item([], make_item("e1", size="M"))
        cart = cart_ops.add_item(cart, make_item("e2", size="L"))

        assert len(cart) == 2

    def test_no_options_merge_with_no_options(self):
        cart = cart_ops.add_item([], make_item("e1", variation=None, size=None))
        cart = cart_ops.add_item(cart, make_item("e2", variation=None, size=None, quantity=4))

        assert len(cart) == 1
        assert cart[0].quantity == 5

    def test_merge_keeps_original_price(self):
        first = make_item("e1", price=1000, quantity=1)
        later = make_item("e2", price=800, quantity=1, discount_applied=20)

        cart = cart_ops.add_item(cart_ops.add_item([], first), later)

        assert cart[0].price == 1000
        assert cart[0].discount_applied is None

    def test_input_cart_not_mutated(self):
        original = [make_item("e1", quantity=1)]

        cart_ops.add_item(original, make_item("e2", quantity=2))
        cart_ops.add_item(original, make_item("e3", variation="green"))

        assert len(original) == 1
        assert original[0].quantity == 1

    def test_insertion_order_preserved(self):
        cart = []
        for entry_id, product_id in [("a", "p3"), ("b", "p1"), ("c", "p2")]:
            cart = cart_ops.add_item(cart, make_item(entry_id, product_id=product_id))

        assert [item.product_id for item in cart] == ["p3", "p1", "p2"]


class TestUpdateAndRemove:
    def test_update_quantity(self):
        cart = [make_item("e1", quantity=2), make_item("e2", variation="blue")]

        updated = cart_ops.update_quantity(cart, "e1", 7)

        assert updated[0].quantity == 7
        assert cart[0].quantity == 2

    def test_zero_quantity_removes_entry(self):
        cart = [make_item("e1"), make_item("e2", variation="blue")]

        updated = cart_ops.update_quantity(cart, "e1", 0)

        assert [item.id for item in updated] == ["e2"]

    def test_negative_quantity_rejected(self):
        with pytest.raises(ValidationFailure):
            cart_ops.update_quantity([make_item("e1")], "e1", -1)

    def test_unknown_entry(self):
        with pytest.raises(NotFoundError):
            cart_ops.update_quantity([make_item("e1")], "nope", 2)
        with pytest.raises(NotFoundError):
            cart_ops.remove_item([make_item("e1")], "nope")

    def test_remove_item(self):
        cart = [make_item("e1"), make_item("e2", variation="blue")]

        assert [item.id for item in cart_ops.remove_item(cart, "e2")] == ["e1"]

    def test_clear(self):
        assert cart_ops.clear_cart() == []


class TestEntryIdentity:
    def test_entry_id_layout(self):
        assert cart_ops.new_entry_id("p1", "red", "M", token="t0") == "p1_red_M_t0"
        assert cart_ops.new_entry_id("p1", None, "M", token="t0") == "p1_M_t0"
        assert cart_ops.new_entry_id("p1", token="t0") == "p1_t0"

    def test_entry_ids_are_unique(self):
        assert cart_ops.new_entry_id("p1", "red") != cart_ops.new_entry_id("p1", "red")

    def test_merge_key_ignores_entry_id(self):
        assert cart_ops.merge_key(make_item("e1")) == cart_ops.merge_key(make_item("e2"))

    def test_build_item_uses_discounted_price(self):
        product = Product(id="p1", title="Rose Lawn Suit", price=1000, cover_image="cover.jpg")
        pricing = PriceQuote(product_id="p1", price=1000, discounted_price=800, discount_percentage=20)

        item = cart_ops.build_item(product, pricing, 2, "red", None, NOW)

        assert item.price == 800
        assert item.original_price == 1000
        assert item.discount_applied == 20
        assert item.image == "cover.jpg"
        assert item.id.startswith("p1_red_")


def test_cart_totals():
    cart = [
        make_item("e1", quantity=2, price=800, discount_applied=20),
        make_item("e2", variation="blue", quantity=1, price=1000),
    ]

    assert cart_ops.cart_totals(cart) == {"count": 3, "subtotal": 2600, "savings": 400}
