"""
Tests for admin discount management.
"""
from datetime import timedelta

import pytest

from app.domain.errors import NotFoundError, ValidationFailure
from app.domain.schemas import DiscountIn
from app.services.discount_service import DiscountService, validate_discount
from tests.conftest import NOW


@pytest.fixture
def service(store, catalog):
    return DiscountService(store, catalog)


def discount_in(**overrides) -> DiscountIn:
    fields = {
        "productIds": ["p1"],
        "discountPercentage": 25,
        "startDate": (NOW - timedelta(days=1)).isoformat(),
        "endDate": (NOW + timedelta(days=1)).isoformat(),
        "description": "Weekend deal",
    }
    fields.update(overrides)
    return DiscountIn.model_validate(fields)


class TestValidation:
    def test_requires_products(self):
        with pytest.raises(ValidationFailure, match="at least one product"):
            validate_discount(discount_in(productIds=[]))

    @pytest.mark.parametrize("pct", [None, 0, -5, 100.5, 250, float("nan"), float("inf")])
    def test_percentage_range(self, pct):
        with pytest.raises(ValidationFailure, match="valid discount percentage"):
            validate_discount(discount_in(discountPercentage=pct))

    def test_accepts_full_discount(self):
        validate_discount(discount_in(discountPercentage=100))

    @pytest.mark.parametrize("end_offset", [timedelta(0), timedelta(hours=-1)])
    def test_end_must_follow_start(self, end_offset):
        payload = discount_in(startDate=NOW.isoformat(), endDate=(NOW + end_offset).isoformat())

        with pytest.raises(ValidationFailure, match="End date must be after start date"):
            validate_discount(payload)

    def test_invalid_discount_is_not_written(self, service, store):
        with pytest.raises(ValidationFailure):
            service.create_discount(discount_in(productIds=[]))

        assert store.list_documents("discounts") == []

    def test_nan_percentage_is_not_written(self, service, store):
        with pytest.raises(ValidationFailure, match="valid discount percentage"):
            service.create_discount(discount_in(discountPercentage=float("nan")))

        assert store.list_documents("discounts") == []


class TestCommands:
    def test_create_enables_and_stamps(self, service, make_product):
        product_id = make_product()

        discount = service.create_discount(discount_in(productIds=[product_id]))

        assert discount.is_active is True
        assert discount.created_at is not None
        assert discount.product_ids == [product_id]
        assert discount.discount_percentage == 25

    def test_toggle(self, service, make_product):
        discount = service.create_discount(discount_in(productIds=[make_product()]))

        assert service.toggle_discount(discount.id).is_active is False
        assert service.toggle_discount(discount.id).is_active is True

    def test_delete(self, service, store, make_product):
        discount = service.create_discount(discount_in(productIds=[make_product()]))

        service.delete_discount(discount.id)

        assert store.get_document("discounts", discount.id) is None
        with pytest.raises(NotFoundError):
            service.delete_discount(discount.id)

    def test_toggle_missing(self, service):
        with pytest.raises(NotFoundError):
            service.toggle_discount("missing")


class TestListing:
    def test_status_and_previews(self, service, make_product, make_discount):
        product_id = make_product(title="Shawl", price=2999)
        make_discount([product_id, "deleted-product"], discountPercentage=12.5, createdAt=NOW - timedelta(days=2))
        make_discount([product_id], isActive=False, createdAt=NOW - timedelta(days=1))

        views = service.list_discounts(now=NOW)

        assert [view.status for view in views] == ["Disabled", "Active"]
        active = views[1]
        assert active.active is True
        assert [(p.title, p.price, p.discounted_price) for p in active.previews] == [("Shawl", 2999, 2624)]

    def test_preview_matches_product_page_formula(self, service, catalog, make_product, make_discount):
        product_id = make_product(price=1999)
        make_discount([product_id], discountPercentage=15)

        preview = service.preview([product_id], 15)[0]
        shown = catalog.quote(catalog.product(product_id), NOW)

        assert preview.discounted_price == shown.discounted_price == 1699
