"""Cart engine: replace, merge, read and empty."""

from decimal import Decimal

import pytest

from storefront.data.models import CartModel, ProductModel
from storefront.domain.errors import (
    ConcurrentModification,
    InsufficientStock,
    InvalidVariant,
    NoCartFound,
    ProductNotFound,
)
from storefront.repos.cart_repo import CartRepo
from storefront.services.cart_service import CartService


@pytest.fixture()
def service(catalog, publisher):
    return CartService(catalog, publisher)


def _line(product_id, count, color=None):
    line = {"product_id": product_id, "count": count}
    if color is not None:
        line["color"] = color
    return line


def _sum_lines(cart):
    return sum((l["unit_price"] * l["count"] for l in cart["lines"]), Decimal("0"))


class TestBuildCart:
    def test_build_snapshots_prices_and_totals(self, service):
        cart = service.build_cart(1, [_line(1, 2), _line(2, 1)])

        assert [(l["product_id"], l["count"]) for l in cart["lines"]] == [(1, 2), (2, 1)]
        assert cart["cart_total"] == Decimal("249.50")
        assert cart["total_after_discount"] == Decimal("249.50")
        assert cart["cart_total"] == _sum_lines(cart)

    def test_default_color_is_first_variant_or_general(self, service):
        cart = service.build_cart(1, [_line(1, 1), _line(2, 1)])

        colors = {l["product_id"]: l["color"] for l in cart["lines"]}
        assert colors == {1: "Black", 2: "General"}

    def test_build_replaces_previous_cart(self, service):
        service.build_cart(1, [_line(1, 2)])
        cart = service.build_cart(1, [_line(3, 1)])

        assert [l["product_id"] for l in cart["lines"]] == [3]
        assert cart["cart_total"] == Decimal("899.00")

    def test_duplicate_pairs_in_one_request_are_coalesced(self, service):
        cart = service.build_cart(1, [_line(1, 1), _line(1, 2, "Black")])

        assert len(cart["lines"]) == 1
        assert cart["lines"][0]["count"] == 3

    def test_unknown_product(self, service):
        with pytest.raises(ProductNotFound):
            service.build_cart(1, [_line(999, 1)])

    def test_insufficient_stock_reports_available_and_writes_nothing(self, service, catalog, publisher):
        with pytest.raises(InsufficientStock) as exc:
            service.build_cart(1, [_line(2, 5)])

        assert exc.value.details["available"] == 3
        assert exc.value.details["productName"] == "Mouse"
        assert "3" in exc.value.message
        assert CartRepo(catalog).get_cart_by_user(1) is None
        assert publisher.events == []

    def test_stock_is_shared_across_colors(self, service, catalog):
        with pytest.raises(InsufficientStock) as exc:
            service.build_cart(1, [_line(1, 6, "Black"), _line(1, 6, "White")])

        assert exc.value.details["available"] == 10
        assert CartRepo(catalog).get_cart_by_user(1) is None

    def test_colors_within_stock_accepted(self, service):
        cart = service.build_cart(1, [_line(1, 6, "Black"), _line(1, 4, "White")])

        assert sum(l["count"] for l in cart["lines"]) == 10

    def test_invalid_variant_lists_allowed(self, service):
        with pytest.raises(InvalidVariant) as exc:
            service.build_cart(1, [_line(1, 1, "Purple")])

        assert exc.value.details["allowedVariants"] == ["Black", "White"]

    def test_zero_count_rejected(self, service):
        with pytest.raises(ValueError):
            service.build_cart(1, [_line(1, 0)])

    def test_build_emits_cart_changed(self, service, publisher):
        service.build_cart(1, [_line(1, 1)])

        assert publisher.kinds() == ["cart.changed"]
        assert publisher.events[0].owner_id == 1


class TestAddItems:
    def test_requires_existing_cart(self, service):
        with pytest.raises(NoCartFound):
            service.add_items(1, [_line(1, 1)])

    def test_same_pair_increments_count(self, service):
        service.build_cart(1, [_line(1, 2, "White")])
        cart = service.add_items(1, [_line(1, 3, "White")])

        assert len(cart["lines"]) == 1
        assert cart["lines"][0]["count"] == 5
        assert cart["cart_total"] == Decimal("500.00")

    def test_new_pair_appends_line(self, service):
        service.build_cart(1, [_line(1, 1, "White")])
        cart = service.add_items(1, [_line(1, 1, "Black"), _line(2, 2)])

        assert [(l["product_id"], l["color"], l["count"]) for l in cart["lines"]] == [
            (1, "White", 1),
            (1, "Black", 1),
            (2, "General", 2),
        ]
        assert cart["cart_total"] == _sum_lines(cart) == Decimal("299.00")

    def test_stock_checked_against_combined_count(self, service):
        service.build_cart(1, [_line(2, 2)])

        with pytest.raises(InsufficientStock):
            service.add_items(1, [_line(2, 2)])

    def test_stock_checked_across_colors_already_in_cart(self, service):
        service.build_cart(1, [_line(1, 6, "Black")])

        with pytest.raises(InsufficientStock):
            service.add_items(1, [_line(1, 5, "White")])

        assert [(l["color"], l["count"]) for l in service.get_cart(1)["lines"]] == [("Black", 6)]

    def test_one_bad_line_aborts_whole_merge(self, service):
        service.build_cart(1, [_line(1, 1)])

        with pytest.raises(InvalidVariant):
            service.add_items(1, [_line(2, 1), _line(1, 1, "Purple")])

        cart = service.get_cart(1)
        assert [(l["product_id"], l["count"]) for l in cart["lines"]] == [(1, 1)]
        assert cart["cart_total"] == Decimal("100.00")

    def test_existing_line_keeps_snapshot_price(self, service, catalog):
        service.build_cart(1, [_line(1, 1)])
        catalog.get(ProductModel, 1).price = Decimal("120.00")
        catalog.commit()

        cart = service.add_items(1, [_line(1, 1)])

        assert cart["lines"][0]["unit_price"] == Decimal("100.00")
        assert cart["cart_total"] == Decimal("200.00")

    def test_merge_clears_applied_discount(self, service, catalog):
        service.build_cart(1, [_line(1, 1)])
        cart_row = CartRepo(catalog).get_cart_by_user(1)
        cart_row.total_after_discount = Decimal("90.00")
        cart_row.coupon_code = "SAVE10"
        catalog.commit()

        cart = service.add_items(1, [_line(1, 1)])

        assert cart["coupon_code"] is None
        assert cart["total_after_discount"] == cart["cart_total"] == Decimal("200.00")

    def test_version_conflict_is_retried(self, service, monkeypatch):
        service.build_cart(1, [_line(1, 1)])

        calls = {"n": 0}
        original = CartRepo.update_cart_version

        def flaky(self, cart_id, old_version, new_data):
            calls["n"] += 1
            if calls["n"] == 1:
                return 0
            return original(self, cart_id, old_version, new_data)

        monkeypatch.setattr(CartRepo, "update_cart_version", flaky)
        cart = service.add_items(1, [_line(1, 2)])

        assert calls["n"] == 2
        assert cart["lines"][0]["count"] == 3
        assert cart["cart_total"] == Decimal("300.00")

    def test_persistent_conflict_surfaces(self, service, monkeypatch):
        service.build_cart(1, [_line(1, 1)])
        monkeypatch.setattr(CartRepo, "update_cart_version", lambda *a, **kw: 0)

        with pytest.raises(ConcurrentModification):
            service.add_items(1, [_line(1, 1)])

        assert service.get_cart(1)["lines"][0]["count"] == 1

    def test_every_write_bumps_version(self, service):
        first = service.build_cart(1, [_line(1, 1)])
        second = service.add_items(1, [_line(1, 1)])

        assert second["version"] == first["version"] + 1


class TestReadAndEmpty:
    def test_get_cart_expands_current_catalog_data(self, service, catalog):
        service.build_cart(1, [_line(1, 1)])
        catalog.get(ProductModel, 1).price = Decimal("150.00")
        catalog.commit()

        cart = service.get_cart(1)

        line = cart["lines"][0]
        assert line["title"] == "Keyboard"
        assert line["current_price"] == Decimal("150.00")
        assert line["unit_price"] == Decimal("100.00")

    def test_get_cart_without_cart(self, service):
        with pytest.raises(NoCartFound):
            service.get_cart(1)

    def test_empty_cart_resets_lines_and_totals(self, service):
        service.build_cart(1, [_line(1, 2)])
        cart = service.empty_cart(1)

        assert cart["lines"] == []
        assert cart["cart_total"] == Decimal("0")
        assert cart["total_after_discount"] == Decimal("0")

    def test_empty_cart_is_idempotent(self, service, catalog):
        service.empty_cart(1)
        cart = service.empty_cart(1)

        assert cart["lines"] == []
        assert catalog.query(CartModel).filter_by(user_id=1).count() == 1
