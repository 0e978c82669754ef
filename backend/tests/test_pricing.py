"""
Unit Tests: tienda.services.pricing

Weight-tier pricing, derived fields and the create/update validation rules.

Run with:
    pytest backend/tests/test_pricing.py -v
"""
import copy
from datetime import datetime, timezone

import pytest

from tienda.core.errors import ProductValidationError
from tienda.services import pricing


class TestRounding:

    @pytest.mark.parametrize("value, expected", [(1500.5, 1501), (1500.49, 1500), (2.5, 3), (0, 0)])
    def test_round_half_up(self, value, expected):
        assert pricing.round_half_up(value) == expected

    def test_tier_price_rounds_half_up(self):
        assert pricing.tier_price(15005, 100) == 1501
        assert pricing.tier_price(15005, 250) == 3751
        assert pricing.tier_price(15005, 500) == 7503
        assert pricing.tier_price(15005, 1000) == 15005

    def test_tier_price_accepts_float_price_per_kilo(self):
        assert pricing.tier_price(12345.6, 100) == 1235


class TestPrimaryImage:

    def test_flagged_image_wins(self):
        images = [{"url": "a.jpg"}, {"url": "b.jpg", "isPrimary": True}]
        assert pricing.primary_image_url(images) == "b.jpg"

    def test_first_image_when_none_flagged(self):
        assert pricing.primary_image_url([{"url": "a.jpg"}, {"url": "b.jpg"}]) == "a.jpg"

    def test_first_flagged_when_several(self):
        images = [{"url": "a.jpg"}, {"url": "b.jpg", "isPrimary": True}, {"url": "c.jpg", "isPrimary": True}]
        assert pricing.primary_image_url(images) == "b.jpg"

    def test_no_images(self):
        assert pricing.primary_image_url([]) is None
        assert pricing.primary_image_url(None) is None


class TestDeriveOnCreate:

    def test_tier_prices_from_price_per_kilo(self, product_draft, fixed_now):
        record = pricing.derive(product_draft, now=fixed_now)

        assert [(t["weight"], t["price"]) for t in record["pricesByWeight"]] == [
            (100, 1500), (250, 3750), (500, 7500), (1000, 15000),
        ]
        assert record["basePricePer100g"] == 1500

    def test_client_supplied_prices_are_ignored(self, product_draft, fixed_now):
        product_draft["pricesByWeight"][0]["price"] = 1
        record = pricing.derive(product_draft, now=fixed_now)
        assert record["pricesByWeight"][0]["price"] == 1500

    def test_total_stock_is_sum_of_tiers(self, product_draft, fixed_now):
        assert pricing.derive(product_draft, now=fixed_now)["totalStock"] == 10

    def test_image_is_primary_url(self, product_draft, fixed_now):
        record = pricing.derive(product_draft, now=fixed_now)
        assert record["image"] == "/uploads/products/almendras_2.jpg"
        assert [img["isPrimary"] for img in record["images"]] == [False, True]
        assert all(img["uploadDate"] == fixed_now for img in record["images"])

    def test_defaults_and_timestamps(self, product_draft, fixed_now):
        record = pricing.derive(product_draft, now=fixed_now)
        assert record["discount"] == 0
        assert record["featured"] is False
        assert record["isAdvertisement"] is False
        assert record["isMainCarousel"] is False
        assert record["createdAt"] == fixed_now
        assert record["updatedAt"] == fixed_now

    def test_category_only_becomes_single_item_list(self, product_draft, fixed_now):
        record = pricing.derive(product_draft, now=fixed_now)
        assert record["category"] == "Frutos secos"
        assert record["categories"] == ["Frutos secos"]

    def test_categories_list_sets_canonical_category(self, product_draft, fixed_now):
        product_draft.pop("category")
        product_draft["categories"] = ["Mix", "Frutos secos"]
        record = pricing.derive(product_draft, now=fixed_now)
        assert record["category"] == "Mix"
        assert record["categories"] == ["Mix", "Frutos secos"]

    def test_draft_is_not_mutated(self, product_draft, fixed_now):
        before = copy.deepcopy(product_draft)
        pricing.derive(product_draft, now=fixed_now)
        assert product_draft == before


class TestValidation:

    def _fields(self, draft, creating=True):
        with pytest.raises(ProductValidationError) as exc_info:
            pricing.derive(draft, creating=creating)
        return exc_info.value.fields

    def test_valid_draft_has_no_errors(self, product_draft):
        assert pricing.validate(product_draft) == []

    @pytest.mark.parametrize("ppk", [0, -10, "15000"])
    def test_price_per_kilo_must_be_positive_number(self, product_draft, ppk):
        product_draft["pricePerKilo"] = ppk
        assert self._fields(product_draft) == ["pricePerKilo"]

    def test_missing_price_per_kilo(self, product_draft):
        del product_draft["pricePerKilo"]
        errors = pricing.validate(product_draft)
        assert [e.message for e in errors] == ["El precio por kilo es requerido"]

    def test_every_problem_is_reported_once(self, product_draft):
        product_draft["name"] = "  "
        product_draft["images"] = []
        product_draft["discount"] = 150
        assert self._fields(product_draft) == ["name", "images", "discount"]

    def test_unknown_weight(self, product_draft):
        product_draft["pricesByWeight"][1]["weight"] = 300
        assert self._fields(product_draft) == ["pricesByWeight[1].weight"]

    def test_repeated_weight(self, product_draft):
        product_draft["pricesByWeight"][3]["weight"] = 100
        assert self._fields(product_draft) == ["pricesByWeight[3].weight"]

    def test_negative_stock(self, product_draft):
        product_draft["pricesByWeight"][0]["stock"] = -1
        assert self._fields(product_draft) == ["pricesByWeight[0].stock"]

    def test_no_tiers(self, product_draft):
        product_draft["pricesByWeight"] = []
        assert self._fields(product_draft) == ["pricesByWeight"]

    def test_create_needs_some_stock(self, product_draft):
        for tier in product_draft["pricesByWeight"]:
            tier["stock"] = 0
        assert self._fields(product_draft) == ["pricesByWeight"]

    def test_too_many_images(self, product_draft):
        product_draft["images"] = [{"url": f"/uploads/products/{i}.jpg"} for i in range(7)]
        assert self._fields(product_draft) == ["images"]

    def test_category_required(self, product_draft):
        del product_draft["category"]
        assert self._fields(product_draft) == ["category"]

    def test_empty_categories_list(self, product_draft):
        product_draft["categories"] = []
        assert self._fields(product_draft) == ["categories"]

    def test_payload_shape(self, product_draft):
        product_draft["pricePerKilo"] = 0
        with pytest.raises(ProductValidationError) as exc_info:
            pricing.derive(product_draft)
        assert exc_info.value.as_payload() == {
            "message": "Error de validación",
            "errors": [{"field": "pricePerKilo", "message": "El precio por kilo debe ser mayor a 0"}],
        }


class TestApplyUpdate:

    @pytest.fixture
    def stored(self, product_draft, fixed_now):
        record = pricing.derive(product_draft, now=fixed_now)
        record["id"] = "p1"
        return record

    def test_price_change_reprices_every_tier(self, stored):
        updated = pricing.apply_update(stored, {"pricePerKilo": 20000})
        assert [t["price"] for t in updated["pricesByWeight"]] == [2000, 5000, 10000, 20000]
        assert updated["basePricePer100g"] == 2000
        assert updated["totalStock"] == 10

    def test_stock_change_recomputes_total(self, stored):
        tiers = [{"weight": 100, "stock": 1}, {"weight": 1000, "stock": 1}]
        updated = pricing.apply_update(stored, {"pricesByWeight": tiers})
        assert updated["totalStock"] == 2
        assert [t["price"] for t in updated["pricesByWeight"]] == [1500, 15000]

    def test_update_may_leave_product_out_of_stock(self, stored):
        tiers = [{"weight": 100, "stock": 0}]
        assert pricing.apply_update(stored, {"pricesByWeight": tiers})["totalStock"] == 0

    def test_derived_and_immutable_keys_are_ignored(self, stored, fixed_now):
        later = datetime(2025, 4, 1, tzinfo=timezone.utc)
        updated = pricing.apply_update(
            stored,
            {"totalStock": 999, "image": "x.jpg", "createdAt": later, "id": "other"},
            now=later,
        )
        assert updated["totalStock"] == 10
        assert updated["image"] == "/uploads/products/almendras_2.jpg"
        assert updated["createdAt"] == fixed_now
        assert updated["updatedAt"] == later
        assert updated["id"] == "p1"

    def test_primary_image_follows_new_images(self, stored):
        images = [{"url": "/uploads/products/nuevo.jpg"}]
        assert pricing.apply_update(stored, {"images": images})["image"] == "/uploads/products/nuevo.jpg"

    def test_category_patch_replaces_canonical_entry(self, stored):
        stored["categories"] = ["Frutos secos", "Mix"]
        updated = pricing.apply_update(stored, {"category": "Snacks"})
        assert updated["category"] == "Snacks"
        assert updated["categories"] == ["Snacks", "Mix"]

    def test_invalid_patch_raises_and_leaves_existing_untouched(self, stored):
        before = copy.deepcopy(stored)
        with pytest.raises(ProductValidationError):
            pricing.apply_update(stored, {"pricePerKilo": 0})
        assert stored == before
