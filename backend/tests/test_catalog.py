"""
Unit Tests: storefront helpers (tienda.services.catalog)

Run with:
    pytest backend/tests/test_catalog.py -v
"""
import pytest

from tienda.services import catalog, pricing


@pytest.fixture
def product(product_draft, fixed_now):
    return pricing.derive(product_draft, now=fixed_now)


class TestPrices:

    def test_base_price_uses_derived_field(self, product):
        assert catalog.base_price(product) == 1500

    def test_base_price_of_legacy_product_is_cheapest_tier(self):
        legacy = {"pricesByWeight": [{"weight": 500, "price": 7000}, {"weight": 250, "price": 3600}]}
        assert catalog.base_price(legacy) == 3600

    def test_base_price_without_tiers(self):
        assert catalog.base_price({}) == 0

    def test_discounted_price_and_savings(self, product):
        product["discount"] = 10
        assert catalog.discounted_price(product) == 1350
        assert catalog.savings(product) == 150

    def test_no_discount(self, product):
        assert catalog.discounted_price(product) == 1500
        assert catalog.savings(product) == 0

    @pytest.mark.parametrize("amount, expected", [
        (12500, "$12.500"),
        (1234567, "$1.234.567"),
        (990, "$990"),
        (1500.5, "$1.501"),
    ])
    def test_format_price(self, amount, expected):
        assert catalog.format_price(amount) == expected


class TestStock:

    def test_total_stock(self, product):
        assert catalog.product_stock(product) == 10
        assert catalog.has_stock(product)

    def test_legacy_product_sums_tiers(self):
        legacy = {"pricesByWeight": [{"weight": 100, "stock": 2}, {"weight": 250}]}
        assert catalog.product_stock(legacy) == 2

    def test_out_of_stock(self):
        assert not catalog.has_stock({"totalStock": 0})

    def test_weight_options_hide_empty_tiers(self, product):
        options = catalog.weight_options(product)
        assert [o["weight"] for o in options] == [100, 500, 1000]
        assert options[0] == {"weight": 100, "price": 1500, "stock": 5, "label": "100g"}

    def test_weight_options_can_include_empty_tiers(self, product):
        assert len(catalog.weight_options(product, include_out_of_stock=True)) == 4


class TestMainImage:

    def test_primary_image(self, product):
        assert catalog.main_image(product) == "/uploads/products/almendras_2.jpg"

    def test_bare_file_name_is_resolved(self):
        assert catalog.main_image({"images": [{"url": "nueces.png"}]}) == "/uploads/products/nueces.png"

    def test_absolute_url_is_kept(self):
        url = "https://cdn.example.com/nueces.png"
        assert catalog.main_image({"images": [{"url": url}]}) == url

    def test_legacy_image_field(self):
        assert catalog.main_image({"image": "pasas.jpg"}) == "/uploads/products/pasas.jpg"

    def test_placeholder(self):
        assert catalog.main_image({}) == catalog.PLACEHOLDER_IMAGE
