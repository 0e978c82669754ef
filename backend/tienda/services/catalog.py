"""
tienda/services/catalog.py - Read-side helpers used when showing products.

They accept stored product dicts (camelCase keys) and tolerate legacy documents that
predate the derived fields (`basePricePer100g`, `totalStock`, `images`).
"""
from typing import Any, Dict, List, Mapping

from tienda.services.pricing import primary_image_url, round_half_up

PLACEHOLDER_IMAGE = "/placeholder-product.jpg"
PRODUCT_UPLOADS = "/uploads/products/"


def base_price(product: Mapping[str, Any]) -> int:
    """`basePricePer100g` when stored, else the cheapest tier, else 0."""
    if product.get("basePricePer100g"):
        return product["basePricePer100g"]
    tiers = product.get("pricesByWeight") or []
    if tiers:
        return min(t.get("price", 0) for t in tiers)
    return 0


def product_stock(product: Mapping[str, Any]) -> int:
    if product.get("totalStock") is not None:
        return product["totalStock"]
    return sum(t.get("stock") or 0 for t in product.get("pricesByWeight") or [])


def has_stock(product: Mapping[str, Any]) -> bool:
    return product_stock(product) > 0


def weight_options(product: Mapping[str, Any], include_out_of_stock: bool = False) -> List[Dict[str, Any]]:
    options = [
        {
            "weight": t["weight"],
            "price": t.get("price", 0),
            "stock": t.get("stock", 0),
            "label": f"{t['weight']}g",
        }
        for t in product.get("pricesByWeight") or []
    ]
    if include_out_of_stock:
        return options
    return [opt for opt in options if opt["stock"] > 0]


def discounted_price(product: Mapping[str, Any]) -> int:
    discount = product.get("discount") or 0
    return round_half_up(base_price(product) * (100 - discount) / 100)


def savings(product: Mapping[str, Any]) -> int:
    return base_price(product) - discounted_price(product)


def format_price(amount: float, currency: str = "$") -> str:
    """Chilean format: dot as thousands separator, `12500 -> "$12.500"`."""
    return f"{currency}{round_half_up(amount):,}".replace(",", ".")


def _resolve_upload(url: str) -> str:
    if url.startswith("http") or url.startswith("/uploads/"):
        return url
    return f"{PRODUCT_UPLOADS}{url}"


def main_image(product: Mapping[str, Any]) -> str:
    """Primary image URL ready for the front-end (bare file names live under /uploads/products/)."""
    url = primary_image_url(product.get("images"))
    if url:
        return _resolve_upload(url)
    legacy = product.get("image")
    if legacy:
        return _resolve_upload(legacy)
    return PLACEHOLDER_IMAGE
