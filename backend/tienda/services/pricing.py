"""
# `tienda/services/pricing.py` - Precios por peso y campos derivados

## Información general
A product is sold in fixed weight tiers (100 g, 250 g, 500 g, 1 kg). The admin only
enters the price per kilo and the stock of every tier; everything else is derived
here, on create and on every update:

| Campo               | Regla |
|---------------------|-------|
| `pricesByWeight[].price` | `round_half_up(pricePerKilo * weight / 1000)` |
| `totalStock`        | suma de `pricesByWeight[].stock` |
| `image`             | URL de la imagen `isPrimary`, si no la primera |
| `basePricePer100g`  | precio del tramo de 100 g |
| `category`          | `categories[0]` cuando hay lista de categorías |

Rounding is half-up (`decimal.ROUND_HALF_UP`), computed on Decimal so
`15005 * 100 / 1000 = 1500.5` becomes 1501 and never depends on float error.

Updates are a two-step pipeline: `merge(existing, patch)` then `derive(...)`, so a
patch that only changes `pricePerKilo` still re-prices the stored tiers.
Records are plain dicts with the camelCase keys stored in Firestore.
"""
from __future__ import annotations

import copy
import logging
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Mapping, Optional

from tienda.core.errors import FieldError, ProductValidationError
from tienda.utils.numbers import is_number, is_whole

logger = logging.getLogger("tienda.pricing")

STANDARD_WEIGHTS = (100, 250, 500, 1000)
MAX_IMAGES = 6
DERIVED_FIELDS = frozenset({"totalStock", "image", "basePricePer100g"})
IMMUTABLE_FIELDS = frozenset({"id", "createdAt"})


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def round_half_up(value: Any) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def tier_price(price_per_kilo: Any, weight: int) -> int:
    """Price of one `weight` gram pack for the given price per kilo."""
    return round_half_up(Decimal(str(price_per_kilo)) * int(weight) / Decimal(1000))


def primary_image_url(images: Optional[Iterable[Mapping[str, Any]]]) -> Optional[str]:
    images = list(images or [])
    if not images:
        return None
    for img in images:
        if img.get("isPrimary"):
            return img.get("url")
    return images[0].get("url")


# ---------------------------------------------------------------------
# Validación
# ---------------------------------------------------------------------

def _validate_tiers(tiers: Any, creating: bool) -> List[FieldError]:
    if not isinstance(tiers, list) or not tiers:
        return [FieldError("pricesByWeight", "Debe especificar al menos un precio por peso")]

    errors: List[FieldError] = []
    seen = set()
    stocked = False
    for i, tier in enumerate(tiers):
        if not isinstance(tier, Mapping):
            errors.append(FieldError(f"pricesByWeight[{i}]", "Formato de precio por peso inválido"))
            continue

        weight = tier.get("weight")
        if not is_whole(weight) or int(weight) not in STANDARD_WEIGHTS:
            errors.append(FieldError(
                f"pricesByWeight[{i}].weight",
                f"Peso no permitido: {weight!r}. Use 100, 250, 500 o 1000 g",
            ))
        elif int(weight) in seen:
            errors.append(FieldError(f"pricesByWeight[{i}].weight", f"Peso repetido: {int(weight)}g"))
        else:
            seen.add(int(weight))

        stock = tier.get("stock", 0)
        if stock is None:
            stock = 0
        if not is_whole(stock) or stock < 0:
            errors.append(FieldError(
                f"pricesByWeight[{i}].stock",
                "El stock debe ser un número entero mayor o igual a 0",
            ))
        elif stock > 0:
            stocked = True

    if creating and not stocked:
        errors.append(FieldError("pricesByWeight", "Debe especificar stock para al menos un peso"))
    return errors


def _validate_images(images: Any) -> List[FieldError]:
    if not isinstance(images, list) or not images:
        return [FieldError("images", "Debe subir al menos una imagen")]
    if len(images) > MAX_IMAGES:
        return [FieldError("images", f"Debe tener entre 1 y {MAX_IMAGES} imágenes")]
    errors = []
    for i, img in enumerate(images):
        if not isinstance(img, Mapping) or not _non_empty_str(img.get("url")):
            errors.append(FieldError(f"images[{i}].url", "La imagen no tiene URL"))
    return errors


def validate(record: Mapping[str, Any], *, creating: bool = True) -> List[FieldError]:
    """
    Returns every problem of `record` at once (empty list when valid).
    `creating=False` is used for updates: a stored product may run out of stock.
    """
    errors: List[FieldError] = []

    if not _non_empty_str(record.get("name")):
        errors.append(FieldError("name", "El nombre es requerido"))
    if not _non_empty_str(record.get("description")):
        errors.append(FieldError("description", "La descripción es requerida"))

    ppk = record.get("pricePerKilo")
    if ppk is None:
        errors.append(FieldError("pricePerKilo", "El precio por kilo es requerido"))
    elif not is_number(ppk) or ppk <= 0:
        errors.append(FieldError("pricePerKilo", "El precio por kilo debe ser mayor a 0"))

    errors.extend(_validate_tiers(record.get("pricesByWeight"), creating))
    errors.extend(_validate_images(record.get("images")))

    discount = record.get("discount")
    if discount is not None and (not is_number(discount) or not 0 <= discount <= 100):
        errors.append(FieldError("discount", "El descuento debe estar entre 0 y 100"))

    categories = record.get("categories")
    if categories is not None:
        if not isinstance(categories, list) or not categories:
            errors.append(FieldError("categories", "Debe seleccionar al menos una categoría"))
        elif not all(_non_empty_str(c) for c in categories):
            errors.append(FieldError("categories", "Las categorías no pueden estar vacías"))
    elif not _non_empty_str(record.get("category")):
        errors.append(FieldError("category", "La categoría es requerida"))

    return errors


# ---------------------------------------------------------------------
# Derivación
# ---------------------------------------------------------------------

def derive(draft: Mapping[str, Any], *, creating: bool = True, now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Validate `draft` and return a new, fully derived product record.
    Raises ProductValidationError before anything is computed; `draft` is never mutated.
    """
    errors = validate(draft, creating=creating)
    if errors:
        logger.info("Product rejected: %s", ", ".join(e.field for e in errors))
        raise ProductValidationError(errors)

    now = now or datetime.now(timezone.utc)
    record: Dict[str, Any] = copy.deepcopy(dict(draft))
    ppk = record["pricePerKilo"]

    tiers = []
    for tier in record["pricesByWeight"]:
        weight = int(tier["weight"])
        tiers.append({
            "weight": weight,
            "price": tier_price(ppk, weight),
            "stock": int(tier.get("stock") or 0),
        })
    record["pricesByWeight"] = tiers
    record["totalStock"] = sum(t["stock"] for t in tiers)
    record["basePricePer100g"] = tier_price(ppk, 100)

    images = []
    for img in record["images"]:
        img = dict(img)
        img["isPrimary"] = bool(img.get("isPrimary", False))
        img.setdefault("uploadDate", now)
        images.append(img)
    record["images"] = images
    record["image"] = primary_image_url(images)

    categories = record.get("categories")
    if categories:
        record["categories"] = [c.strip() for c in categories]
        record["category"] = record["categories"][0]
    else:
        record["category"] = record["category"].strip()
        record["categories"] = [record["category"]]

    record["discount"] = record.get("discount") or 0
    record["featured"] = bool(record.get("featured", False))
    record["isAdvertisement"] = bool(record.get("isAdvertisement", False))
    record["isMainCarousel"] = bool(record.get("isMainCarousel", False))
    if creating:
        record.setdefault("createdAt", now)
    record["updatedAt"] = now
    return record


def merge(existing: Mapping[str, Any], patch: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Overlay `patch` on a copy of `existing`.
    Derived and immutable keys in the patch are ignored; they are recomputed by `derive`.
    A patch that sets `category` alone replaces the canonical entry of `categories`.
    """
    merged: Dict[str, Any] = copy.deepcopy(dict(existing))
    for key, value in patch.items():
        if key in DERIVED_FIELDS or key in IMMUTABLE_FIELDS:
            continue
        merged[key] = copy.deepcopy(value)

    if "category" in patch and "categories" not in patch and merged.get("categories"):
        new_cat = patch["category"]
        rest = [c for c in merged["categories"][1:] if c != new_cat]
        merged["categories"] = [new_cat, *rest]
    return merged


def apply_update(existing: Mapping[str, Any], patch: Mapping[str, Any], *, now: Optional[datetime] = None) -> Dict[str, Any]:
    """PATCH-like update: re-derive the merged state, not just the patch."""
    return derive(merge(existing, patch), creating=False, now=now)
