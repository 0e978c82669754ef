# tienda/repositories/products.py
from typing import Any, Dict, List, Optional

from fastapi import Depends
from google.cloud.firestore_v1 import FieldFilter

from tienda.config import get_db
from tienda.repositories.base import FirestoreRepository, snap_to_dict
from tienda.utils.dates import timestamp_key

SHOWCASE_FLAGS = ("featured", "isMainCarousel", "isAdvertisement")


def _newest_first(products: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    # equality filters + order_by would need a composite index; sort here instead
    return sorted(products, key=lambda p: timestamp_key(p.get("createdAt")), reverse=True)


class ProductRepository(FirestoreRepository):
    collection_name = "products"
    not_found_message = "Producto no encontrado"

    def list(self, category: Optional[str] = None) -> List[Dict[str, Any]]:
        q = self.col
        if category:
            q = q.where(filter=FieldFilter("categories", "array_contains", category))
        return _newest_first([snap_to_dict(s) for s in q.stream()])

    def showcase(self, flag: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        if flag not in SHOWCASE_FLAGS:
            raise ValueError(f"Unknown showcase flag: {flag}")
        products = _newest_first(self.find(**{flag: True}))
        return products[:limit] if limit else products


def get_product_repo(db=Depends(get_db)) -> ProductRepository:
    return ProductRepository(db)
