# tienda/repositories/carts.py
from typing import Any, Optional

from fastapi import Depends

from tienda.config import get_db
from tienda.repositories.base import FirestoreRepository
from tienda.utils.dates import utcnow

CART_KEY = "items"


class CartRepository(FirestoreRepository):
    """carts/{uid} → {"items": [...], "updatedAt": ...}; the item array is the stored cart blob."""
    collection_name = "carts"

    def load_raw(self, uid: str) -> Optional[Any]:
        snap = self.col.document(uid).get()
        if not snap.exists:
            return None
        return (snap.to_dict() or {}).get(CART_KEY)

    def save(self, uid: str, items: list) -> None:
        self.col.document(uid).set({CART_KEY: items, "updatedAt": utcnow()})

    def clear(self, uid: str) -> None:
        self.col.document(uid).delete()


def get_cart_repo(db=Depends(get_db)) -> CartRepository:
    return CartRepository(db)
