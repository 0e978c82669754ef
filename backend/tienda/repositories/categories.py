# tienda/repositories/categories.py
from typing import Any, Dict, List, Optional

from fastapi import Depends

from tienda.config import get_db
from tienda.repositories.base import FirestoreRepository


class CategoryRepository(FirestoreRepository):
    collection_name = "categories"
    not_found_message = "Categoría no encontrada"

    def list(self, active_only: bool = True) -> List[Dict[str, Any]]:
        cats = self.find(isActive=True) if active_only else self.all()
        return sorted(cats, key=lambda c: (c.get("order") or 0, c.get("name") or ""))

    def by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        found = self.find(slug=slug)
        return found[0] if found else None


def get_category_repo(db=Depends(get_db)) -> CategoryRepository:
    return CategoryRepository(db)
