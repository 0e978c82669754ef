# tienda/repositories/advertisements.py
from typing import Any, Dict, List, Optional

from fastapi import Depends

from tienda.config import get_db
from tienda.repositories.base import FirestoreRepository
from tienda.services.advertisements import carousel_order


class AdvertisementRepository(FirestoreRepository):
    collection_name = "advertisements"
    not_found_message = "Advertisement no encontrado"

    def list(self, is_active: Optional[bool] = None, ad_type: Optional[str] = None) -> List[Dict[str, Any]]:
        filters: Dict[str, Any] = {}
        if is_active is not None:
            filters["isActive"] = is_active
        if ad_type:
            filters["type"] = ad_type
        return carousel_order(self.find(**filters))


def get_advertisement_repo(db=Depends(get_db)) -> AdvertisementRepository:
    return AdvertisementRepository(db)
