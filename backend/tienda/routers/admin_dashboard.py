"""
Admin Dashboard Router
Overview counts for the back-office home page.
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends

from tienda.config import settings
from tienda.core.security import get_current_admin
from tienda.repositories.advertisements import AdvertisementRepository, get_advertisement_repo
from tienda.repositories.categories import CategoryRepository, get_category_repo
from tienda.repositories.products import ProductRepository, get_product_repo
from tienda.services.advertisements import is_active_at
from tienda.services.catalog import product_stock

router = APIRouter(prefix="/dashboard", tags=["Admin Dashboard"], dependencies=[Depends(get_current_admin)])


@router.get("/stats")
def get_dashboard_stats(
    products: ProductRepository = Depends(get_product_repo),
    categories: CategoryRepository = Depends(get_category_repo),
    ads: AdvertisementRepository = Depends(get_advertisement_repo),
) -> Dict[str, Any]:
    all_products = products.list()
    stocks = [product_stock(p) for p in all_products]
    threshold = settings.low_stock_threshold
    return {
        "totalProducts": len(all_products),
        "outOfStock": sum(1 for s in stocks if s <= 0),
        "lowStock": sum(1 for s in stocks if 0 < s <= threshold),
        "featuredProducts": sum(1 for p in all_products if p.get("featured")),
        "activeCategories": len(categories.list(active_only=True)),
        "activeAdvertisements": sum(1 for a in ads.list(is_active=True) if is_active_at(a)),
    }
