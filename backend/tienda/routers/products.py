"""
# `tienda/routers/products.py` - Productos

## Público
| Método | Ruta | Descripción |
|--------|------|-------------|
| GET | `/products` | Todos los productos, más nuevos primero; `?category=` filtra por pertenencia |
| GET | `/products/featured` | Productos destacados |
| GET | `/products/main-carousel` | Carrusel principal (máx. 12) |
| GET | `/products/advertisement` | Productos marcados como publicidad |
| GET | `/products/{id}` | Detalle; 404 si no existe |

Cada producto incluye además `finalPrice`, `priceLabel`, `savings`, `hasStock` y
`weightOptions` (sólo pesos con stock), calculados en `tienda.services.catalog`.

## Admin (prefijo `/admin`, `get_current_admin`)
| Método | Ruta | Descripción |
|--------|------|-------------|
| POST | `/admin/products` | Crea: valida y deriva precios por peso, stock total e imagen principal |
| PUT | `/admin/products/{id}` | Actualización parcial: fusiona con el documento guardado y vuelve a derivar |
| DELETE | `/admin/products/{id}` | Borrado definitivo |

Errores de validación → `400 {"message": "Error de validación", "errors": [{field, message}]}`
(handler en `main.py`); en ese caso no se escribe nada.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from tienda.core.security import get_current_admin
from tienda.repositories.products import ProductRepository, get_product_repo
from tienda.schemas.product import ProductCreate, ProductOut, ProductUpdate
from tienda.services import catalog, pricing

logger = logging.getLogger("tienda.products")

router = APIRouter(prefix="/products", tags=["Products"])


def to_out(doc: Dict[str, Any]) -> ProductOut:
    """Stored document plus the storefront fields (final price, savings, selectable weights)."""
    final_price = catalog.discounted_price(doc)
    return ProductOut.model_validate({
        **doc,
        "finalPrice": final_price,
        "priceLabel": catalog.format_price(final_price),
        "savings": catalog.savings(doc),
        "hasStock": catalog.has_stock(doc),
        "weightOptions": catalog.weight_options(doc),
    })


@router.get("", response_model=List[ProductOut], summary="List Products")
def list_products(
    category: Optional[str] = Query(None, description="Nombre de categoría (opcional)"),
    repo: ProductRepository = Depends(get_product_repo),
):
    return [to_out(p) for p in repo.list(category=category)]


@router.get("/featured", response_model=List[ProductOut], summary="Featured Products")
def featured_products(repo: ProductRepository = Depends(get_product_repo)):
    return [to_out(p) for p in repo.showcase("featured")]


@router.get("/main-carousel", response_model=List[ProductOut], summary="Main Carousel Products")
def main_carousel_products(repo: ProductRepository = Depends(get_product_repo)):
    return [to_out(p) for p in repo.showcase("isMainCarousel", limit=12)]


@router.get("/advertisement", response_model=List[ProductOut], summary="Advertised Products")
def advertised_products(repo: ProductRepository = Depends(get_product_repo)):
    return [to_out(p) for p in repo.showcase("isAdvertisement")]


@router.get("/{product_id}", response_model=ProductOut, summary="Get Product")
def get_product(product_id: str, repo: ProductRepository = Depends(get_product_repo)):
    return to_out(repo.require(product_id))


# Admin sub-router for product management
admin_router = APIRouter(prefix="/products", tags=["Admin Products"], dependencies=[Depends(get_current_admin)])


@admin_router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED, summary="Create Product")
def create_product(product_in: ProductCreate, repo: ProductRepository = Depends(get_product_repo)):
    record = pricing.derive(product_in.to_draft(), creating=True)
    saved = repo.create(record)
    logger.info("Producto creado: %s (%s)", saved["name"], saved["id"])
    return to_out(saved)


@admin_router.put("/{product_id}", response_model=ProductOut, summary="Update Product")
def update_product(product_id: str, patch: ProductUpdate, repo: ProductRepository = Depends(get_product_repo)):
    existing = repo.require(product_id)
    record = pricing.apply_update(existing, patch.to_patch())
    saved = repo.replace(product_id, record)
    logger.info("Producto actualizado: %s", product_id)
    return to_out(saved)


@admin_router.delete("/{product_id}", summary="Delete Product")
def delete_product(product_id: str, repo: ProductRepository = Depends(get_product_repo)):
    if not repo.delete(product_id):
        raise HTTPException(status_code=404, detail="Producto no encontrado")
    logger.info("Producto eliminado: %s", product_id)
    return {"message": "Producto eliminado exitosamente"}
