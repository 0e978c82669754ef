r"""
# `tienda/schemas/product.py` - Esquemas de producto

## Información general
Modelos Pydantic de entrada/salida para productos. Los rangos (precio > 0, stock,
descuento 0–100, 1–6 imágenes) **no** se validan aquí sino en
`tienda.services.pricing`, que devuelve un error por campo para el formulario admin.
Aquí sólo se controla la forma (tipos) del JSON.

| Campo             | Tipo                | Notas |
|-------------------|---------------------|-------|
| name              | `str`               | Nombre |
| description       | `str`               | Descripción |
| pricePerKilo      | `int \| float`      | Única fuente de los precios por peso |
| pricesByWeight    | `list[WeightTier]`  | `weight` ∈ {100, 250, 500, 1000}; `price` se ignora |
| images            | `list[ProductImage]`| 1–6, una con `isPrimary` |
| category          | `str`               | Categoría canónica |
| categories        | `list[str]`         | Opcional; `categories[0]` es la canónica |
| discount          | `int \| float`      | Porcentaje 0–100 |
| featured / isAdvertisement / isMainCarousel | `bool` | Vitrinas de la portada |
"""
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from tienda.schemas.base import CamelModel, Number


class WeightTier(CamelModel):
    weight: int = Field(..., description="Gramos: 100, 250, 500 o 1000")
    price: Optional[Number] = Field(None, description="Calculado desde pricePerKilo (se ignora en la entrada)")
    stock: int = Field(0, description="Stock de este peso")


class WeightOption(CamelModel):
    """A tier as offered in the product page selector."""
    weight: int
    price: Number
    stock: int
    label: str


class ProductImage(CamelModel):
    url: str
    original_name: str = ""
    size: int = 0
    mime_type: str = ""
    upload_date: Optional[datetime] = None
    is_primary: bool = False


class NutritionalInfo(CamelModel):
    calories: Optional[Number] = None
    protein: Optional[Number] = None
    fats: Optional[Number] = None
    carbs: Optional[Number] = None


class ProductCreate(CamelModel):
    """Admin ⇒ nuevo producto (JSON)."""
    name: Optional[str] = None
    description: Optional[str] = None
    price_per_kilo: Optional[Number] = None
    prices_by_weight: Optional[List[WeightTier]] = None
    images: Optional[List[ProductImage]] = None
    category: Optional[str] = None
    categories: Optional[List[str]] = None
    discount: Optional[Number] = None
    featured: bool = False
    is_advertisement: bool = False
    is_main_carousel: bool = False
    nutritional_info: Optional[NutritionalInfo] = None

    def to_draft(self) -> dict:
        return self.to_doc(exclude_none=True)


class ProductUpdate(ProductCreate):
    """Admin ⇒ actualización parcial; sólo se aplican los campos enviados."""
    featured: Optional[bool] = None
    is_advertisement: Optional[bool] = None
    is_main_carousel: Optional[bool] = None

    def to_patch(self) -> dict:
        return self.to_doc(exclude_unset=True)


class ProductOut(CamelModel):
    id: str
    name: str
    description: str = ""
    price_per_kilo: Number
    prices_by_weight: List[WeightTier] = Field(default_factory=list)
    images: List[ProductImage] = Field(default_factory=list)
    image: Optional[str] = None
    base_price_per_100g: Optional[int] = Field(None, alias="basePricePer100g")
    final_price: Optional[int] = Field(None, description="Precio base con descuento aplicado")
    price_label: str = Field("", description="Precio final formateado ($1.350)")
    savings: int = 0
    has_stock: bool = False
    weight_options: List[WeightOption] = Field(default_factory=list, description="Pesos con stock")
    category: str
    categories: List[str] = Field(default_factory=list)
    total_stock: int = 0
    discount: Number = 0
    featured: bool = False
    is_advertisement: bool = False
    is_main_carousel: bool = False
    nutritional_info: Optional[NutritionalInfo] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
