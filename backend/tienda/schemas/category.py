# tienda/schemas/category.py
from datetime import datetime
from typing import Optional

from pydantic import Field

from tienda.schemas.base import CamelModel

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class CategoryCreate(CamelModel):
    """Admin ⇒ nueva categoría."""
    name: str = Field(..., min_length=1, description="Nombre visible")
    slug: str = Field(..., min_length=1, description="Identificador único (URL)")
    color: str = Field(..., pattern=HEX_COLOR, description="Color de fondo #RRGGBB")
    image: str = Field(..., min_length=1, description="URL de la imagen")
    text_color: str = Field("#000000", pattern=HEX_COLOR)
    description: str = Field("", description="Descripción (opcional)")
    is_active: bool = True
    order: int = Field(0, ge=0)


class CategoryUpdate(CamelModel):
    """Campos opcionales; sólo se aplican los enviados."""
    name: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = Field(None, min_length=1)
    color: Optional[str] = Field(None, pattern=HEX_COLOR)
    image: Optional[str] = Field(None, min_length=1)
    text_color: Optional[str] = Field(None, pattern=HEX_COLOR)
    description: Optional[str] = None
    is_active: Optional[bool] = None
    order: Optional[int] = Field(None, ge=0)


class CategoryOut(CamelModel):
    id: str
    name: str
    slug: str
    color: str
    image: str
    text_color: str = "#000000"
    description: str = ""
    is_active: bool = True
    order: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
