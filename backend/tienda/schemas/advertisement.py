"""
tienda/schemas/advertisement.py - Carousel advertisements (home page banners).

An advertisement needs an image: either `imageUrl` (absolute http(s) URL or a local
`/uploads/...` image path) or an uploaded `image` object.
"""
from __future__ import annotations

import re
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator, model_validator

from tienda.schemas.base import CamelModel
from tienda.utils.dates import as_utc

AdType = Literal["product", "promotion", "external", "announcement"]

EXTERNAL_URL = re.compile(
    r"^https?://(www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b([-a-zA-Z0-9()@:%_+.~#?&/=]*)$"
)
LOCAL_IMAGE = re.compile(r"^/[a-zA-Z0-9/_\-.]+\.(jpg|jpeg|png|webp|gif)$", re.IGNORECASE)
LOCAL_PATH = re.compile(r"^/[a-zA-Z0-9/_\-.]*$")


def check_image_url(url: Optional[str]) -> Optional[str]:
    if url and not (EXTERNAL_URL.match(url) or LOCAL_IMAGE.match(url)):
        raise ValueError(
            "URL de imagen no válida. Use una URL completa (https://...) o una ruta local (/uploads/...)"
        )
    return url


def check_link_url(url: Optional[str]) -> Optional[str]:
    if url and not (EXTERNAL_URL.match(url) or LOCAL_PATH.match(url)):
        raise ValueError(
            "URL de destino no válida. Use una URL completa (https://...) o una ruta local (/productos/...)"
        )
    return url


class UploadedImage(CamelModel):
    url: str
    original_name: str = ""
    size: int = 0
    mime_type: str = ""
    upload_date: Optional[datetime] = None


class AdvertisementCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=100, description="Título")
    description: Optional[str] = Field(None, max_length=200)
    image: Optional[UploadedImage] = None
    image_url: Optional[str] = None
    link_url: Optional[str] = None
    type: AdType = "promotion"
    order: int = Field(0, ge=0)
    is_active: bool = True
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("image_url")
    @classmethod
    def valid_image_url(cls, v):
        return check_image_url(v)

    @field_validator("link_url")
    @classmethod
    def valid_link_url(cls, v):
        return check_link_url(v)

    @model_validator(mode="after")
    def needs_image(self):
        if not self.image and not self.image_url:
            raise ValueError("Debe proporcionar una imagen subida o una URL de imagen")
        if self.start_date and self.end_date and as_utc(self.end_date) < as_utc(self.start_date):
            raise ValueError("La fecha de término debe ser posterior a la de inicio")
        return self


class AdvertisementUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=200)
    image: Optional[UploadedImage] = None
    image_url: Optional[str] = None
    link_url: Optional[str] = None
    type: Optional[AdType] = None
    order: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("image_url")
    @classmethod
    def valid_image_url(cls, v):
        return check_image_url(v)

    @field_validator("link_url")
    @classmethod
    def valid_link_url(cls, v):
        return check_link_url(v)


class AdvertisementOut(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    image: Optional[UploadedImage] = None
    image_url: Optional[str] = None
    link_url: Optional[str] = None
    type: AdType = "promotion"
    order: int = 0
    is_active: bool = True
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    views: int = 0
    clicks: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int


class AdvertisementPage(CamelModel):
    advertisements: List[AdvertisementOut]
    pagination: Pagination


class ActiveAdvertisements(CamelModel):
    advertisements: List[AdvertisementOut]
