"""
tienda/routers/uploads.py - Admin image uploads to local disk.

Files land in `{settings.upload_dir}/{products|categories}/` and are served by the
front-end under `{settings.upload_url_prefix}/...`.
"""
import logging
import re
import time
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from tienda.config import settings
from tienda.core.security import get_current_admin

logger = logging.getLogger("tienda.uploads")

ALLOWED_TYPES = {
    "image/svg+xml": "svg",
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}

admin_router = APIRouter(prefix="/upload", tags=["Admin Uploads"], dependencies=[Depends(get_current_admin)])


def build_file_name(label: str, original_name: str, content_type: str, now_ms: Optional[int] = None) -> str:
    """`<label sanitizado>_<timestamp ms>.<ext>`; the extension comes from the original name when it has one."""
    safe = re.sub(r"[^a-zA-Z0-9]", "_", label or "imagen").lower()
    ext = original_name.rsplit(".", 1)[-1].lower() if "." in (original_name or "") else ALLOWED_TYPES[content_type]
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{safe}_{now_ms}.{ext}"


async def _store(kind: str, image: UploadFile, label: str) -> dict:
    if image.content_type not in ALLOWED_TYPES:
        raise HTTPException(status_code=400, detail="Tipo de archivo no válido. Use SVG, JPG, PNG o WebP.")

    data = await image.read()
    if len(data) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"El archivo es demasiado grande. Máximo {settings.max_upload_bytes // (1024 * 1024)}MB.",
        )

    file_name = build_file_name(label, image.filename or "", image.content_type)
    target_dir = Path(settings.upload_dir) / kind
    target_dir.mkdir(parents=True, exist_ok=True)
    (target_dir / file_name).write_bytes(data)
    logger.info("Imagen subida: %s/%s (%d bytes)", kind, file_name, len(data))

    return {
        "message": "Imagen subida exitosamente",
        "imageUrl": f"{settings.upload_url_prefix.rstrip('/')}/{kind}/{file_name}",
        "fileName": file_name,
        "originalName": image.filename,
        "size": len(data),
        "mimeType": image.content_type,
    }


@admin_router.post("/product-image", summary="Upload Product Image")
async def upload_product_image(
    image: UploadFile = File(..., description="Imagen del producto"),
    product_name: str = Form("producto", alias="productName"),
):
    return await _store("products", image, product_name)


@admin_router.post("/category-image", summary="Upload Category Image")
async def upload_category_image(
    image: UploadFile = File(..., description="Imagen de la categoría"),
    category_name: str = Form("categoria", alias="categoryName"),
):
    return await _store("categories", image, category_name)
