"""
tienda/routers/categories.py - Product categories.

Public listing shows only active categories sorted by (order, name).
Admin deletion is a soft delete (isActive=False) so products keep their category names.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from tienda.core.security import get_current_admin
from tienda.repositories.categories import CategoryRepository, get_category_repo
from tienda.schemas.category import CategoryCreate, CategoryOut, CategoryUpdate
from tienda.utils.dates import utcnow

logger = logging.getLogger("tienda.categories")

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=List[CategoryOut], summary="List Categories")
def list_categories(repo: CategoryRepository = Depends(get_category_repo)):
    return repo.list(active_only=True)


@router.get("/{category_id}", response_model=CategoryOut, summary="Get Category")
def get_category(category_id: str, repo: CategoryRepository = Depends(get_category_repo)):
    return repo.require(category_id)


admin_router = APIRouter(prefix="/categories", tags=["Admin Categories"], dependencies=[Depends(get_current_admin)])


@admin_router.get("", response_model=List[CategoryOut], summary="List All Categories")
def list_all_categories(repo: CategoryRepository = Depends(get_category_repo)):
    return repo.list(active_only=False)


@admin_router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED, summary="Create Category")
def create_category(category_in: CategoryCreate, repo: CategoryRepository = Depends(get_category_repo)):
    data = category_in.to_doc()
    data["name"] = data["name"].strip()
    data["slug"] = data["slug"].strip()
    if repo.by_slug(data["slug"]):
        raise HTTPException(status_code=409, detail="Ya existe una categoría con ese slug")
    now = utcnow()
    data.update(createdAt=now, updatedAt=now)
    saved = repo.create(data)
    logger.info("Categoría creada: %s", saved["slug"])
    return saved


@admin_router.put("/{category_id}", response_model=CategoryOut, summary="Update Category")
def update_category(category_id: str, patch: CategoryUpdate, repo: CategoryRepository = Depends(get_category_repo)):
    fields = patch.to_doc(exclude_unset=True)
    if "slug" in fields:
        fields["slug"] = fields["slug"].strip()
        clash = repo.by_slug(fields["slug"])
        if clash and clash["id"] != category_id:
            raise HTTPException(status_code=409, detail="Ya existe una categoría con ese slug")
    fields["updatedAt"] = utcnow()
    updated = repo.update(category_id, fields)
    if not updated:
        raise HTTPException(status_code=404, detail="Categoría no encontrada")
    return updated


@admin_router.delete("/{category_id}", summary="Delete Category")
def delete_category(category_id: str, repo: CategoryRepository = Depends(get_category_repo)):
    if not repo.update(category_id, {"isActive": False, "updatedAt": utcnow()}):
        raise HTTPException(status_code=404, detail="Categoría no encontrada")
    logger.info("Categoría desactivada: %s", category_id)
    return {"message": "Categoría eliminada exitosamente"}
