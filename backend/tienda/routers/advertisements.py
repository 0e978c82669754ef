"""
tienda/routers/advertisements.py - Home carousel advertisements.

- GET /advertisements/active → active ads inside their date window, by (order, newest).
- Admin: paginated list with isActive/type filters, create, update, hard delete.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from tienda.core.security import get_current_admin
from tienda.repositories.advertisements import AdvertisementRepository, get_advertisement_repo
from tienda.schemas.advertisement import (
    ActiveAdvertisements,
    AdType,
    AdvertisementCreate,
    AdvertisementOut,
    AdvertisementPage,
    AdvertisementUpdate,
)
from tienda.services.advertisements import active_carousel, paginate
from tienda.utils.dates import as_utc, utcnow

logger = logging.getLogger("tienda.advertisements")

router = APIRouter(prefix="/advertisements", tags=["Advertisements"])


@router.get("/active", response_model=ActiveAdvertisements, summary="Active Carousel Advertisements")
def active_advertisements(repo: AdvertisementRepository = Depends(get_advertisement_repo)):
    return {"advertisements": active_carousel(repo.list(is_active=True))}


admin_router = APIRouter(prefix="/advertisements", tags=["Admin Advertisements"], dependencies=[Depends(get_current_admin)])


@admin_router.get("", response_model=AdvertisementPage, summary="List Advertisements")
def list_advertisements(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    ad_type: Optional[AdType] = Query(None, alias="type"),
    repo: AdvertisementRepository = Depends(get_advertisement_repo),
):
    result = paginate(repo.list(is_active=is_active, ad_type=ad_type), page, limit)
    return {"advertisements": result["items"], "pagination": result["pagination"]}


@admin_router.post("", response_model=AdvertisementOut, status_code=status.HTTP_201_CREATED, summary="Create Advertisement")
def create_advertisement(ad_in: AdvertisementCreate, repo: AdvertisementRepository = Depends(get_advertisement_repo)):
    data = ad_in.to_doc()
    data["startDate"] = as_utc(data.get("startDate"))
    data["endDate"] = as_utc(data.get("endDate"))
    now = utcnow()
    data.update(views=0, clicks=0, createdAt=now, updatedAt=now)
    saved = repo.create(data)
    logger.info("Advertisement creado: %s", saved["id"])
    return saved


@admin_router.put("/{ad_id}", response_model=AdvertisementOut, summary="Update Advertisement")
def update_advertisement(ad_id: str, patch: AdvertisementUpdate, repo: AdvertisementRepository = Depends(get_advertisement_repo)):
    existing = repo.require(ad_id)
    fields = patch.to_doc(exclude_unset=True)
    for key in ("startDate", "endDate"):
        if key in fields:
            fields[key] = as_utc(fields[key])

    # a patch may carry only one end of the window
    start = fields["startDate"] if "startDate" in fields else as_utc(existing.get("startDate"))
    end = fields["endDate"] if "endDate" in fields else as_utc(existing.get("endDate"))
    if start and end and end < start:
        raise HTTPException(status_code=400, detail="La fecha de término debe ser posterior a la de inicio")

    fields["updatedAt"] = utcnow()
    return repo.update(ad_id, fields)


@admin_router.delete("/{ad_id}", summary="Delete Advertisement")
def delete_advertisement(ad_id: str, repo: AdvertisementRepository = Depends(get_advertisement_repo)):
    if not repo.delete(ad_id):
        raise HTTPException(status_code=404, detail="Advertisement no encontrado")
    return {"message": "Advertisement eliminado exitosamente"}
