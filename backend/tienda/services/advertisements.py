# tienda/services/advertisements.py
from datetime import datetime
from math import ceil
from typing import Any, Dict, Iterable, List, Mapping, Optional

from tienda.utils.dates import as_utc, timestamp_key, utcnow


def _is_window_active(start_at: Optional[datetime], end_at: Optional[datetime], now: datetime) -> bool:
    if start_at and now < start_at:
        return False
    if end_at and now > end_at:
        return False
    return True


def is_active_at(ad: Mapping[str, Any], now: Optional[datetime] = None) -> bool:
    """Shown in the carousel: flagged active and inside its (open-ended) date window."""
    if not ad.get("isActive", True):
        return False
    now = as_utc(now) or utcnow()
    return _is_window_active(as_utc(ad.get("startDate")), as_utc(ad.get("endDate")), now)


def carousel_order(ads: Iterable[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
    """`order` ascending, newest first among equal orders."""
    ads = sorted(ads, key=lambda a: timestamp_key(a.get("createdAt")), reverse=True)
    return sorted(ads, key=lambda a: a.get("order") or 0)


def active_carousel(ads: Iterable[Mapping[str, Any]], now: Optional[datetime] = None) -> List[Mapping[str, Any]]:
    return carousel_order(ad for ad in ads if is_active_at(ad, now))


def paginate(items: List[Any], page: int, limit: int) -> Dict[str, Any]:
    page = max(1, page)
    limit = max(1, limit)
    total = len(items)
    start = (page - 1) * limit
    return {
        "items": items[start:start + limit],
        "pagination": {"page": page, "limit": limit, "total": total, "pages": ceil(total / limit)},
    }
