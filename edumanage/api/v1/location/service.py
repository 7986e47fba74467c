"""Per-user, per-day GPS anchoring. The first reading of the day is kept; later readings are ignored."""

import logging
import math
from datetime import date, datetime, timezone
from typing import Optional, Tuple

from fastapi import status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from edumanage.core.exceptions import ServiceError
from edumanage.core.models import UserGpsAnchor

from .schemas import VerifyLocationRequest, VerifyLocationResponse

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6371e3


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in metres."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


async def verify_location(
    db: AsyncSession,
    payload: VerifyLocationRequest,
    reference: Tuple[float, float],
    today: Optional[date] = None,
) -> VerifyLocationResponse:
    today = today or datetime.now(timezone.utc).date()
    try:
        async with db.begin():
            anchor = await db.get(UserGpsAnchor, (payload.user_id, today))
            anchored = anchor is not None
            if anchor is None:
                anchor = UserGpsAnchor(user_id=payload.user_id, date=today, lat=payload.lat, lng=payload.lng)
                db.add(anchor)
                logger.info("Anchored %s on %s", payload.user_id, today)
    except IntegrityError:
        raise ServiceError("Location already anchored concurrently, retry", status.HTTP_409_CONFLICT)

    distance = haversine_distance(anchor.lat, anchor.lng, reference[0], reference[1])
    return VerifyLocationResponse(distance=distance, lat=anchor.lat, lng=anchor.lng, anchored=anchored)
