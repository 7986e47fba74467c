from pydantic import Field

from edumanage.core.schemas import CamelModel


class VerifyLocationRequest(CamelModel):
    user_id: str = Field(..., min_length=1)
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class VerifyLocationResponse(CamelModel):
    """Distance in metres from the day's anchor to the reference point."""

    distance: float
    lat: float
    lng: float
    anchored: bool
