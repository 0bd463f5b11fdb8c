# streeteats/backend/app/schemas/vendor.py

from datetime import datetime
from typing import Optional

from .queue import CamelModel


class GoLiveRequest(CamelModel):
    open_until: datetime
    lat: Optional[float] = None
    lng: Optional[float] = None


class PresenceRead(CamelModel):
    vendor_id: int
    vendor_type: str
    is_online: bool
    is_stationary: bool
    has_fixed_address: bool
    open_until: Optional[datetime] = None
    accepting_orders: bool
