# streeteats/backend/app/presence.py

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from .errors import ValidationFailed
from .models.vendor import VENDOR_TYPES, Vendor

logger = logging.getLogger(__name__)


def _aware(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; they are stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_accepting_orders(vendor: Optional[Vendor], now: Optional[datetime] = None) -> bool:
    """
    True when the vendor is live and, for vendors that set a closing time,
    that time has not passed yet.
    """
    if vendor is None or not vendor.is_online:
        return False
    if vendor.open_until is None:
        return True
    now = _aware(now or datetime.now(timezone.utc))
    return now < _aware(vendor.open_until)


def vendor_type_defaults(vendor_type: str) -> dict:
    """
    Location model per vendor type:
      - truck:    mobile, has a home address
      - stall:    stationary, has a fixed address
      - pushcart: stationary while live, no fixed address
    """
    if vendor_type not in VENDOR_TYPES:
        raise ValueError(f"Unknown vendor type '{vendor_type}'")
    return {
        "is_stationary": vendor_type in {"pushcart", "stall"},
        "has_fixed_address": vendor_type != "pushcart",
    }


def go_live(
    vendor: Vendor,
    open_until: datetime,
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    now: Optional[datetime] = None,
) -> Vendor:
    """Mark the vendor open at its current spot until ``open_until``."""
    open_until = _aware(open_until).astimezone(timezone.utc)
    if open_until <= _aware(now or datetime.now(timezone.utc)):
        raise ValidationFailed("openUntil must be in the future")

    vendor.is_online = True
    vendor.is_stationary = True
    vendor.open_until = open_until
    if lat is not None and lng is not None:
        vendor.lat = lat
        vendor.lng = lng
    logger.info("Vendor %s live until %s", vendor.id, vendor.open_until.isoformat())
    return vendor


def go_offline(vendor: Vendor) -> Vendor:
    """Stop admitting joins. Tickets already in line are left alone."""
    vendor.is_online = False
    vendor.open_until = None
    logger.info("Vendor %s went offline", vendor.id)
    return vendor
