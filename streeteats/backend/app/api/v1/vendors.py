# streeteats/backend/app/api/v1/vendors.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...db import get_db
from ...errors import NotFound
from ...models.vendor import Vendor
from ...presence import go_live, go_offline, is_accepting_orders
from ...queue_manager import QueueManager
from ...schemas.queue import CompleteResponse, VendorQueue
from ...schemas.vendor import GoLiveRequest, PresenceRead
from .queue import get_queue_manager

router = APIRouter(prefix="/api/vendor", tags=["vendor"])


def _presence(vendor: Vendor) -> PresenceRead:
    return PresenceRead(
        vendor_id=vendor.id,
        vendor_type=vendor.vendor_type,
        is_online=vendor.is_online,
        is_stationary=vendor.is_stationary,
        has_fixed_address=vendor.has_fixed_address,
        open_until=vendor.open_until,
        accepting_orders=is_accepting_orders(vendor),
    )


def _get_vendor(db: Session, vendor_id: int) -> Vendor:
    vendor = db.get(Vendor, vendor_id)
    if vendor is None:
        raise NotFound(f"Vendor {vendor_id} not found")
    return vendor


@router.post("/queue/complete/{entry_id}", response_model=CompleteResponse)
def complete_entry(entry_id: int, manager: QueueManager = Depends(get_queue_manager)):
    return manager.complete(entry_id)


@router.get("/{vendor_id}/queue", response_model=VendorQueue)
def vendor_queue(vendor_id: int, manager: QueueManager = Depends(get_queue_manager)):
    """Open tickets for the vendor dashboard, lowest queue number first."""
    return manager.vendor_queue(vendor_id)


@router.get("/{vendor_id}/presence", response_model=PresenceRead)
def vendor_presence(vendor_id: int, db: Session = Depends(get_db)):
    return _presence(_get_vendor(db, vendor_id))


# "Go Live Now" / "Go Offline"

@router.post("/{vendor_id}/live", response_model=PresenceRead)
def vendor_go_live(vendor_id: int, payload: GoLiveRequest, db: Session = Depends(get_db)):
    vendor = _get_vendor(db, vendor_id)
    go_live(vendor, payload.open_until, lat=payload.lat, lng=payload.lng)
    db.commit()
    db.refresh(vendor)
    return _presence(vendor)


@router.post("/{vendor_id}/offline", response_model=PresenceRead)
def vendor_go_offline(vendor_id: int, db: Session = Depends(get_db)):
    vendor = _get_vendor(db, vendor_id)
    go_offline(vendor)
    db.commit()
    db.refresh(vendor)
    return _presence(vendor)
