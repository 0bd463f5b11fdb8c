# streeteats/backend/app/seed.py
import logging

from sqlalchemy.orm import Session

from .models.vendor import Vendor
from .presence import vendor_type_defaults

logger = logging.getLogger(__name__)

DEMO_VENDORS = [
    {
        "id": 1,
        "name": "Taco Express",
        "cuisine": "Mexican",
        "vendor_type": "truck",
        "lat": 37.7849,
        "lng": -122.4094,
        "address": "Mission District, SF",
    },
    {
        "id": 2,
        "name": "Burger Bliss",
        "cuisine": "American",
        "vendor_type": "truck",
        "lat": 37.7749,
        "lng": -122.4194,
        "address": "Downtown SF",
    },
]


def seed_demo_vendors(db: Session) -> int:
    """Insert the demo vendors (online) if they are missing. Returns how many were added."""
    added = 0
    for data in DEMO_VENDORS:
        if db.get(Vendor, data["id"]) is not None:
            continue
        vendor = Vendor(is_online=True, **data, **vendor_type_defaults(data["vendor_type"]))
        db.add(vendor)
        added += 1
    db.commit()
    if added:
        logger.info("Seeded %s demo vendors", added)
    return added
