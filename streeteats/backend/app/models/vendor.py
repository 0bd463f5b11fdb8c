# streeteats/backend/app/models/vendor.py

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..db import Base

VENDOR_TYPES = ["truck", "pushcart", "stall"]


class Vendor(Base):
    """
    Vendor record owned by the wider StreetEats app.
    The queue core only reads it; presence.py flips the live/offline fields.
    """
    __tablename__ = "vendors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    cuisine = Column(String(100), nullable=True)

    vendor_type = Column(String(20), nullable=False, server_default="truck")
    is_online = Column(Boolean, nullable=False, default=False)
    is_stationary = Column(Boolean, nullable=False, default=False)
    has_fixed_address = Column(Boolean, nullable=False, default=True)

    # Operator-set closing time for pushcarts that went live on the spot
    open_until = Column(DateTime(timezone=True), nullable=True)

    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)
    address = Column(String(255), nullable=True)

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    queues = relationship("Queue", back_populates="vendor")
