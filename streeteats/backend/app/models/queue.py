# streeteats/backend/app/models/queue.py
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..db import Base


class Queue(Base):
    __tablename__ = "queues"
    __table_args__ = (
        # At most one active line per vendor
        Index(
            "uq_queues_active_vendor",
            "vendor_id",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    vendor_id = Column(Integer, ForeignKey("vendors.id"), nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)

    # Only ever read in this service; nothing advances it yet
    current_serving_number = Column(Integer, nullable=False, default=0)

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    vendor = relationship("Vendor", back_populates="queues")
    entries = relationship(
        "QueueEntry", back_populates="queue", order_by="QueueEntry.queue_number"
    )
