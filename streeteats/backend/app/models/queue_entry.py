# streeteats/backend/app/models/queue_entry.py
import json
from decimal import Decimal

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..db import Base

WAITING = "waiting"
PREPARING = "preparing"
READY = "ready"
COMPLETED = "completed"

STATUSES = [WAITING, PREPARING, READY, COMPLETED]
TERMINAL_STATUSES = {COMPLETED}


class QueueEntry(Base):
    """
    One customer's ticket in a vendor's line.
    items_json is a frozen copy of the cart at join time, so later menu
    edits never change a placed ticket.
    """
    __tablename__ = "queue_entries"
    __table_args__ = (
        UniqueConstraint("queue_id", "queue_number", name="uq_queue_entries_number"),
    )

    id = Column(Integer, primary_key=True, index=True)
    queue_id = Column(Integer, ForeignKey("queues.id"), nullable=False, index=True)

    customer_name = Column(String(255), nullable=False, server_default="Customer")
    queue_number = Column(Integer, nullable=False)

    items_json = Column(Text, nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)

    status = Column(String(20), nullable=False, server_default=WAITING)

    # Snapshot at join; status reads recompute it
    estimated_wait = Column(Integer, nullable=False, default=0)

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    queue = relationship("Queue", back_populates="entries")

    def set_items(self, items: list) -> None:
        self.items_json = json.dumps(items)

    def get_items(self) -> list:
        if not self.items_json:
            return []
        return json.loads(self.items_json)

    @property
    def total(self) -> Decimal:
        return Decimal(self.total_amount).quantize(Decimal("0.01"))
