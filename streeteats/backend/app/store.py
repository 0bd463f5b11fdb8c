# streeteats/backend/app/store.py
"""
Read/write access to queues and queue entries.

The store only flushes; committing (and rolling back) is left to the
queue manager so a number allocation and its insert land together.
"""

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from .models.queue import Queue
from .models.queue_entry import COMPLETED, WAITING, QueueEntry


class QueueStore:
    def __init__(self, db: Session):
        self.db = db

    # Queues

    def get_active_queue(self, vendor_id: int) -> Optional[Queue]:
        return (
            self.db.query(Queue)
            .filter(Queue.vendor_id == vendor_id, Queue.is_active.is_(True))
            .first()
        )

    def create_queue(self, vendor_id: int) -> Queue:
        queue = Queue(vendor_id=vendor_id, is_active=True, current_serving_number=0)
        self.db.add(queue)
        self.db.flush()
        return queue

    # Numbering and ranking

    def next_queue_number(self, queue_id: int) -> int:
        """One past the highest number ever issued; entries are never deleted."""
        highest = (
            self.db.query(func.max(QueueEntry.queue_number))
            .filter(QueueEntry.queue_id == queue_id)
            .scalar()
        )
        return (highest or 0) + 1

    def count_waiting_before(self, queue_id: int, queue_number: int) -> int:
        return (
            self.db.query(func.count(QueueEntry.id))
            .filter(
                QueueEntry.queue_id == queue_id,
                QueueEntry.status == WAITING,
                QueueEntry.queue_number < queue_number,
            )
            .scalar()
        )

    def count_waiting(self, queue_id: int) -> int:
        return (
            self.db.query(func.count(QueueEntry.id))
            .filter(QueueEntry.queue_id == queue_id, QueueEntry.status == WAITING)
            .scalar()
        )

    # Entries

    def insert_entry(
        self,
        queue_id: int,
        customer_name: str,
        queue_number: int,
        items: list,
        total_amount,
        estimated_wait: int,
    ) -> int:
        entry = QueueEntry(
            queue_id=queue_id,
            customer_name=customer_name,
            queue_number=queue_number,
            total_amount=total_amount,
            status=WAITING,
            estimated_wait=estimated_wait,
        )
        entry.set_items(items)
        self.db.add(entry)
        self.db.flush()
        return entry.id

    def find_entry(self, vendor_id: int, queue_number: int) -> Optional[QueueEntry]:
        return (
            self.db.query(QueueEntry)
            .join(Queue, QueueEntry.queue_id == Queue.id)
            .filter(
                Queue.vendor_id == vendor_id,
                Queue.is_active.is_(True),
                QueueEntry.queue_number == queue_number,
            )
            .first()
        )

    def get_entry(self, entry_id: int) -> Optional[QueueEntry]:
        return self.db.get(QueueEntry, entry_id)

    def update_status(self, entry_id: int, new_status: str) -> bool:
        entry = self.get_entry(entry_id)
        if entry is None:
            return False
        entry.status = new_status
        self.db.flush()
        return True

    def list_open_entries(self, queue_id: int) -> List[QueueEntry]:
        return (
            self.db.query(QueueEntry)
            .filter(QueueEntry.queue_id == queue_id, QueueEntry.status != COMPLETED)
            .order_by(QueueEntry.queue_number.asc())
            .all()
        )
