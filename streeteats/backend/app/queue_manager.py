# streeteats/backend/app/queue_manager.py
"""
Queue Manager: the only place that changes queue state.

Positions are never stored. Every read ranks a ticket among the tickets that
are still waiting, so completions ahead of a customer show up on their next
poll without any bookkeeping.
"""

from __future__ import annotations

import logging
import threading
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .config import JOIN_MAX_ATTEMPTS, MINUTES_PER_ORDER
from .errors import NotFound, StoreFailure, ValidationFailed, VendorUnavailable
from .models.queue import Queue
from .models.queue_entry import COMPLETED, WAITING, QueueEntry
from .models.vendor import Vendor
from .presence import is_accepting_orders
from .schemas.queue import (
    CompleteResponse,
    JoinResponse,
    QueueItem,
    QueueSummary,
    TicketStatus,
    VendorQueue,
    VendorQueueEntry,
)
from .store import QueueStore

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
DEFAULT_CUSTOMER_NAME = "Customer"

# Joins for one vendor run one at a time in this process: queue creation,
# number allocation, insert and commit all happen under the vendor's lock.
_vendor_locks: Dict[int, threading.Lock] = {}
_registry_lock = threading.Lock()


def vendor_lock(vendor_id: int) -> threading.Lock:
    with _registry_lock:
        lock = _vendor_locks.get(vendor_id)
        if lock is None:
            lock = threading.Lock()
            _vendor_locks[vendor_id] = lock
        return lock


def _to_decimal(value: Any, field: str) -> Decimal:
    if value is None or isinstance(value, bool):
        raise ValidationFailed(f"{field} is required")
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationFailed(f"{field} must be a number")
    if not number.is_finite():
        raise ValidationFailed(f"{field} must be a finite number")
    return number


def _item_dict(item: Any) -> dict:
    if isinstance(item, QueueItem):
        return item.model_dump(by_alias=True)
    if isinstance(item, dict):
        return item
    raise ValidationFailed("Each item must be an object")


def validate_join(
    vendor_id: Optional[int], items: Optional[Iterable[Any]], total_amount: Any
) -> Tuple[List[dict], Decimal]:
    """
    Check a join request before anything touches the database.
    Returns the item snapshots and the total as a 2dp Decimal.
    """
    if vendor_id is None:
        raise ValidationFailed("vendorId is required")

    raw_items = list(items or [])
    if not raw_items:
        raise ValidationFailed("items must contain at least one dish")

    snapshot: List[dict] = []
    computed = Decimal("0")
    for raw in raw_items:
        data = _item_dict(raw)
        dish_id = data.get("dishId", data.get("dish_id"))
        quantity = data.get("quantity")
        if dish_id is None:
            raise ValidationFailed("Each item needs a dishId")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationFailed(f"Invalid quantity for dish {dish_id}")
        price = _to_decimal(data.get("price"), "price")
        if price < 0:
            raise ValidationFailed(f"Invalid price for dish {dish_id}")

        computed += price * quantity
        snapshot.append(
            {
                "dishId": int(dish_id),
                "quantity": quantity,
                "name": data.get("name") or "Unknown",
                "price": float(price),
            }
        )

    total = _to_decimal(total_amount, "totalAmount")
    if total < 0:
        raise ValidationFailed("totalAmount cannot be negative")
    if abs(total - computed) > CENT:
        raise ValidationFailed(
            f"totalAmount {total} does not match items total {computed.quantize(CENT)}"
        )
    return snapshot, total.quantize(CENT)


class QueueManager:
    def __init__(
        self,
        db: Session,
        minutes_per_order: int = MINUTES_PER_ORDER,
        max_attempts: int = JOIN_MAX_ATTEMPTS,
    ):
        self.db = db
        self.store = QueueStore(db)
        self.minutes_per_order = minutes_per_order
        self.max_attempts = max(1, max_attempts)

    def estimate_wait(self, position: int) -> int:
        return position * self.minutes_per_order

    # Lookups

    def _require_vendor(self, vendor_id: int) -> Vendor:
        vendor = self.db.get(Vendor, vendor_id)
        if vendor is None:
            raise NotFound(f"Vendor {vendor_id} not found")
        return vendor

    def _summary(self, queue: Queue) -> QueueSummary:
        waiting = self.store.count_waiting(queue.id)
        return QueueSummary(
            queue_id=queue.id,
            vendor_id=queue.vendor_id,
            current_serving_number=queue.current_serving_number,
            total_in_queue=waiting,
            estimated_wait=self.estimate_wait(waiting),
        )

    def _open_queue(self, vendor_id: int) -> Queue:
        queue = self.store.create_queue(vendor_id)
        logger.info("Opened queue %s for vendor %s", queue.id, vendor_id)
        return queue

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Store failure while trying to %s", action)
            raise StoreFailure(f"Could not {action}") from exc

    # Operations

    def get_or_create_queue(self, vendor_id: int) -> QueueSummary:
        self._require_vendor(vendor_id)
        with vendor_lock(vendor_id):
            queue = self.store.get_active_queue(vendor_id)
            if queue is None:
                try:
                    queue = self._open_queue(vendor_id)
                except SQLAlchemyError as exc:
                    self.db.rollback()
                    logger.exception("Store failure opening queue for vendor %s", vendor_id)
                    raise StoreFailure("Could not open queue") from exc
                self._commit("open queue")
            return self._summary(queue)

    def join(
        self,
        vendor_id: int,
        items: Iterable[Any],
        total_amount: Any,
        customer_name: Optional[str] = None,
    ) -> JoinResponse:
        snapshot, total = validate_join(vendor_id, items, total_amount)

        vendor = self._require_vendor(vendor_id)
        if not is_accepting_orders(vendor):
            raise VendorUnavailable(f"{vendor.name} is not accepting orders right now")

        name = (customer_name or "").strip() or DEFAULT_CUSTOMER_NAME

        with vendor_lock(vendor_id):
            for attempt in range(1, self.max_attempts + 1):
                try:
                    queue = self.store.get_active_queue(vendor_id)
                    if queue is None:
                        queue = self._open_queue(vendor_id)
                    queue_number = self.store.next_queue_number(queue.id)
                    position = self.store.count_waiting_before(queue.id, queue_number) + 1
                    estimated_wait = self.estimate_wait(position)
                    self.store.insert_entry(
                        queue.id, name, queue_number, snapshot, total, estimated_wait
                    )
                    self.db.commit()
                except IntegrityError:
                    # Another process took the number (or opened the queue) first
                    self.db.rollback()
                    logger.warning(
                        "Queue number race for vendor %s (attempt %s/%s)",
                        vendor_id, attempt, self.max_attempts,
                    )
                    continue
                except SQLAlchemyError as exc:
                    self.db.rollback()
                    logger.exception("Store failure joining queue for vendor %s", vendor_id)
                    raise StoreFailure("Could not join the queue") from exc

                logger.info(
                    "Vendor %s: issued #%s to %s (position %s, ~%s min)",
                    vendor_id, queue_number, name, position, estimated_wait,
                )
                return JoinResponse(
                    queue_number=queue_number,
                    position=position,
                    estimated_wait=estimated_wait,
                    message=f"You're #{position} in line at {vendor.name}",
                )

        raise StoreFailure("Could not allocate a queue number, please retry")

    def status(self, queue_number: int, vendor_id: int) -> TicketStatus:
        entry = self.store.find_entry(vendor_id, queue_number)
        if entry is None:
            raise NotFound(f"Queue number {queue_number} not found for vendor {vendor_id}")

        position = self.store.count_waiting_before(entry.queue_id, entry.queue_number) + 1
        return TicketStatus(
            queue_number=entry.queue_number,
            position=position,
            estimated_wait=self.estimate_wait(position),
            status=entry.status,
            items=entry.get_items(),
            total_amount=float(entry.total),
        )

    def vendor_queue(self, vendor_id: int) -> VendorQueue:
        self._require_vendor(vendor_id)
        queue = self.store.get_active_queue(vendor_id)
        if queue is None:
            return VendorQueue(queue=None, entries=[])

        entries: List[VendorQueueEntry] = []
        waiting_ahead = 0
        for entry in self.store.list_open_entries(queue.id):
            position = None
            estimated_wait = None
            if entry.status == WAITING:
                waiting_ahead += 1
                position = waiting_ahead
                estimated_wait = self.estimate_wait(position)
            entries.append(self._vendor_entry(entry, position, estimated_wait))
        return VendorQueue(queue=self._summary(queue), entries=entries)

    def _vendor_entry(
        self, entry: QueueEntry, position: Optional[int], estimated_wait: Optional[int]
    ) -> VendorQueueEntry:
        return VendorQueueEntry(
            id=entry.id,
            queue_number=entry.queue_number,
            customer_name=entry.customer_name,
            status=entry.status,
            position=position,
            estimated_wait=estimated_wait,
            items=entry.get_items(),
            total_amount=float(entry.total),
            created_at=entry.created_at,
        )

    def complete(self, entry_id: int) -> CompleteResponse:
        entry = self.store.get_entry(entry_id)
        if entry is None:
            raise NotFound(f"Queue entry {entry_id} not found")

        if entry.status == COMPLETED:
            return CompleteResponse(
                message=f"Order #{entry.queue_number} was already completed",
                already_completed=True,
            )

        self.store.update_status(entry_id, COMPLETED)
        self._commit("complete order")
        logger.info("Completed queue entry %s (#%s)", entry_id, entry.queue_number)
        return CompleteResponse(message=f"Order #{entry.queue_number} completed")
