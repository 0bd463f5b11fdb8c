# streeteats/backend/app/api/v1/queue.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...db import get_db
from ...queue_manager import QueueManager
from ...schemas.queue import JoinRequest, JoinResponse, QueueSummary, TicketStatus

router = APIRouter(prefix="/api/queue", tags=["queue"])


def get_queue_manager(db: Session = Depends(get_db)) -> QueueManager:
    return QueueManager(db)


@router.post(
    "/join",
    response_model=JoinResponse,
    status_code=status.HTTP_201_CREATED,
)
def join_queue(payload: JoinRequest, manager: QueueManager = Depends(get_queue_manager)):
    return manager.join(
        vendor_id=payload.vendor_id,
        items=payload.items,
        total_amount=payload.total_amount,
        customer_name=payload.customer_name,
    )


@router.get("/status/{queue_number}/{vendor_id}", response_model=TicketStatus)
def queue_status(
    queue_number: int,
    vendor_id: int,
    manager: QueueManager = Depends(get_queue_manager),
):
    return manager.status(queue_number, vendor_id)


@router.get("/{vendor_id}", response_model=QueueSummary)
def queue_info(vendor_id: int, manager: QueueManager = Depends(get_queue_manager)):
    """Summary of a vendor's line; opens the queue on first request."""
    return manager.get_or_create_queue(vendor_id)
