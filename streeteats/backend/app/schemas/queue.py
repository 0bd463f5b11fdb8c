# streeteats/backend/app/schemas/queue.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # The web client speaks camelCase; snake_case is still accepted on input
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class QueueItem(CamelModel):
    """Cart line copied into the ticket at join time."""
    dish_id: int
    quantity: int
    name: str = "Unknown"
    price: float = Field(allow_inf_nan=False)


class JoinRequest(CamelModel):
    vendor_id: int
    items: List[QueueItem]
    total_amount: float = Field(allow_inf_nan=False)
    customer_name: Optional[str] = None


class JoinResponse(CamelModel):
    success: bool = True
    queue_number: int
    position: int
    estimated_wait: int
    message: str


class QueueSummary(CamelModel):
    queue_id: int
    vendor_id: int
    current_serving_number: int
    total_in_queue: int
    estimated_wait: int


class TicketStatus(CamelModel):
    queue_number: int
    position: int
    estimated_wait: int
    status: str
    items: List[QueueItem]
    total_amount: float


class VendorQueueEntry(CamelModel):
    id: int
    queue_number: int
    customer_name: str
    status: str
    # Only waiting tickets hold a place in line
    position: Optional[int] = None
    estimated_wait: Optional[int] = None
    items: List[QueueItem]
    total_amount: float
    created_at: Optional[datetime] = None


class VendorQueue(CamelModel):
    queue: Optional[QueueSummary] = None
    entries: List[VendorQueueEntry] = []


class CompleteResponse(CamelModel):
    success: bool = True
    message: str
    already_completed: bool = False
