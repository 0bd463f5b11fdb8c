# streeteats/backend/app/models/__init__.py

from .vendor import Vendor
from .queue import Queue
from .queue_entry import QueueEntry

__all__ = ["Vendor", "Queue", "QueueEntry"]
