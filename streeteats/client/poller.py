# streeteats/client/poller.py
"""
Customer-side queue client.

`QueueClient` wraps the queue HTTP API. `TicketPoller` keeps an open ticket
current by re-reading its status on a fixed interval and turning changes into
notifications:

  - position went down     -> "moved_up"
  - status became "ready"  -> "ready"

A failed poll is logged and tried again on the next tick; the customer never
sees it. Polling ends once the ticket is completed or the view is closed.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 30.0
TERMINAL_STATUSES = {"completed"}


@dataclass(frozen=True)
class Notification:
    kind: str  # joined | moved_up | ready | error
    title: str
    message: str


NotificationCallback = Callable[[Notification], None]


class QueueApiError(Exception):
    """Non-2xx answer from the queue API, carrying its error envelope."""

    def __init__(self, status_code: int, code: Optional[str], message: str) -> None:
        super().__init__(f"{status_code} {code or 'error'}: {message}")
        self.status_code = status_code
        self.code = code
        self.message = message


class QueueClient:
    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000",
        http: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ) -> None:
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> "QueueClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict:
        resp = await self._http.request(method, path, **kwargs)
        if resp.is_error:
            try:
                body = resp.json()
            except ValueError:
                body = {}
            # Proxies may answer with a list, a string or an HTML page
            if not isinstance(body, dict):
                body = {}
            raise QueueApiError(
                resp.status_code,
                body.get("error"),
                body.get("message") or resp.reason_phrase,
            )
        return resp.json()

    async def queue_info(self, vendor_id: int) -> dict:
        return await self._request("GET", f"/api/queue/{vendor_id}")

    async def join(
        self,
        vendor_id: int,
        items: list,
        total_amount: float,
        customer_name: str = "Customer",
    ) -> dict:
        payload = {
            "vendorId": vendor_id,
            "items": items,
            "totalAmount": total_amount,
            "customerName": customer_name,
        }
        return await self._request("POST", "/api/queue/join", json=payload)

    async def status(self, queue_number: int, vendor_id: int) -> dict:
        return await self._request("GET", f"/api/queue/status/{queue_number}/{vendor_id}")

    async def vendor_queue(self, vendor_id: int) -> dict:
        return await self._request("GET", f"/api/vendor/{vendor_id}/queue")

    async def complete(self, entry_id: int) -> dict:
        return await self._request("POST", f"/api/vendor/queue/complete/{entry_id}")


class TicketPoller:
    def __init__(
        self,
        client: QueueClient,
        vendor_id: int,
        queue_number: int,
        vendor_name: str = "the vendor",
        on_notification: Optional[NotificationCallback] = None,
        interval: float = DEFAULT_POLL_INTERVAL,
        position: Optional[int] = None,
        status: str = "waiting",
    ) -> None:
        self.client = client
        self.vendor_id = vendor_id
        self.queue_number = queue_number
        self.vendor_name = vendor_name
        self.on_notification = on_notification
        self.interval = interval

        self.position = position
        self.estimated_wait: Optional[int] = None
        self.status = status
        self.failures = 0

        self._closed = asyncio.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    @property
    def finished(self) -> bool:
        return self.closed or self.status in TERMINAL_STATUSES

    def close(self) -> None:
        """Stop polling. A request already in flight is let through and ignored."""
        self._closed.set()

    def _notify(self, kind: str, title: str, message: str) -> None:
        if self.on_notification is not None:
            self.on_notification(Notification(kind=kind, title=title, message=message))

    def _apply(self, data: dict) -> None:
        previous_position = self.position
        previous_status = self.status

        self.position = data["position"]
        self.estimated_wait = data.get("estimatedWait")
        self.status = data["status"]

        if previous_position is not None and self.position < previous_position:
            self._notify("moved_up", "Queue Update", f"You're now #{self.position} in line!")

        if self.status == "ready" and previous_status != "ready":
            self._notify(
                "ready",
                "Order Ready!",
                f"Your order at {self.vendor_name} is ready for pickup!",
            )

    async def poll_once(self) -> Optional[dict]:
        """One status read. Returns the payload, or None if it failed or was discarded."""
        if self.closed:
            return None
        try:
            data = await self.client.status(self.queue_number, self.vendor_id)
        except (httpx.HTTPError, QueueApiError, ValueError) as exc:
            self.failures += 1
            logger.warning(
                "Status poll failed for #%s at vendor %s: %s",
                self.queue_number, self.vendor_id, exc,
            )
            return None

        if self.closed:
            return None
        try:
            self._apply(data)
        except (KeyError, TypeError) as exc:
            self.failures += 1
            logger.warning("Malformed status payload for #%s: %s", self.queue_number, exc)
            return None
        return data

    async def run(self) -> None:
        """Poll every `interval` seconds until the ticket completes or close() is called."""
        while not self.finished:
            try:
                await asyncio.wait_for(self._closed.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass
            if self.closed:
                break
            await self.poll_once()
        logger.debug("Stopped polling #%s at vendor %s", self.queue_number, self.vendor_id)


async def join_and_watch(
    client: QueueClient,
    vendor_id: int,
    items: list,
    total_amount: float,
    vendor_name: str = "the vendor",
    customer_name: str = "Customer",
    on_notification: Optional[NotificationCallback] = None,
    interval: float = DEFAULT_POLL_INTERVAL,
) -> TicketPoller:
    """
    Join a vendor's line and hand back a poller for the new ticket.
    A failed join raises after telling the customer, so they can retry.
    """
    try:
        data = await client.join(vendor_id, items, total_amount, customer_name)
    except (httpx.HTTPError, QueueApiError) as exc:
        logger.error("Joining queue at vendor %s failed: %s", vendor_id, exc)
        if on_notification is not None:
            on_notification(
                Notification("error", "Queue Error", "Failed to join queue. Please try again.")
            )
        raise

    poller = TicketPoller(
        client,
        vendor_id,
        data["queueNumber"],
        vendor_name=vendor_name,
        on_notification=on_notification,
        interval=interval,
        position=data["position"],
    )
    poller.estimated_wait = data.get("estimatedWait")
    if on_notification is not None:
        on_notification(
            Notification(
                "joined",
                "Joined Queue!",
                f"You're #{data['position']} in line at {vendor_name}",
            )
        )
    return poller
