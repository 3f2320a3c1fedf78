"""
In-process change feed for pharmacy inventory.

Writers call ``publish`` after committing; each WebSocket subscriber holds a
queue and re-fetches its search on every event. Events carry no row data,
so a subscriber that falls behind only needs the latest one.
"""
import asyncio
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

class ChangeBroadcaster:
    def __init__(self, max_pending: int = 100):
        self.max_pending = max_pending
        # queue -> event loop of the subscriber that owns it
        self._subscribers: Dict[asyncio.Queue, asyncio.AbstractEventLoop] = {}

    def subscribe(self) -> asyncio.Queue:
        """Register a queue; must be called from the subscriber's event loop."""
        queue = asyncio.Queue(maxsize=self.max_pending)
        self._subscribers[queue] = asyncio.get_running_loop()
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._subscribers.pop(queue, None)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, event: Dict[str, Any]) -> int:
        """Queue the event for every subscriber; returns how many received it."""
        current = _running_loop()
        delivered = 0
        for queue, loop in list(self._subscribers.items()):
            if loop is current:
                _offer(queue, event)
            elif loop.is_closed():
                self.unsubscribe(queue)
                continue
            else:
                loop.call_soon_threadsafe(_offer, queue, event)
            delivered += 1
        logger.debug(f"Published {event.get('type')} to {delivered} subscribers")
        return delivered

def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None

def _offer(queue: asyncio.Queue, event: Dict[str, Any]) -> None:
    if queue.full():
        # Only the most recent change matters for a re-fetch
        try:
            queue.get_nowait()
        except asyncio.QueueEmpty:
            pass
    queue.put_nowait(event)

inventory_changes = ChangeBroadcaster()

def get_inventory_broadcaster() -> ChangeBroadcaster:
    return inventory_changes
