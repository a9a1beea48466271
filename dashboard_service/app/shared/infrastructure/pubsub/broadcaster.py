import asyncio
from collections.abc import AsyncGenerator


class PathRevalidationBroadcaster:
    """In-process pub/sub broadcaster for revalidated view paths."""

    def __init__(self) -> None:
        self._subscribers: list[asyncio.Queue[str]] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish_nowait(self, path: str) -> None:
        # Subscriber queues are unbounded, put_nowait never raises QueueFull.
        for queue in list(self._subscribers):
            queue.put_nowait(path)

    async def subscribe(self) -> AsyncGenerator[str, None]:
        queue: asyncio.Queue[str] = asyncio.Queue()
        self._subscribers.append(queue)
        try:
            while True:
                yield await queue.get()
        finally:
            self._subscribers.remove(queue)
