import logging
from collections import OrderedDict
from collections.abc import Awaitable, Callable, Hashable
from typing import Any, TypeVar

from app.shared.infrastructure.pubsub.broadcaster import PathRevalidationBroadcaster

T = TypeVar("T")
logger = logging.getLogger(__name__)


class PathCache:
    """LRU cache of view data keyed by logical path, invalidated per path."""

    _DEFAULT_MAX_ENTRIES = 512

    def __init__(
        self,
        broadcaster: PathRevalidationBroadcaster | None = None,
        max_entries: int = _DEFAULT_MAX_ENTRIES,
    ) -> None:
        self._entries: OrderedDict[tuple[str, Hashable], Any] = OrderedDict()
        self._generations: dict[str, int] = {}
        self._broadcaster = broadcaster
        self._max_entries = max(max_entries, 1)

    def __len__(self) -> int:
        return len(self._entries)

    async def get_or_load(
        self,
        path: str,
        key: Hashable,
        loader: Callable[[], Awaitable[T]],
    ) -> T:
        entry_key = (path, key)
        if entry_key in self._entries:
            self._entries.move_to_end(entry_key)
            return self._entries[entry_key]

        generation = self._generations.get(path, 0)
        value = await loader()
        # Not cached when the path was revalidated while the loader ran.
        if self._generations.get(path, 0) == generation:
            self._entries[entry_key] = value
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)
        return value

    def contains(self, path: str, key: Hashable) -> bool:
        return (path, key) in self._entries

    def revalidate_path(self, path: str) -> None:
        self._generations[path] = self._generations.get(path, 0) + 1
        stale = [entry_key for entry_key in self._entries if entry_key[0] == path]
        for entry_key in stale:
            del self._entries[entry_key]
        logger.info(
            "path_revalidated dropped_entries=%s", len(stale), extra={"request_path": path}
        )
        if self._broadcaster is not None:
            self._broadcaster.publish_nowait(path)
