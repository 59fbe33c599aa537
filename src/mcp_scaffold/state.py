"""Process-wide server state shared by all request handlers."""

import asyncio
import time
from typing import Any, Dict, List, Optional


class ServerState:
    """State created once at startup and kept for the lifetime of the process.

    ``start_time`` and the registry counts are fixed after startup. The keyed
    store is mutable and shared across concurrent handlers, so every access
    goes through ``lock``; hold it only around the read or write itself.
    """

    def __init__(self, tools_count: int = 0, resources_count: int = 0):
        self.start_time = time.monotonic()
        self.tools_count = tools_count
        self.resources_count = resources_count
        self.lock = asyncio.Lock()
        self._store: Dict[Any, Any] = {}

    @property
    def uptime_seconds(self) -> int:
        return int(time.monotonic() - self.start_time)

    async def put(self, key: Any, value: Any) -> None:
        async with self.lock:
            self._store[key] = value

    async def get(self, key: Any, default: Optional[Any] = None) -> Any:
        async with self.lock:
            return self._store.get(key, default)

    async def delete(self, key: Any) -> bool:
        async with self.lock:
            return self._store.pop(key, None) is not None

    async def keys(self) -> List[Any]:
        async with self.lock:
            return list(self._store)
