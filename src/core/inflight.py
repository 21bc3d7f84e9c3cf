"""Table of in-flight requests used for request coalescing.

One asyncio task per request key. Lookups and inserts are synchronous,
so a check followed by an insert in the same turn of the event loop
cannot interleave with another task. Entries are dropped when their task
settles, whatever the outcome.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional


class InFlightTable:
    def __init__(self) -> None:
        self._tasks: Dict[str, "asyncio.Task[Any]"] = {}

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, key: object) -> bool:
        return key in self._tasks

    def get(self, key: str) -> "Optional[asyncio.Task[Any]]":
        return self._tasks.get(key)

    def tasks(self) -> "List[asyncio.Task[Any]]":
        return list(self._tasks.values())

    def track(self, key: str, task: "asyncio.Task[Any]") -> "asyncio.Task[Any]":
        self._tasks[key] = task

        def _settle(done: "asyncio.Task[Any]") -> None:
            # Only drop the entry if it still points at this task
            if self._tasks.get(key) is done:
                del self._tasks[key]
            # Mark the exception retrieved when every waiter has gone away
            if not done.cancelled():
                done.exception()

        task.add_done_callback(_settle)
        return task
