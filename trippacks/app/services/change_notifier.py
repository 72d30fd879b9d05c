"""
Change notification for data under a target path.

Observers register for a path and are told when a write changed rows
under it. Delivery is fire-and-forget: each observer runs in its own
asyncio task, errors are logged and nothing is retried.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Set, Union

logger = logging.getLogger("trippacks.notifications")

Observer = Callable[[str], Union[None, Awaitable[None]]]


@dataclass
class _Registration:
    path: str
    observer: Observer
    descendants: bool

    def wants(self, changed_path: str) -> bool:
        base = self.path.rstrip("/")
        changed = changed_path.rstrip("/")
        if changed == base:
            return True
        return self.descendants and changed.startswith(base + "/")


class ChangeNotifier:

    def __init__(self):
        self._registrations: List[_Registration] = []
        self._pending: Set[asyncio.Task] = set()

    def register(self, path: str, observer: Observer, descendants: bool = True) -> None:
        """
        Register ``observer`` for changes at ``path``.

        With ``descendants`` an observer of "/trips" also hears about
        "/trips/4".
        """
        self._registrations.append(_Registration(path, observer, descendants))

    def unregister(self, observer: Observer) -> None:
        self._registrations = [r for r in self._registrations if r.observer is not observer]

    def notify(self, path: str) -> int:
        """Schedule delivery of ``path`` to interested observers. Returns how many."""
        loop = asyncio.get_running_loop()
        scheduled = 0
        for registration in self._registrations:
            if not registration.wants(path):
                continue
            task = loop.create_task(self._deliver(registration.observer, path))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
            scheduled += 1
        logger.debug("Change at %s sent to %d observer(s)", path, scheduled)
        return scheduled

    async def drain(self) -> None:
        """Wait until every scheduled delivery has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    @staticmethod
    async def _deliver(observer: Observer, path: str) -> None:
        try:
            result = observer(path)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Change observer failed for %s", path)
