"""Event Notifier — fire-and-forget delivery of buy/sell events to observers.

Invariants:
    - notify() never raises: observer failures are logged and counted
    - Sync observers run inline; coroutine observers are scheduled as tasks
    - Pending tasks are referenced until done (no garbage-collected deliveries)

Design Decisions:
    - Per-kind subscriber lists plus wildcard subscribers (kind=None)
    - drain() for shutdown and tests: awaits deliveries still in flight
"""

import asyncio
import inspect
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable

from tagshop.core.domain_types import TransactionEvent, TransactionKind

logger = logging.getLogger(__name__)

Observer = Callable[[TransactionEvent], Awaitable[None] | None]


class ObserverNotifier:
    """Fan-out notifier. Satisfies the EventNotifier protocol."""

    def __init__(self):
        self._observers: dict[TransactionKind | None, list[Observer]] = defaultdict(list)
        self._pending: set[asyncio.Task] = set()
        self.failures = 0
        self.delivered = 0

    def subscribe(
        self, observer: Observer, kind: TransactionKind | None = None,
    ) -> None:
        self._observers[kind].append(observer)

    def notify(self, event: TransactionEvent) -> None:
        for observer in self._observers[event.kind] + self._observers[None]:
            try:
                result = observer(event)
            except Exception as e:
                self._record_failure(event, e)
                continue
            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                self._pending.add(task)
                task.add_done_callback(
                    lambda t, ev=event: self._on_task_done(t, ev),
                )
            else:
                self.delivered += 1

    async def drain(self) -> None:
        """Wait for every scheduled delivery to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _on_task_done(self, task: asyncio.Task, event: TransactionEvent) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._record_failure(event, exc)
        else:
            self.delivered += 1

    def _record_failure(self, event: TransactionEvent, exc: BaseException) -> None:
        self.failures += 1
        logger.warning(
            f"Observer failed for {event.kind.value} event: {exc}",
            extra={"identity": event.identity, "tag_id": event.tag_id},
        )
