"""Background action queue: runs enqueued actions one at a time on a timer."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from lull.config import ErrorHandler, ProcessorConfig
from lull.disposable import Disposable

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger("lull.processor")


@dataclass(eq=False, slots=True)
class _ActionRecord:
    action: Callable[[], Awaitable[Any] | Any]
    error_handler: ErrorHandler
    task: asyncio.Task[None] | None = None


async def _call(fn: Callable[..., Any], *args: Any) -> None:
    result = fn(*args)
    if inspect.isawaitable(result):
        await result


class BackgroundProcessor(Disposable):
    """Runs actions in the background, strictly in the order they were enqueued.

    A single self-rearming timer drives processing. Each tick takes at most
    one action off the queue and starts it; the next tick is armed once that
    action (and its error handling) has finished. Failures are routed to the
    action's error handler, and a failing error handler is logged. Neither
    stops the queue.

    Args:
        default_error_handler: Called with the exception of any action
            enqueued without its own handler. Sync or async.
        config: Interval policy. Defaults to :class:`ProcessorConfig`.

    Must be created inside a running event loop.

    Example::

        async with BackgroundProcessor(report_error) as processor:
            processor.enqueue(send_email)
            processor.enqueue(refresh_cache, on_cache_error)
    """

    __slots__ = (
        "_config",
        "_default_error_handler",
        "_disposed",
        "_executing",
        "_loop",
        "_pending",
        "_timer_handle",
    )

    def __init__(
        self,
        default_error_handler: ErrorHandler,
        *,
        config: ProcessorConfig | None = None,
    ) -> None:
        if not callable(default_error_handler):
            raise TypeError("default_error_handler must be callable")

        self._default_error_handler = default_error_handler
        self._config = config or ProcessorConfig()
        self._pending: deque[_ActionRecord] = deque()
        self._executing: set[_ActionRecord] = set()
        self._disposed = False
        self._timer_handle: asyncio.TimerHandle | None = None
        self._loop = asyncio.get_running_loop()

        self._schedule_next()

    @property
    def config(self) -> ProcessorConfig:
        return self._config

    @property
    def queue_length(self) -> int:
        """Number of actions waiting to start (executing ones excluded)."""
        return len(self._pending)

    @property
    def executing_count(self) -> int:
        return len(self._executing)

    @property
    def disposed(self) -> bool:
        return self._disposed

    def enqueue(
        self,
        action: Callable[[], Awaitable[Any] | Any],
        error_handler: ErrorHandler | None = None,
    ) -> None:
        """Append *action* to the queue.

        Args:
            action: Zero-argument callable, sync or async.
            error_handler: Receives the exception if *action* fails.
                Defaults to the processor's default handler.

        Raises:
            ObjectDisposedError: If the processor has been disposed.
        """
        self._ensure_not_disposed()

        if not callable(action):
            raise TypeError("action must be callable")
        if error_handler is not None and not callable(error_handler):
            raise TypeError("error_handler must be callable")

        if error_handler is None:
            error_handler = self._default_error_handler

        self._pending.append(_ActionRecord(action, error_handler))
        logger.debug("Enqueued action, queue length %d", len(self._pending))

    async def dispose(self, kill_queue: bool = False) -> None:
        """Stop processing and wait for in-flight actions to finish.

        Args:
            kill_queue: When False, every action still pending is started
                now and awaited. When True, pending actions are dropped
                without ever running.
        """
        if self._disposed:
            return
        self._disposed = True

        if self._timer_handle is not None:
            self._timer_handle.cancel()
            self._timer_handle = None

        if kill_queue:
            if self._pending:
                logger.debug("Dropping %d pending actions", len(self._pending))
            self._pending.clear()
        else:
            while self._pending:
                self._start(self._pending.popleft(), rearm=False)

        poll_interval = self._config.drain_poll_interval_milliseconds / 1000
        while self._executing:
            await asyncio.sleep(poll_interval)

        logger.debug("BackgroundProcessor disposed")

    def _schedule_next(self) -> None:
        if self._disposed:
            return

        delay_ms = self._config.break_interval_milliseconds
        if self._config.break_only_when_no_work and self._pending:
            delay_ms = 0

        self._timer_handle = self._loop.call_later(delay_ms / 1000, self._tick)

    def _tick(self) -> None:
        self._timer_handle = None
        if self._disposed:
            return

        if self._pending:
            self._start(self._pending.popleft(), rearm=True)
        else:
            self._schedule_next()

    def _start(self, record: _ActionRecord, *, rearm: bool) -> None:
        self._executing.add(record)
        record.task = self._loop.create_task(self._execute(record))
        record.task.add_done_callback(lambda _: self._finish(record, rearm))

    def _finish(self, record: _ActionRecord, rearm: bool) -> None:
        self._executing.discard(record)
        record.task = None
        if rearm:
            self._schedule_next()

    async def _execute(self, record: _ActionRecord) -> None:
        try:
            await _call(record.action)
        except Exception as exc:
            try:
                await _call(record.error_handler, exc)
            except Exception:
                logger.exception("Error handler failed while handling %r", exc)

    def __repr__(self) -> str:
        return (
            f"BackgroundProcessor(break_interval_milliseconds={self._config.break_interval_milliseconds}, "
            f"break_only_when_no_work={self._config.break_only_when_no_work}, "
            f"queue_length={len(self._pending)}, "
            f"disposed={self._disposed})"
        )
