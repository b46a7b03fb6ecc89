"""lull — Async coordination primitives for Python.

Two ways of keeping at most one piece of async work running for an owner:
coalesce the rest, or queue it.

Decorator usage:

    from lull import Duration, debounce

    class Editor:
        @debounce(Duration.from_milliseconds(300))
        async def autosave(self, text: str) -> None:
            await storage.write(text)

    # A burst of autosave() calls results in one write of the latest text.

Background queue usage:

    from lull import BackgroundProcessor, ProcessorConfig

    async with BackgroundProcessor(log_error, config=ProcessorConfig(break_interval_milliseconds=500)) as processor:
        processor.enqueue(send_welcome_email)
        processor.enqueue(refresh_cache, on_cache_error)
    # leaving the block waits for every queued action to finish
"""

from lull.config import DebounceConfig, ProcessorConfig
from lull.decorator import debounce
from lull.disposable import Disposable, ObjectDisposedError
from lull.duration import Duration
from lull.processor import BackgroundProcessor

__all__ = [
    "BackgroundProcessor",
    "DebounceConfig",
    "Disposable",
    "Duration",
    "ObjectDisposedError",
    "ProcessorConfig",
    "debounce",
]

__version__ = "0.1.0"
