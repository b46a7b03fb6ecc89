"""Shared fixtures for lull tests."""

import pytest

from lull.config import ProcessorConfig
from lull.processor import BackgroundProcessor


@pytest.fixture
def default_config():
    return ProcessorConfig()


@pytest.fixture
def greedy_config():
    return ProcessorConfig(break_interval_milliseconds=0, drain_poll_interval_milliseconds=5)


@pytest.fixture
def handled_errors():
    return []


@pytest.fixture
async def processor(greedy_config, handled_errors):
    async def record_error(exc: Exception) -> None:
        handled_errors.append(exc)

    p = BackgroundProcessor(record_error, config=greedy_config)
    yield p
    await p.dispose(kill_queue=True)
