"""
Shared fixtures for Muse Bridge tests.

The scripted transport and the fake sleep write into one shared log so tests
can assert the exact interleaving of command writes and settle delays.
"""

import asyncio

import pytest

from .helpers import ScriptedTransport


@pytest.fixture
def event_log():
    """Ordered ("write", command) / ("sleep", delay) entries"""
    return []


@pytest.fixture
def fake_sleep(event_log):
    """Sleep that records the requested delay and only yields to the loop"""
    async def sleep(delay):
        event_log.append(("sleep", delay))
        await asyncio.sleep(0)
    return sleep


@pytest.fixture
def transport(event_log):
    return ScriptedTransport(log=event_log)


@pytest.fixture
def spy_sinks():
    """Sink factory recording every sink it creates"""
    created = []

    class SpySink:
        def __init__(self, path):
            self.path = path
            self.records = []
            self.close_calls = 0
            created.append(self)

        def write_record(self, record):
            self.records.append(record)

        def close(self):
            self.close_calls += 1

    SpySink.created = created
    return SpySink
