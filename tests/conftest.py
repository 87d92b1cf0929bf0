import asyncio

import pytest

from voteapp.models import PollDraft
from voteapp.persistence import MemoryKeyValueStore, Persistence
from voteapp.remote import RemoteSyncClient
from voteapp.state import PollStore


class RecordingRunner:
    """
    Stands in for BackgroundRunner: keeps submitted coroutines so a test can
    run them (or not) on its own terms.
    """

    def __init__(self):
        self.pending = []

    def submit(self, coro):
        self.pending.append(coro)

    def run_all(self):
        results = [asyncio.run(c) for c in self.pending]
        self.pending = []
        return results

    def close(self):
        for c in self.pending:
            c.close()
        self.pending = []


class TickingClock:
    def __init__(self, start=1_700_000_000_000, step=1000):
        self.now = start
        self.step = step

    def __call__(self):
        value = self.now
        self.now += self.step
        return value


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def persistence(kv):
    return Persistence(kv)


@pytest.fixture
def runner():
    r = RecordingRunner()
    yield r
    r.close()


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def store(persistence, runner, clock):
    s = PollStore(persistence, remote=RemoteSyncClient(), runner=runner, clock=clock)
    s.hydrate()
    return s


@pytest.fixture
def poll(store):
    return store.create_poll(PollDraft(question="Tabs or spaces?", options=["Tabs", "Spaces", "Both"], category="Tech"))
