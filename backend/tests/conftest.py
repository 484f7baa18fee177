import asyncio

import pytest

from models import Mood, new_entry
from storage import PersistentStore


class StubGenerator:
    """Returns canned text, or raises when given an exception."""

    def __init__(self, reply="A calmer view.", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def generate(self, system_instruction, user_instruction):
        self.calls.append((system_instruction, user_instruction))
        if self.error is not None:
            raise self.error
        return self.reply


class GatedGenerator(StubGenerator):
    """Holds the reply until `release()`; lets tests observe the in-flight state."""

    def __init__(self, reply="A calmer view."):
        super().__init__(reply)
        self.gate = asyncio.Event()

    def release(self):
        self.gate.set()

    async def generate(self, system_instruction, user_instruction):
        self.calls.append((system_instruction, user_instruction))
        await self.gate.wait()
        return self.reply


@pytest.fixture
def store():
    s = PersistentStore("sqlite://")
    yield s
    s.close()


@pytest.fixture
def make_entry():
    def _make(content="Grateful for tea", mood=Mood.HAPPY, **kwargs):
        return new_entry(content, mood, **kwargs)

    return _make
