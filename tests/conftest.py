"""Shared fixtures for the Spelling Snake tests."""

import random

import pytest

from animals import Word
from game_logic import SpellingConfig
from session import GameStateMachine


class FakeScheduler:
    """Records Tk-style after() timers so tests can fire them by hand."""

    def __init__(self):
        self.pending = {}
        self._next_id = 0
        self.now = 0.0  # seconds, moved by hand

    def after(self, ms, func):
        self._next_id += 1
        self.pending[self._next_id] = (ms, func)
        return self._next_id

    def after_cancel(self, id):
        self.pending.pop(id, None)

    def clock(self):
        return self.now

    def delays(self):
        return sorted(ms for ms, _ in self.pending.values())

    def fire(self, id):
        _, func = self.pending.pop(id)
        func()


def fixed_picker(*texts):
    """Picker that hands out the given words in order, repeating the last one."""
    queue = list(texts)

    def picker(excluding, max_length):
        text = queue.pop(0) if len(queue) > 1 else queue[0]
        return Word(text, "?")

    return picker


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def make_machine(rng):
    """Build a started machine spelling the given words."""

    def factory(*words, start=True, **overrides):
        cfg = SpellingConfig(**overrides)
        machine = GameStateMachine(cfg, fixed_picker(*(words or ("CAT",))), rng)
        if start:
            machine.start()
        return machine

    return factory
