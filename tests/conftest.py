"""
Shared test fixtures for the Memory Match tests.
"""
import random

import pytest
from unittest.mock import AsyncMock, MagicMock

from games.game_1001_matching.game_1001 import MemoryGame


class FakeHandle:
    def __init__(self, delay, callback, args):
        self.delay = delay
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Stands in for loop.call_later; fire() runs what is due."""
    def __init__(self):
        self.handles = []

    def __call__(self, delay, callback, *args):
        handle = FakeHandle(delay, callback, args)
        self.handles.append(handle)
        return handle

    @property
    def pending(self):
        return [h for h in self.handles if not h.cancelled]

    def fire(self):
        due, self.handles = self.pending, []
        for handle in due:
            handle.callback(*handle.args)


class UnshuffledRandom(random.Random):
    """Keeps catalog order so card positions are predictable."""
    def shuffle(self, x):
        pass


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def feedback():
    return MagicMock()


@pytest.fixture
def game(scheduler, feedback):
    return MemoryGame(difficulty="easy", scheduler=scheduler, feedback=feedback, rng=random.Random(1234))


@pytest.fixture
def ordered_game(scheduler, feedback):
    # easy deck in catalog order: lion, tiger, elephant, giraffe, lion, tiger, elephant, giraffe
    return MemoryGame(difficulty="easy", scheduler=scheduler, feedback=feedback, rng=UnshuffledRandom())


@pytest.fixture
def owner():
    member = MagicMock()
    member.id = 1001
    member.display_name = "Player"
    member.mention = "<@1001>"
    return member


@pytest.fixture
def channel():
    ch = MagicMock()
    ch.id = 555
    ch.send = AsyncMock()
    return ch


def find_pair(game):
    """Return ids of two cards with the same face."""
    first = game.cards[0]
    for card in game.cards[1:]:
        if card.face == first.face:
            return first.id, card.id
    raise AssertionError("deck has no pair for the first card")


def find_mismatch(game):
    """Return ids of two cards with different faces."""
    first = game.cards[0]
    for card in game.cards[1:]:
        if card.face != first.face:
            return first.id, card.id
    raise AssertionError("deck has a single face")
