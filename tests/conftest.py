"""Pytest fixtures for blackjack vault tests."""

from random import Random
from typing import Sequence, TypeVar

import pytest

from blackjack.cards import Rank
from blackjack.game import BlackjackTable, Session
from blackjack.hand import Hand
from blackjack.stores import InMemoryLedgerStore, InMemorySessionStore

T = TypeVar("T")

TOKEN = "token0000"
USER = "user0000"


class ScriptedRng:
    """Randomness source that deals a fixed sequence of ranks."""

    def __init__(self, cards: Sequence[Rank] = ()) -> None:
        self._cards = list(cards)

    def load(self, *cards: Rank) -> None:
        """Queue cards to be drawn next, in order."""
        self._cards.extend(cards)

    def choice(self, seq: Sequence[T]) -> T:
        if not self._cards:
            raise AssertionError("Scripted cards exhausted")
        card = self._cards.pop(0)
        assert card in seq
        return card  # type: ignore[return-value]

    @property
    def remaining(self) -> int:
        return len(self._cards)


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def script():
    """Scripted card source shared by every call on the table."""
    return ScriptedRng()


@pytest.fixture
def ledger():
    return InMemoryLedgerStore()


@pytest.fixture
def sessions():
    return InMemorySessionStore()


@pytest.fixture
def table(ledger, sessions, script):
    """A table where user0000 has deposited 1000."""
    t = BlackjackTable(ledger, sessions, token_address=TOKEN, rng_factory=lambda: script)
    t.deposit(TOKEN, USER, 1000)
    return t


@pytest.fixture
def start_round(sessions):
    """Store an in-progress round directly, without touching the vault."""

    def _start(dealer: list[Rank], player: list[Rank], stake: int = 100, account: str = USER) -> Session:
        session = Session(
            in_progress=True,
            total_stake=stake,
            dealer_hand=Hand(list(dealer)),
            player_hand=Hand(list(player)),
        )
        sessions.save_session(account, session)
        return session

    return _start

