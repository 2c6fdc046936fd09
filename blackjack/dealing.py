"""Card draws from an infinite shoe."""

import time
from random import Random
from typing import Protocol, Sequence, TypeVar

from blackjack.cards import RANKS, Rank
from blackjack.hand import Hand

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything that can pick uniformly from a sequence (e.g. random.Random)."""

    def choice(self, seq: Sequence[T]) -> T: ...


def draw_one(rng: RandomSource) -> Rank:
    """
    Draw a single card.

    Every rank is equally likely and no card is ever removed, so each draw
    is independent of all previous ones.
    """
    return rng.choice(RANKS)


def first_deal(rng: RandomSource) -> tuple[Hand, Hand]:
    """
    Deal the opening cards.

    One card goes to the dealer, then two to the player, in that order.
    The dealer has no hole card.

    Returns:
        (dealer_hand, player_hand)
    """
    dealer = Hand([draw_one(rng)])
    player = Hand([draw_one(rng), draw_one(rng)])
    return dealer, player


def rng_from_timestamp(timestamp_ns: int | None = None) -> Random:
    """Seed a generator from host entropy (defaults to the current time)."""
    if timestamp_ns is None:
        timestamp_ns = time.time_ns()
    return Random(timestamp_ns)
