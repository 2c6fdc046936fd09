"""Blackjack vault engine - scoring, dealing, judging and round accounting."""

from blackjack.cards import Rank, RANKS, hand_to_string
from blackjack.hand import Hand, score
from blackjack.dealing import draw_one, first_deal, rng_from_timestamp
from blackjack.dealer import dealer_action
from blackjack.judge import GameResult, judge

__all__ = [
    "Rank",
    "RANKS",
    "hand_to_string",
    "Hand",
    "score",
    "draw_one",
    "first_deal",
    "rng_from_timestamp",
    "dealer_action",
    "GameResult",
    "judge",
]
