"""Card ranks - the only card identity the engine needs."""

from enum import Enum
from typing import Iterable


class Rank(Enum):
    """Card ranks ordered for scoring (Ace sorts last)."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        if self.value <= 10:
            return str(self.value)
        return {
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
            Rank.ACE: "A",
        }[self]

    def __lt__(self, other: "Rank") -> bool:
        if not isinstance(other, Rank):
            return NotImplemented
        return self.value < other.value

    @property
    def blackjack_value(self) -> int:
        """Return the point value (Ace = 11, face cards = 10)."""
        if self.value <= 10:
            return self.value
        if self == Rank.ACE:
            return 11
        return 10  # Face cards

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE

    @classmethod
    def from_string(cls, s: str) -> "Rank":
        """Create a rank from a string like 'A', '10', 'T', 'k'."""
        key = s.strip().upper()
        rank_map = {str(rank): rank for rank in cls}
        rank_map["T"] = cls.TEN
        if key not in rank_map:
            raise ValueError(f"Invalid rank: {s}")
        return rank_map[key]


# All ranks in scoring order, the sample space for every draw
RANKS: tuple[Rank, ...] = tuple(Rank)


def hand_to_string(cards: Iterable[Rank]) -> str:
    """Render cards in deal order, e.g. '10 3 A'."""
    return " ".join(str(card) for card in cards)
