"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from blackjack.cards import Rank, hand_to_string


def score(cards: Iterable[Rank]) -> int:
    """
    Calculate the point total of a hand.

    Cards are evaluated in rank order with Aces last, so each Ace is valued
    against the total of everything else already counted: 11 if that keeps
    the total at or under 21, otherwise 1. An empty hand scores 0.
    """
    total = 0
    for card in sorted(cards):
        if card.is_ace:
            total += 11 if total + 11 <= 21 else 1
        else:
            total += card.blackjack_value
    return total


@dataclass
class Hand:
    """An ordered hand of ranks; order is kept for display only."""

    cards: list[Rank] = field(default_factory=list)

    def add_card(self, card: Rank) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def copy(self) -> "Hand":
        """Return an independent copy of this hand."""
        return Hand(list(self.cards))

    @property
    def value(self) -> int:
        """Return the hand's score."""
        return score(self.cards)

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is a natural blackjack (21 with 2 cards)."""
        return len(self.cards) == 2 and self.value == 21

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.value > 21

    @property
    def can_double(self) -> bool:
        """Check if the hand can be doubled down."""
        return len(self.cards) == 2

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Rank]:
        return iter(self.cards)

    def __str__(self) -> str:
        return hand_to_string(self.cards)

    def __repr__(self) -> str:
        return f"Hand({[card.name for card in self.cards]!r}, value={self.value})"
