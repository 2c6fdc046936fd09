"""Per-account round record."""

from dataclasses import dataclass, field
from typing import Any

from blackjack.cards import Rank
from blackjack.hand import Hand


@dataclass
class Session:
    """
    The current or most recently resolved round for one account.

    While in_progress, both hands hold cards and total_stake is positive.
    A closed session keeps the final hands for queries; it is overwritten by
    the next bet, never deleted.
    """

    in_progress: bool = False
    total_stake: int = 0
    dealer_hand: Hand = field(default_factory=Hand)
    player_hand: Hand = field(default_factory=Hand)

    def copy(self) -> "Session":
        """Return an independent copy (hands included)."""
        return Session(
            in_progress=self.in_progress,
            total_stake=self.total_stake,
            dealer_hand=self.dealer_hand.copy(),
            player_hand=self.player_hand.copy(),
        )


def _serialize_hand(hand: Hand) -> list[str]:
    """Serialize a hand to a list of rank names."""
    return [card.name for card in hand.cards]


def _deserialize_hand(data: list[str]) -> Hand:
    """Deserialize a hand from a list of rank names."""
    return Hand([Rank[name] for name in data])


def serialize_session(session: Session) -> dict[str, Any]:
    """Serialize a session for storage."""
    return {
        "in_progress": session.in_progress,
        "total_stake": session.total_stake,
        "dealer_hand": _serialize_hand(session.dealer_hand),
        "player_hand": _serialize_hand(session.player_hand),
    }


def deserialize_session(data: dict[str, Any]) -> Session:
    """Restore a session from storage."""
    return Session(
        in_progress=data["in_progress"],
        total_stake=int(data["total_stake"]),
        dealer_hand=_deserialize_hand(data["dealer_hand"]),
        player_hand=_deserialize_hand(data["player_hand"]),
    )
