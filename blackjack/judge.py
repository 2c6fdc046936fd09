"""Round outcome classification."""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from blackjack.errors import InternalInvariantError
from blackjack.hand import Hand


class GameResult(Enum):
    """Payout class of a finished round."""

    WIN = "win"
    LOSE = "lose"
    DRAW = "draw"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class DealerBusted:
    dealer: int

    def __str__(self) -> str:
        return f"DealerBusted({self.dealer})"


@dataclass(frozen=True)
class PlayerBusted:
    player: int

    def __str__(self) -> str:
        return f"PlayerBusted({self.player})"


@dataclass(frozen=True)
class _Scored:
    """Outcome carrying both final scores."""

    dealer: int
    player: int

    def __str__(self) -> str:
        return f"{type(self).__name__}({self.dealer}, {self.player})"


class DealerWin(_Scored):
    pass


class PlayerWin(_Scored):
    pass


class PlayerBlackjackWin(_Scored):
    pass


class Draw(_Scored):
    pass


Judgement = Union[DealerBusted, PlayerBusted, DealerWin, PlayerWin, PlayerBlackjackWin, Draw]

RESULTS: dict[type, GameResult] = {
    DealerBusted: GameResult.WIN,
    PlayerWin: GameResult.WIN,
    PlayerBlackjackWin: GameResult.WIN,
    PlayerBusted: GameResult.LOSE,
    DealerWin: GameResult.LOSE,
    Draw: GameResult.DRAW,
}


def judge(dealer_hand: Hand, player_hand: Hand) -> Judgement:
    """
    Classify a finished pair of hands.

    Naturals are checked first, then busts (the player's before the
    dealer's), then plain score comparison.

    Raises:
        InternalInvariantError: if no rule matches
    """
    d = dealer_hand.value
    p = player_hand.value
    dealer_bj = dealer_hand.is_blackjack
    player_bj = player_hand.is_blackjack

    if dealer_bj and player_bj:
        return Draw(d, p)
    if player_bj:
        return PlayerBlackjackWin(d, p)
    if dealer_bj:
        return DealerWin(d, p)
    if p > 21:
        return PlayerBusted(p)
    if d > 21:
        return DealerBusted(d)
    if d < p:
        return PlayerWin(d, p)
    if d > p:
        return DealerWin(d, p)
    if d == p:
        return Draw(d, p)

    raise InternalInvariantError(f"Unjudgeable hands: dealer {dealer_hand!r}, player {player_hand!r}")


def result_of(judgement: Judgement) -> GameResult:
    """Map an outcome to its payout class."""
    try:
        return RESULTS[type(judgement)]
    except KeyError:
        raise InternalInvariantError(f"Outcome without a result: {judgement!r}") from None


# Payout multiplier applied to the total stake, which was escrowed at bet time
PAYOUT_MULTIPLIER: dict[GameResult, int] = {
    GameResult.WIN: 2,
    GameResult.DRAW: 1,
    GameResult.LOSE: 0,
}


def payout(result: GameResult, total_stake: int) -> int:
    """Return the amount credited back to the vault for a result."""
    return total_stake * PAYOUT_MULTIPLIER[result]
