"""Round state machine and vault accounting."""

from blackjack.game.actions import ActionCommand, DoubleDown, Hit, Stand
from blackjack.game.events import GameEvent, EventType
from blackjack.game.session import Session
from blackjack.game.state import RoundPhase
from blackjack.game.table import BlackjackTable

__all__ = [
    "ActionCommand",
    "DoubleDown",
    "Hit",
    "Stand",
    "GameEvent",
    "EventType",
    "Session",
    "RoundPhase",
    "BlackjackTable",
]
