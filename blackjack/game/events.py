"""Notifications published by the table as accounts move money and play."""

import logging
import threading
from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class EventType(Enum):
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    BET_PLACED = "bet_placed"
    CARD_DEALT = "card_dealt"
    PLAYER_HIT = "player_hit"
    PLAYER_STAND = "player_stand"
    PLAYER_DOUBLE = "player_double"
    PLAYER_BUSTS = "player_busts"
    DEALER_HITS = "dealer_hits"
    DEALER_STANDS = "dealer_stands"
    DEALER_BUSTS = "dealer_busts"
    ROUND_ENDED = "round_ended"
    INVALID_ACTION = "invalid_action"


@dataclass(frozen=True)
class GameEvent:
    """Something that happened to one account."""

    event_type: EventType
    account: str
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __str__(self) -> str:
        details = " ".join(f"{key}={value}" for key, value in self.data.items())
        return f"{self.event_type.value} account={self.account} {details}".rstrip()


EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """
    Fan events out to handlers and keep a bounded history.

    Handlers registered without an event type receive every event, after
    the handlers registered for that specific type.
    """

    def __init__(self, max_history: int = 1000) -> None:
        self._handlers: defaultdict[EventType | None, list[EventHandler]] = defaultdict(list)
        self._history: deque[GameEvent] = deque(maxlen=max_history)
        self._lock = threading.Lock()

    def subscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        """Remove a handler; one that was never subscribed is ignored."""
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def emit(self, event: GameEvent) -> None:
        with self._lock:
            self._history.append(event)
        for handler in [*self._handlers.get(event.event_type, ()), *self._handlers.get(None, ())]:
            handler(event)

    def emit_new(self, event_type: EventType, account: str, **data: Any) -> GameEvent:
        event = GameEvent(event_type=event_type, account=account, data=data)
        self.emit(event)
        return event

    @property
    def history(self) -> list[GameEvent]:
        with self._lock:
            return list(self._history)

    def history_for(self, account: str) -> list[GameEvent]:
        """Events of a single account, oldest first."""
        return [event for event in self.history if event.account == account]

    def clear_history(self) -> None:
        with self._lock:
            self._history.clear()


def log_event(event: GameEvent) -> None:
    logger.debug("event %s", event)
