"""Round phase enumeration."""

from enum import Enum, auto


class RoundPhase(Enum):
    """
    Per-account round phases.

    Flow: IDLE → IN_PROGRESS → (hit) IN_PROGRESS → … → IDLE. The allowed
    moves live in Round.TRANSITIONS, whose state names are the lowercased
    phase names.
    """

    # No session yet, or the last round is resolved
    IDLE = auto()

    # Cards dealt, waiting for the player's action
    IN_PROGRESS = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()
