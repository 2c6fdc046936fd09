"""Player action commands."""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Hit:
    """Take one more card."""


@dataclass(frozen=True)
class Stand:
    """Keep the current hand and let the dealer play."""


@dataclass(frozen=True)
class DoubleDown:
    """Match the stake, take exactly one card, then stand."""

    amount: int


ActionCommand = Union[Hit, Stand, DoubleDown]
