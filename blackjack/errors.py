"""Errors raised by the game engine."""

from typing import Any


class GameError(Exception):
    """
    Base class for rejected operations.

    Every GameError is a deterministic precondition failure: the operation
    committed nothing and retrying it unchanged fails the same way.
    """

    code = "game_error"
    message = "Game error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)

    @property
    def data(self) -> dict[str, Any]:
        """Extra fields reported to the caller."""
        return {}


class InvalidAmountError(GameError):
    """Bet, deposit or withdrawal amount is zero or negative."""

    code = "invalid_amount"
    message = "Amount must be > 0"


class InsufficientBalanceError(GameError):
    """The vault balance cannot cover the requested debit."""

    code = "insufficient_balance"
    message = "Balance is too low"

    def __init__(self, balance: int) -> None:
        super().__init__(f"Balance is too low: {balance}")
        self.balance = balance

    @property
    def data(self) -> dict[str, Any]:
        return {"balance": self.balance}


class AccountNotFoundError(GameError):
    """No vault entry exists for the account."""

    code = "no_such_account"
    message = "No such account exists"

    def __init__(self, account: str) -> None:
        super().__init__(f"No such account exists: {account}")
        self.account = account

    @property
    def data(self) -> dict[str, Any]:
        return {"account": self.account}


class NoActiveSessionError(GameError):
    code = "action_before_bet"
    message = "Action before bet is not allowed"


class SessionAlreadyActiveError(GameError):
    code = "bet_after_start"
    message = "Bet is not allowed while a game is in progress"


class DoubleDownNotEligibleError(GameError):
    code = "double_down_not_allowed"
    message = "Double down is only allowed on the first two cards"


class WrongDoubleDownAmountError(GameError):
    """Double-down stake must match the current stake exactly."""

    code = "wrong_double_down_amount"
    message = "Wrong double down amount"

    def __init__(self, expected: int) -> None:
        super().__init__(f"Wrong double down amount, expected {expected}")
        self.expected = expected

    @property
    def data(self) -> dict[str, Any]:
        return {"expected": self.expected}


class UnauthorizedError(GameError):
    code = "unauthorized"
    message = "Unauthorized"


class AccountBusyError(GameError):
    """Another operation on the same account did not finish in time."""

    code = "account_busy"
    message = "Another operation on this account is in progress"


class InternalInvariantError(RuntimeError):
    """
    A state the rules make unreachable was reached.

    Signals a logic defect, not a bad request, so it is not a GameError and
    is never translated into a client error.
    """
