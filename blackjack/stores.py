"""Vault ledger and session store interfaces with in-memory backends."""

import threading
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, ContextManager

from blackjack.errors import AccountNotFoundError, InternalInvariantError

if TYPE_CHECKING:
    from blackjack.game.session import Session

# Receives the current balance (None when the account has no entry yet) and
# returns the new one. Raising aborts the update with nothing written.
BalanceUpdate = Callable[[int | None], int]


class LedgerStore(ABC):
    """Per-account vault balances."""

    @abstractmethod
    def may_get_balance(self, account: str) -> int | None:
        """Get the balance, or None if the account has no entry."""
        ...

    @abstractmethod
    def try_update_balance(self, account: str, update: BalanceUpdate) -> int:
        """
        Atomically load, validate and store one account's balance.

        Args:
            account: Account key
            update: Computes the new balance from the current one

        Returns:
            The stored balance
        """
        ...

    def get_balance(self, account: str) -> int:
        """Get the balance of an existing account."""
        balance = self.may_get_balance(account)
        if balance is None:
            raise AccountNotFoundError(account)
        return balance


class SessionStore(ABC):
    """Per-account round records."""

    @abstractmethod
    def get_session(self, account: str) -> "Session | None":
        """Get the account's session, if any."""
        ...

    @abstractmethod
    def save_session(self, account: str, session: "Session") -> None:
        """Create or overwrite the account's session."""
        ...

    @abstractmethod
    def lock(self, account: str) -> ContextManager[object]:
        """
        Hold the account for one whole table operation.

        Operations on different accounts never wait on each other.
        """
        ...


def checked_balance(account: str, balance: int) -> int:
    """Reject a computed balance that would go negative."""
    if balance < 0:
        raise InternalInvariantError(f"Negative balance {balance} computed for {account}")
    return balance


class AccountLocks:
    """One lazily created threading.Lock per account."""

    def __init__(self) -> None:
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def __call__(self, account: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(account, threading.Lock())


class InMemoryLedgerStore(LedgerStore):
    """In-memory ledger for local development and tests."""

    def __init__(self, balances: dict[str, int] | None = None) -> None:
        self._balances: dict[str, int] = dict(balances or {})
        self._lock_for = AccountLocks()

    def may_get_balance(self, account: str) -> int | None:
        return self._balances.get(account)

    def try_update_balance(self, account: str, update: BalanceUpdate) -> int:
        with self._lock_for(account):
            new_balance = checked_balance(account, update(self._balances.get(account)))
            self._balances[account] = new_balance
            return new_balance


class InMemorySessionStore(SessionStore):
    """In-memory session store; hands out copies so callers cannot alias state."""

    def __init__(self) -> None:
        self._sessions: dict[str, "Session"] = {}
        self._operation_locks = AccountLocks()

    def get_session(self, account: str) -> "Session | None":
        session = self._sessions.get(account)
        return session.copy() if session is not None else None

    def save_session(self, account: str, session: "Session") -> None:
        self._sessions[account] = session.copy()

    def lock(self, account: str) -> threading.Lock:
        return self._operation_locks(account)
