"""Redis-backed vault ledger and session store."""

import json
import logging
from contextlib import contextmanager
from typing import Iterator

import redis
from redis.exceptions import WatchError

from blackjack.errors import AccountBusyError
from blackjack.game.session import Session, deserialize_session, serialize_session
from blackjack.stores import BalanceUpdate, LedgerStore, SessionStore, checked_balance
from config import config

logger = logging.getLogger(__name__)


class RedisLedgerStore(LedgerStore):
    """
    Ledger kept as one integer key per account.

    Updates use WATCH/MULTI/EXEC so a concurrent write to the same account
    makes the transaction retry instead of overwriting it.
    """

    def __init__(self, redis_client: redis.Redis, prefix: str | None = None) -> None:
        self._redis = redis_client
        self._prefix = f"{prefix or config.redis.key_prefix}vault:"

    def _key(self, account: str) -> str:
        """Get Redis key for an account's balance."""
        return f"{self._prefix}{account}"

    def may_get_balance(self, account: str) -> int | None:
        raw = self._redis.get(self._key(account))
        return int(raw) if raw is not None else None

    def try_update_balance(self, account: str, update: BalanceUpdate) -> int:
        key = self._key(account)
        with self._redis.pipeline() as pipe:
            while True:
                try:
                    pipe.watch(key)
                    raw = pipe.get(key)
                    current = int(raw) if raw is not None else None
                    new_balance = checked_balance(account, update(current))
                    pipe.multi()
                    pipe.set(key, new_balance)
                    pipe.execute()
                    return new_balance
                except WatchError:
                    logger.debug("Balance of %s changed during update, retrying", account)


class RedisSessionStore(SessionStore):
    """
    Sessions stored as JSON documents, one per account.

    Table operations are serialized per account with a redis-py Lock, so
    several API processes can share one Redis.
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        prefix: str | None = None,
        lock_timeout: float | None = None,
        lock_wait: float | None = None,
    ) -> None:
        self._redis = redis_client
        self._prefix = f"{prefix or config.redis.key_prefix}session:"
        self._lock_timeout = lock_timeout if lock_timeout is not None else config.redis.lock_timeout
        self._lock_wait = lock_wait if lock_wait is not None else config.redis.lock_wait

    def _key(self, account: str) -> str:
        """Get Redis key for an account's session."""
        return f"{self._prefix}{account}"

    def get_session(self, account: str) -> Session | None:
        data = self._redis.get(self._key(account))
        if data is None:
            return None
        return deserialize_session(json.loads(data))

    def save_session(self, account: str, session: Session) -> None:
        self._redis.set(self._key(account), json.dumps(serialize_session(session)))

    @contextmanager
    def lock(self, account: str) -> Iterator[None]:
        # Expires on its own if the holder dies mid-operation
        lock = self._redis.lock(
            f"{self._key(account)}:lock",
            timeout=self._lock_timeout,
            blocking_timeout=self._lock_wait,
        )
        if not lock.acquire():
            logger.warning("Timed out waiting for the lock on %s", account)
            raise AccountBusyError()
        try:
            yield
        finally:
            lock.release()
