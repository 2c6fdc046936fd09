"""Shared dependencies: the table instance and the caller's account."""

import logging
from typing import Annotated

import redis
from fastapi import Depends, Header, HTTPException

from api.auth import get_account_signer
from api.stores import RedisLedgerStore, RedisSessionStore
from blackjack.game import BlackjackTable
from blackjack.stores import InMemoryLedgerStore, InMemorySessionStore, LedgerStore, SessionStore
from config import config

logger = logging.getLogger(__name__)

# Global table instance
_table: BlackjackTable | None = None


def _create_stores() -> tuple[LedgerStore, SessionStore]:
    """Use Redis when it answers, otherwise fall back to in-memory stores."""
    if config.redis.enabled:
        client = redis.Redis.from_url(config.redis.url, decode_responses=True)
        try:
            client.ping()
        except redis.RedisError as e:
            logger.warning("Redis unavailable at %s (%s), using in-memory stores", config.redis.url, e)
        else:
            logger.info("Using Redis stores at %s", config.redis.url)
            return RedisLedgerStore(client), RedisSessionStore(client)

    return InMemoryLedgerStore(), InMemorySessionStore()


def get_table() -> BlackjackTable:
    """Get or create the table."""
    global _table
    if _table is None:
        ledger, sessions = _create_stores()
        if config.vault.token_address is None:
            logger.warning("VAULT_TOKEN_ADDRESS is not set, deposits are disabled")
        _table = BlackjackTable(ledger, sessions, token_address=config.vault.token_address)
    return _table


def get_account(
    token: Annotated[str | None, Header(alias="X-Account-Token")] = None,
) -> str:
    """Resolve the calling account from its signed token."""
    if token is None:
        raise HTTPException(status_code=401, detail="Missing account token")
    account = get_account_signer().unsign(token)
    if account is None:
        raise HTTPException(status_code=401, detail="Invalid or expired account token")
    return account


TableDep = Annotated[BlackjackTable, Depends(get_table)]
AccountDep = Annotated[str, Depends(get_account)]
