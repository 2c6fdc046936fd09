"""Tests for the Redis-backed stores."""

import fakeredis
import pytest

from api.stores import RedisLedgerStore, RedisSessionStore
from blackjack.cards import Rank
from blackjack.errors import AccountBusyError, InsufficientBalanceError, InternalInvariantError
from blackjack.game import BlackjackTable, Session
from blackjack.hand import Hand


@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def redis_ledger(redis_client):
    return RedisLedgerStore(redis_client, prefix="test:")


@pytest.fixture
def redis_sessions(redis_client):
    return RedisSessionStore(redis_client, prefix="test:")


class TestRedisLedger:
    """Tests for RedisLedgerStore."""

    def test_missing_account(self, redis_ledger):
        assert redis_ledger.may_get_balance("user0000") is None

    def test_update_creates_and_stores(self, redis_ledger, redis_client):
        assert redis_ledger.try_update_balance("user0000", lambda current: (current or 0) + 70) == 70
        assert redis_client.get("test:vault:user0000") == "70"
        assert redis_ledger.get_balance("user0000") == 70

    def test_rejected_update_writes_nothing(self, redis_ledger):
        redis_ledger.try_update_balance("user0000", lambda current: 100)

        def reject(current):
            raise InsufficientBalanceError(current)

        with pytest.raises(InsufficientBalanceError):
            redis_ledger.try_update_balance("user0000", reject)
        assert redis_ledger.get_balance("user0000") == 100

    def test_negative_balance_is_fatal(self, redis_ledger):
        redis_ledger.try_update_balance("user0000", lambda current: 10)
        with pytest.raises(InternalInvariantError):
            redis_ledger.try_update_balance("user0000", lambda current: current - 11)
        assert redis_ledger.get_balance("user0000") == 10

    def test_concurrent_write_is_retried(self, redis_ledger, redis_client):
        redis_ledger.try_update_balance("user0000", lambda current: 100)
        seen = []

        def debit(current):
            seen.append(current)
            if len(seen) == 1:
                # Another writer changes the balance mid-update
                redis_client.set("test:vault:user0000", 40)
            return current - 30

        assert redis_ledger.try_update_balance("user0000", debit) == 10
        assert seen == [100, 40]
        assert redis_ledger.get_balance("user0000") == 10


class TestRedisSessions:
    """Tests for RedisSessionStore."""

    def test_missing_session(self, redis_sessions):
        assert redis_sessions.get_session("user0000") is None

    def test_save_and_load(self, redis_sessions):
        session = Session(True, 100, Hand([Rank.SEVEN]), Hand([Rank.TEN, Rank.ACE]))
        redis_sessions.save_session("user0000", session)
        assert redis_sessions.get_session("user0000") == session

    def test_lock_is_exclusive_per_account(self, redis_client):
        sessions = RedisSessionStore(redis_client, prefix="test:", lock_timeout=5, lock_wait=0.1)
        with sessions.lock("user0000"):
            with pytest.raises(AccountBusyError):
                with sessions.lock("user0000"):
                    pass
            with sessions.lock("user0001"):
                pass

        with sessions.lock("user0000"):
            assert redis_client.exists("test:session:user0000:lock")
        assert not redis_client.exists("test:session:user0000:lock")


def test_table_round_on_redis(redis_ledger, redis_sessions, script):
    table = BlackjackTable(redis_ledger, redis_sessions, token_address="token0000", rng_factory=lambda: script)
    table.deposit("token0000", "user0000", 1000)

    script.load(Rank.TEN, Rank.TEN, Rank.EIGHT, Rank.EIGHT)
    table.bet("user0000", 100)
    assert redis_ledger.get_balance("user0000") == 900

    attrs = table.stand("user0000")
    assert attrs["result"] == "draw"
    assert redis_ledger.get_balance("user0000") == 1000
    assert not redis_sessions.get_session("user0000").in_progress
