"""Tests for the in-memory stores, session records and events."""

import pytest
from transitions import MachineError

from blackjack.cards import Rank
from blackjack.errors import AccountNotFoundError, InsufficientBalanceError, InternalInvariantError
from blackjack.game.events import EventEmitter, EventType
from blackjack.game.session import Session, deserialize_session, serialize_session
from blackjack.game.state import RoundPhase
from blackjack.game.table import Round
from blackjack.hand import Hand


class TestInMemoryLedger:
    """Tests for InMemoryLedgerStore."""

    def test_update_creates_entry(self, ledger):
        assert ledger.may_get_balance("user0000") is None
        assert ledger.try_update_balance("user0000", lambda current: (current or 0) + 50) == 50
        assert ledger.get_balance("user0000") == 50

    def test_get_balance_missing(self, ledger):
        with pytest.raises(AccountNotFoundError):
            ledger.get_balance("nobody")

    def test_failed_update_writes_nothing(self, ledger):
        ledger.try_update_balance("user0000", lambda current: 100)

        def reject(current):
            raise InsufficientBalanceError(current)

        with pytest.raises(InsufficientBalanceError):
            ledger.try_update_balance("user0000", reject)
        assert ledger.get_balance("user0000") == 100

    def test_negative_balance_is_fatal(self, ledger):
        ledger.try_update_balance("user0000", lambda current: 100)
        with pytest.raises(InternalInvariantError):
            ledger.try_update_balance("user0000", lambda current: current - 101)
        assert ledger.get_balance("user0000") == 100


class TestInMemorySessions:
    """Tests for InMemorySessionStore."""

    def test_missing_session(self, sessions):
        assert sessions.get_session("user0000") is None

    def test_lock_per_account(self, sessions):
        assert sessions.lock("user0000") is sessions.lock("user0000")
        assert sessions.lock("user0000") is not sessions.lock("user0001")

    def test_returns_copies(self, sessions):
        session = Session(True, 100, Hand([Rank.SEVEN]), Hand([Rank.TEN, Rank.THREE]))
        sessions.save_session("user0000", session)
        session.player_hand.add_card(Rank.KING)

        loaded = sessions.get_session("user0000")
        assert loaded.player_hand.cards == [Rank.TEN, Rank.THREE]
        loaded.dealer_hand.add_card(Rank.TWO)
        assert sessions.get_session("user0000").dealer_hand.cards == [Rank.SEVEN]


class TestSessionSerialization:
    def test_serialized_form(self):
        session = Session(True, 100, Hand([Rank.ACE]), Hand([Rank.TEN, Rank.QUEEN]))
        data = serialize_session(session)
        assert data == {
            "in_progress": True,
            "total_stake": 100,
            "dealer_hand": ["ACE"],
            "player_hand": ["TEN", "QUEEN"],
        }
        assert deserialize_session(data) == session


class TestRoundPhase:
    def test_str(self):
        assert str(RoundPhase.IN_PROGRESS) == "In Progress"

    def test_round_machine_moves(self):
        game = Round("user0000", None)
        assert game.phase == RoundPhase.IDLE

        game.deal()
        game.draw()
        assert game.session.in_progress

        game.resolve()
        assert game.phase == RoundPhase.IDLE
        assert not game.session.in_progress

    @pytest.mark.parametrize("trigger", ["draw", "resolve"])
    def test_idle_round_rejects_play(self, trigger):
        with pytest.raises(MachineError):
            getattr(Round("user0000", None), trigger)()

    def test_started_round_cannot_be_dealt_again(self):
        with pytest.raises(MachineError):
            Round("user0000", Session(in_progress=True)).deal()


class TestEventEmitter:
    """Tests for EventEmitter."""

    def test_typed_and_catch_all_handlers(self):
        emitter = EventEmitter()
        typed, everything = [], []
        emitter.subscribe(typed.append, EventType.DEPOSIT)
        emitter.subscribe(everything.append)

        emitter.emit_new(EventType.DEPOSIT, "user0000", amount=10)
        emitter.emit_new(EventType.WITHDRAW, "user0000", amount=5)

        assert [e.event_type for e in typed] == [EventType.DEPOSIT]
        assert len(everything) == 2
        assert everything[1].data == {"amount": 5}

    def test_unsubscribe(self):
        emitter = EventEmitter()
        seen = []
        emitter.subscribe(seen.append)
        emitter.unsubscribe(seen.append)
        emitter.unsubscribe(seen.append)
        emitter.emit_new(EventType.DEPOSIT, "user0000")
        assert seen == []

    def test_history_is_bounded(self):
        emitter = EventEmitter(max_history=3)
        for amount in range(5):
            emitter.emit_new(EventType.DEPOSIT, "user0000", amount=amount)
        assert [e.data["amount"] for e in emitter.history] == [2, 3, 4]
        emitter.clear_history()
        assert emitter.history == []

    def test_history_for_account(self):
        emitter = EventEmitter()
        emitter.emit_new(EventType.DEPOSIT, "user0000", amount=10)
        emitter.emit_new(EventType.DEPOSIT, "user0001", amount=20)
        emitter.emit_new(EventType.WITHDRAW, "user0000", amount=5)
        assert [e.event_type for e in emitter.history_for("user0000")] == [
            EventType.DEPOSIT,
            EventType.WITHDRAW,
        ]

    def test_event_display(self):
        event = EventEmitter().emit_new(EventType.BET_PLACED, "user0000", amount=100)
        assert str(event) == "bet_placed account=user0000 amount=100"
