"""Blackjack table: vault accounting and the per-account round state machine."""

import functools
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator, TypeVar

from transitions import Machine

from blackjack.cards import hand_to_string
from blackjack.dealer import dealer_action
from blackjack.dealing import RandomSource, draw_one, first_deal, rng_from_timestamp
from blackjack.errors import (
    AccountNotFoundError,
    DoubleDownNotEligibleError,
    GameError,
    InsufficientBalanceError,
    InvalidAmountError,
    NoActiveSessionError,
    SessionAlreadyActiveError,
    UnauthorizedError,
    WrongDoubleDownAmountError,
)
from blackjack.game.actions import ActionCommand, DoubleDown, Hit, Stand
from blackjack.game.events import EventEmitter, EventHandler, EventType, log_event
from blackjack.game.session import Session
from blackjack.game.state import RoundPhase
from blackjack.hand import Hand
from blackjack.judge import GameResult, Judgement, judge, payout, result_of
from blackjack.stores import LedgerStore, SessionStore

logger = logging.getLogger(__name__)

Attributes = dict[str, Any]

# Events of an operation, published only once its writes are committed
PendingEvents = list[tuple[EventType, dict[str, Any]]]

F = TypeVar("F", bound=Callable[..., Attributes])


def _holding_account(method: F) -> F:
    """Run a round operation while holding the account's session lock."""

    @functools.wraps(method)
    def wrapper(self: "BlackjackTable", account: str, *args: Any, **kwargs: Any) -> Attributes:
        with self.sessions.lock(account):
            return method(self, account, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


class Round:
    """
    State machine model for one account's session.

    Built fresh from the stored session on every call; the machine state
    mirrors session.in_progress.
    """

    STATES = [p.name.lower() for p in RoundPhase]

    TRANSITIONS = [
        {"trigger": "deal", "source": "idle", "dest": "in_progress"},
        {"trigger": "draw", "source": "in_progress", "dest": "in_progress"},
        {"trigger": "resolve", "source": "in_progress", "dest": "idle"},
    ]

    def __init__(self, account: str, session: Session | None) -> None:
        self.account = account
        self.session = session if session is not None else Session()

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="in_progress" if self.session.in_progress else "idle",
            auto_transitions=False,
            model_attribute="_machine_state",
            after_state_change="_sync_session",
        )

    @property
    def phase(self) -> RoundPhase:
        """Get current phase as enum."""
        return RoundPhase[self._machine_state.upper()]  # type: ignore

    def _sync_session(self) -> None:
        self.session.in_progress = self.phase == RoundPhase.IN_PROGRESS


@dataclass(frozen=True)
class Settlement:
    """Final hands and payout of a round, computed before anything is written."""

    dealer_hand: Hand
    judgement: Judgement
    result: GameResult
    balance_change: int


class BlackjackTable:
    """
    The game engine.

    Balances live in a LedgerStore and rounds in a SessionStore; the table
    holds no per-account state between calls. Every operation either commits
    all of its writes or raises before committing any. Round operations on
    one account run one at a time under the session store's lock.
    """

    def __init__(
        self,
        ledger: LedgerStore,
        sessions: SessionStore,
        token_address: str | None,
        rng_factory: Callable[[], RandomSource] = rng_from_timestamp,
    ) -> None:
        """
        Initialize a table.

        Args:
            ledger: Vault balance store
            sessions: Round record store
            token_address: Identity of the only caller allowed to deposit;
                None disables deposits
            rng_factory: Returns a fresh randomness source for each call
        """
        self.ledger = ledger
        self.sessions = sessions
        self.token_address = token_address
        self._rng_factory = rng_factory
        self.events = EventEmitter()
        self.events.subscribe(log_event)

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    # Vault

    def deposit(self, sender: str, account: str, amount: int) -> Attributes:
        """
        Credit tokens transferred in by the token contract.

        Args:
            sender: Identity of the caller, must be the token contract
            account: Account the tokens were sent for
            amount: Number of tokens received
        """
        if self.token_address is None or sender != self.token_address:
            raise self._reject(account, UnauthorizedError())
        if amount <= 0:
            raise self._reject(account, InvalidAmountError())

        balance = self.ledger.try_update_balance(
            account, lambda current: (current or 0) + amount
        )

        logger.info("Deposit of %d for %s, balance %d", amount, account, balance)
        self.events.emit_new(EventType.DEPOSIT, account, amount=amount, balance=balance)
        return {"action": "deposit", "amount": balance}

    def withdraw(self, account: str, amount: int) -> Attributes:
        """Debit the vault; a stake already escrowed is not withdrawable."""
        if amount <= 0:
            raise self._reject(account, InvalidAmountError())

        balance = self._debit(account, amount)

        logger.info("Withdrawal of %d for %s, balance %d", amount, account, balance)
        self.events.emit_new(EventType.WITHDRAW, account, amount=amount, balance=balance)
        return {"action": "withdraw", "amount": amount, "balance_after": balance}

    # Round flow

    @_holding_account
    def bet(self, account: str, amount: int) -> Attributes:
        """
        Escrow a bet and deal a new round.

        Raises:
            InvalidAmountError: amount is not positive
            SessionAlreadyActiveError: a round is already in progress
            AccountNotFoundError: the account has never deposited
            InsufficientBalanceError: the balance cannot cover the bet
        """
        if amount <= 0:
            raise self._reject(account, InvalidAmountError())

        game = Round(account, self.sessions.get_session(account))
        if game.phase != RoundPhase.IDLE:
            raise self._reject(account, SessionAlreadyActiveError())

        rng = self._rng_factory()
        with self._escrow(account, amount) as balance_after:
            dealer_hand, player_hand = first_deal(rng)
            game.session = Session(
                total_stake=amount,
                dealer_hand=dealer_hand,
                player_hand=player_hand,
            )
            game.deal()
            self.sessions.save_session(account, game.session)

        logger.info("Bet of %d by %s, balance %d", amount, account, balance_after)
        self.events.emit_new(EventType.BET_PLACED, account, amount=amount, balance=balance_after)
        self.events.emit_new(
            EventType.CARD_DEALT,
            account,
            dealer_cards=hand_to_string(dealer_hand),
            player_cards=hand_to_string(player_hand),
        )

        return {
            "action": "bet",
            "bet_amount": amount,
            "balance_after": balance_after,
            "dealer_cards": hand_to_string(dealer_hand),
            "player_cards": hand_to_string(player_hand),
        }

    @_holding_account
    def hit(self, account: str) -> Attributes:
        """Draw a card; the round resolves only if the player busts."""
        game = self._load_round(account)
        session = game.session
        rng = self._rng_factory()

        card = draw_one(rng)
        session.player_hand.add_card(card)
        pending: PendingEvents = [
            (EventType.PLAYER_HIT, {"card": str(card), "hand_value": session.player_hand.value})
        ]

        if session.player_hand.is_busted:
            pending.append((EventType.PLAYER_BUSTS, {"hand_value": session.player_hand.value}))
            return self._commit(game, "hit", self._settle(game, rng, pending), pending)

        game.draw()
        self.sessions.save_session(account, session)
        self._publish(account, pending)

        return {
            "action": "hit",
            "state": "continue",
            "dealer_cards": hand_to_string(session.dealer_hand),
            "player_cards": hand_to_string(session.player_hand),
            "draw": str(card),
        }

    @_holding_account
    def stand(self, account: str) -> Attributes:
        """Stand on the current hand and resolve the round."""
        game = self._load_round(account)
        pending: PendingEvents = [
            (EventType.PLAYER_STAND, {"hand_value": game.session.player_hand.value})
        ]
        settlement = self._settle(game, self._rng_factory(), pending)
        return self._commit(game, "stand", settlement, pending)

    @_holding_account
    def double_down(self, account: str, amount: int) -> Attributes:
        """
        Double the stake, take exactly one card and resolve.

        Raises:
            WrongDoubleDownAmountError: amount differs from the current stake
            DoubleDownNotEligibleError: the player already hit
            InsufficientBalanceError: the balance cannot cover the second stake
        """
        game = self._load_round(account)
        session = game.session

        if amount != session.total_stake:
            raise self._reject(account, WrongDoubleDownAmountError(session.total_stake))
        if not session.player_hand.can_double:
            raise self._reject(account, DoubleDownNotEligibleError())

        rng = self._rng_factory()
        with self._escrow(account, amount):
            session.total_stake += amount
            session.player_hand.add_card(draw_one(rng))
            pending: PendingEvents = [
                (
                    EventType.PLAYER_DOUBLE,
                    {"hand_value": session.player_hand.value, "new_bet": session.total_stake},
                )
            ]
            settlement = self._settle(game, rng, pending)

        return self._commit(game, "doubledown", settlement, pending)

    def act(self, account: str, command: ActionCommand) -> Attributes:
        """Dispatch a player action command."""
        if isinstance(command, Hit):
            return self.hit(account)
        if isinstance(command, Stand):
            return self.stand(account)
        if isinstance(command, DoubleDown):
            return self.double_down(account, command.amount)
        raise TypeError(f"Unknown action command: {command!r}")

    # Queries

    def get_deposit(self, account: str) -> Attributes:
        """Get the vault balance; unknown accounts report 0."""
        balance = self.ledger.may_get_balance(account)
        return {"account": account, "balance": balance or 0}

    def get_game_state(self, account: str) -> Session:
        """Get the current or last resolved round."""
        session = self.sessions.get_session(account)
        if session is None:
            raise NoActiveSessionError()
        return session

    # Internals

    def _reject(self, account: str, error: GameError) -> GameError:
        """Record a rejected operation and hand back the error to raise."""
        logger.debug("Rejected operation for %s: %s", account, error)
        self.events.emit_new(EventType.INVALID_ACTION, account, code=error.code, message=str(error))
        return error

    def _publish(self, account: str, pending: PendingEvents) -> None:
        for event_type, data in pending:
            self.events.emit_new(event_type, account, **data)

    def _load_round(self, account: str) -> Round:
        """Load a round that is waiting for an action."""
        game = Round(account, self.sessions.get_session(account))
        if game.phase != RoundPhase.IN_PROGRESS:
            raise self._reject(account, NoActiveSessionError())
        return game

    def _debit(self, account: str, amount: int) -> int:
        """Atomically take amount from the vault."""

        def take(current: int | None) -> int:
            if current is None:
                raise AccountNotFoundError(account)
            if amount > current:
                raise InsufficientBalanceError(current)
            return current - amount

        try:
            return self.ledger.try_update_balance(account, take)
        except GameError as e:
            raise self._reject(account, e) from None

    @contextmanager
    def _escrow(self, account: str, amount: int) -> Iterator[int]:
        """
        Debit a stake for the duration of the block.

        If the block raises, the stake goes back to the vault, so a failed
        operation leaves the balance as it found it.
        """
        balance_after = self._debit(account, amount)
        try:
            yield balance_after
        except BaseException:
            self.ledger.try_update_balance(account, lambda current: (current or 0) + amount)
            raise

    def _settle(self, game: Round, rng: RandomSource, pending: PendingEvents) -> Settlement:
        """Play the dealer (unless the player busted) and judge the round."""
        session = game.session

        if session.player_hand.is_busted:
            dealer_hand = session.dealer_hand
        else:
            dealer_hand = dealer_action(session.dealer_hand, rng)
            for card in dealer_hand.cards[len(session.dealer_hand):]:
                pending.append((EventType.DEALER_HITS, {"card": str(card)}))
            outcome = EventType.DEALER_BUSTS if dealer_hand.is_busted else EventType.DEALER_STANDS
            pending.append((outcome, {"hand_value": dealer_hand.value}))

        judgement = judge(dealer_hand, session.player_hand)
        result = result_of(judgement)
        return Settlement(
            dealer_hand=dealer_hand,
            judgement=judgement,
            result=result,
            balance_change=payout(result, session.total_stake),
        )

    def _commit(
        self, game: Round, action: str, settlement: Settlement, pending: PendingEvents
    ) -> Attributes:
        """Pay out and close the round; the session is saved only after the credit."""
        account = game.account
        session = game.session

        balance_after = self.ledger.try_update_balance(
            account,
            lambda current: _credit(account, current, settlement.balance_change),
        )

        session.dealer_hand = settlement.dealer_hand
        game.resolve()
        self.sessions.save_session(account, session)

        logger.info(
            "Round for %s ended: %s %s, stake %d, change %d",
            account,
            settlement.result,
            settlement.judgement,
            session.total_stake,
            settlement.balance_change,
        )
        self._publish(account, pending)
        self.events.emit_new(
            EventType.ROUND_ENDED,
            account,
            result=str(settlement.result),
            judge=str(settlement.judgement),
            balance_change=settlement.balance_change,
            balance=balance_after,
        )

        return {
            "action": action,
            "state": "end",
            "result": str(settlement.result),
            "judge": str(settlement.judgement),
            "balance_change": settlement.balance_change,
            "balance_after": balance_after,
            "dealer_cards": hand_to_string(session.dealer_hand),
            "player_cards": hand_to_string(session.player_hand),
        }


def _credit(account: str, current: int | None, amount: int) -> int:
    if current is None:
        raise AccountNotFoundError(account)
    return current + amount
