"""Game API endpoints."""

from fastapi import APIRouter, HTTPException

from api.deps import AccountDep, TableDep
from api.schemas import (
    ActionRequest,
    ActionResponse,
    BetRequest,
    BetResponse,
    GameStateResponse,
    HandResponse,
)
from blackjack.errors import NoActiveSessionError
from blackjack.game import ActionCommand, DoubleDown, Hit, Stand
from blackjack.hand import Hand

router = APIRouter()


def _hand_to_response(hand: Hand) -> HandResponse:
    """Convert a Hand to HandResponse."""
    return HandResponse(
        cards=[str(card) for card in hand.cards],
        value=hand.value,
        is_blackjack=hand.is_blackjack,
        is_busted=hand.is_busted,
    )


def _to_command(request: ActionRequest) -> ActionCommand:
    """Convert an action request to an engine command."""
    if request.action == "hit":
        return Hit()
    if request.action == "stand":
        return Stand()
    return DoubleDown(amount=request.amount)  # type: ignore[arg-type]


@router.post("/bet")
def place_bet(request: BetRequest, account: AccountDep, table: TableDep) -> BetResponse:
    """Place a bet and deal cards."""
    return BetResponse(**table.bet(account, request.amount))


@router.post("/action")
def player_action(request: ActionRequest, account: AccountDep, table: TableDep) -> ActionResponse:
    """Execute a player action."""
    return ActionResponse(**table.act(account, _to_command(request)))


@router.get("/{account}")
def get_state(account: str, table: TableDep) -> GameStateResponse:
    """Get the current or last resolved round of an account."""
    try:
        session = table.get_game_state(account)
    except NoActiveSessionError:
        raise HTTPException(status_code=404, detail=f"No game for {account}") from None

    return GameStateResponse(
        in_progress=session.in_progress,
        total_stake=session.total_stake,
        dealer_hand=_hand_to_response(session.dealer_hand),
        player_hand=_hand_to_response(session.player_hand),
    )
