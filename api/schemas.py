"""Pydantic schemas for API requests and responses."""

from typing import Literal

from pydantic import BaseModel, Field, model_validator


# Account schemas
class AccountTokenRequest(BaseModel):
    """Request a signed token for an account."""

    account: str = Field(..., min_length=1, max_length=128)


class AccountTokenResponse(BaseModel):
    account: str
    token: str


# Vault schemas
class DepositRequest(BaseModel):
    """Tokens transferred in by the token contract on behalf of an account."""

    account: str = Field(..., min_length=1, max_length=128)
    amount: int = Field(..., ge=1, description="Tokens received")


class DepositReceipt(BaseModel):
    action: Literal["deposit"]
    amount: int = Field(..., description="Balance after the deposit")


class WithdrawRequest(BaseModel):
    amount: int = Field(..., ge=1, description="Tokens to withdraw")


class WithdrawResponse(BaseModel):
    action: Literal["withdraw"]
    amount: int
    balance_after: int


class DepositResponse(BaseModel):
    """Vault balance of an account."""

    account: str
    balance: int


# Game schemas
class BetRequest(BaseModel):
    """Request to place a bet."""

    amount: int = Field(..., ge=1, description="Bet amount")


class BetResponse(BaseModel):
    action: Literal["bet"]
    bet_amount: int
    balance_after: int
    dealer_cards: str
    player_cards: str


class ActionRequest(BaseModel):
    """Request for player action."""

    action: Literal["hit", "stand", "double_down"]
    amount: int | None = Field(default=None, ge=1, description="Double down stake")

    @model_validator(mode="after")
    def _amount_for_double_down(self) -> "ActionRequest":
        if self.action == "double_down" and self.amount is None:
            raise ValueError("double_down requires an amount")
        return self


class ActionResponse(BaseModel):
    """Result of a player action; resolution fields are set once the round ends."""

    action: Literal["hit", "stand", "doubledown"]
    state: Literal["continue", "end"]
    dealer_cards: str
    player_cards: str
    draw: str | None = None
    result: Literal["win", "lose", "draw"] | None = None
    judge: str | None = None
    balance_change: int | None = None
    balance_after: int | None = None


class HandResponse(BaseModel):
    """Hand representation."""

    cards: list[str]
    value: int
    is_blackjack: bool
    is_busted: bool


class GameStateResponse(BaseModel):
    """Current or last resolved round."""

    in_progress: bool
    total_stake: int
    dealer_hand: HandResponse
    player_hand: HandResponse


class ErrorResponse(BaseModel):
    detail: str
    code: str
