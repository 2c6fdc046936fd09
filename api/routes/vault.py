"""Vault API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Header

from api.auth import get_transfer_signer
from api.deps import AccountDep, TableDep
from api.schemas import (
    DepositReceipt,
    DepositRequest,
    DepositResponse,
    WithdrawRequest,
    WithdrawResponse,
)
from blackjack.errors import UnauthorizedError

router = APIRouter()


@router.post("/deposit")
def deposit(
    request: DepositRequest,
    table: TableDep,
    notice: Annotated[str | None, Header(alias="X-Transfer-Notice")] = None,
) -> DepositReceipt:
    """Credit a deposit reported by the token contract in a signed notice."""
    sender = None
    if notice is not None:
        sender = get_transfer_signer().verified_sender(notice, request.account, request.amount)
    if sender is None:
        raise UnauthorizedError("Missing or invalid transfer notice")
    return DepositReceipt(**table.deposit(sender, request.account, request.amount))


@router.post("/withdraw")
def withdraw(request: WithdrawRequest, account: AccountDep, table: TableDep) -> WithdrawResponse:
    """Withdraw from the caller's vault."""
    return WithdrawResponse(**table.withdraw(account, request.amount))


@router.get("/{account}")
def get_deposit(account: str, table: TableDep) -> DepositResponse:
    """Get an account's vault balance."""
    return DepositResponse(**table.get_deposit(account))
