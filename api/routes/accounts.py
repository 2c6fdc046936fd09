"""Account token endpoint."""

from fastapi import APIRouter

from api.auth import get_account_signer
from api.schemas import AccountTokenRequest, AccountTokenResponse

router = APIRouter()


@router.post("/token")
async def issue_token(request: AccountTokenRequest) -> AccountTokenResponse:
    """Issue a signed token identifying the account on later calls."""
    token = get_account_signer().sign(request.account)
    return AccountTokenResponse(account=request.account, token=token)
