"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from api.routes import accounts, game, vault
from blackjack.errors import (
    AccountBusyError,
    AccountNotFoundError,
    GameError,
    NoActiveSessionError,
    SessionAlreadyActiveError,
    UnauthorizedError,
)
from config import config

logging.basicConfig(level=config.logging.level, format=config.logging.format)
logger = logging.getLogger(__name__)

# Status codes for rejected operations; anything unlisted is a 400
ERROR_STATUS_CODES: dict[type[GameError], int] = {
    UnauthorizedError: 401,
    AccountNotFoundError: 404,
    SessionAlreadyActiveError: 409,
    NoActiveSessionError: 409,
    AccountBusyError: 409,
}

limiter = Limiter(
    key_func=get_remote_address,
    enabled=config.http.rate_limit_enabled,
    default_limits=[config.http.rate_limit],
)


def _error_response(status_code: int, detail: str, code: str, **data) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail, "code": code, **data})


def _rate_limited_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.debug("Rate limit hit by %s: %s", get_remote_address(request), exc.detail)
    return _error_response(429, f"Rate limit exceeded: {exc.detail}", "rate_limited")


def _game_error_handler(request: Request, exc: GameError) -> JSONResponse:
    """Translate a rejected operation into an error response."""
    status_code = ERROR_STATUS_CODES.get(type(exc), 400)
    return _error_response(status_code, str(exc), exc.code, **exc.data)


app = FastAPI(
    title="Blackjack Vault",
    description="Blackjack against an automated dealer, staked from a custodial vault",
    version="0.1.0",
    debug=config.debug,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limited_handler)
app.add_exception_handler(GameError, _game_error_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.http.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "X-Account-Token", "X-Transfer-Notice"],
)


@app.get("/api/health")
@limiter.limit(config.http.rate_limit)
async def health_check(request: Request) -> dict[str, str]:
    return {"status": "healthy"}


app.include_router(accounts.router, prefix="/api/accounts", tags=["accounts"])
app.include_router(vault.router, prefix="/api/vault", tags=["vault"])
app.include_router(game.router, prefix="/api/game", tags=["game"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=config.host, port=config.port, log_level=config.logging.level.lower())
