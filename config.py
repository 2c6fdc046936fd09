"""Configuration management with environment variable support."""

import os
import secrets
from dataclasses import dataclass, field


def _env_str(name: str, default: str) -> str:
    return os.getenv(name, default)


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> list[str]:
    """Split a comma separated variable, dropping empty items."""
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


@dataclass(frozen=True)
class VaultConfig:
    """Vault settings fixed when the table is set up."""

    # Only this caller may credit deposits; unset disables deposits
    token_address: str | None = field(default_factory=lambda: os.getenv("VAULT_TOKEN_ADDRESS"))
    # Shared with the token contract, which signs every transfer notice
    token_secret: str = field(
        default_factory=lambda: _env_str("VAULT_TOKEN_SECRET", secrets.token_urlsafe(32))
    )
    transfer_ttl: int = field(default_factory=lambda: _env_int("VAULT_TRANSFER_TTL", 300))


@dataclass(frozen=True)
class RedisConfig:
    """Where ledger balances and sessions are persisted."""

    enabled: bool = field(default_factory=lambda: _env_bool("REDIS_ENABLED", True))
    host: str = field(default_factory=lambda: _env_str("REDIS_HOST", "localhost"))
    port: int = field(default_factory=lambda: _env_int("REDIS_PORT", 6379))
    db: int = field(default_factory=lambda: _env_int("REDIS_DB", 0))
    password: str | None = field(default_factory=lambda: os.getenv("REDIS_PASSWORD"))
    key_prefix: str = "blackjack:"
    # Seconds an account lock lives, and how long a caller waits for it
    lock_timeout: float = field(default_factory=lambda: _env_float("REDIS_LOCK_TIMEOUT", 10.0))
    lock_wait: float = field(default_factory=lambda: _env_float("REDIS_LOCK_WAIT", 5.0))

    @property
    def url(self) -> str:
        """Build Redis connection URL."""
        auth = f":{self.password}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"


@dataclass(frozen=True)
class LogConfig:
    level: str = field(default_factory=lambda: _env_str("LOG_LEVEL", "INFO").upper())
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class HTTPConfig:
    """CORS and rate limiting for the HTTP surface."""

    cors_origins: list[str] = field(
        default_factory=lambda: _env_list("CORS_ORIGINS", "http://localhost:8000")
    )
    rate_limit_enabled: bool = field(default_factory=lambda: _env_bool("RATE_LIMIT_ENABLED", True))
    requests_per_minute: int = field(default_factory=lambda: _env_int("RATE_LIMIT_RPM", 60))

    @property
    def rate_limit(self) -> str:
        return f"{self.requests_per_minute}/minute"


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: _env_bool("DEBUG", False))
    host: str = field(default_factory=lambda: _env_str("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: _env_int("PORT", 8000))
    # Signs account tokens; a random key invalidates tokens on restart
    secret_key: str = field(default_factory=lambda: _env_str("SECRET_KEY", secrets.token_urlsafe(32)))
    account_token_ttl: int = field(default_factory=lambda: _env_int("ACCOUNT_TOKEN_TTL", 86400))

    vault: VaultConfig = field(default_factory=VaultConfig)
    redis: RedisConfig = field(default_factory=RedisConfig)
    http: HTTPConfig = field(default_factory=HTTPConfig)
    logging: LogConfig = field(default_factory=LogConfig)


# Global configuration instance
config = AppConfig()
