from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from app.infra.redis_client import get_redis_url


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class Settings:
    redis_url: str
    server_url: str
    host: str
    port: int
    poll_interval_s: float
    store_timeout_s: float
    # Reject identities whose symbol is not O/X instead of letting them spectate.
    strict_symbols: bool
    log_level: str


def settings_from_env() -> Settings:
    return Settings(
        redis_url=get_redis_url(),
        server_url=os.environ.get("FOUR_IN_ROW_SERVER_URL", "http://127.0.0.1:3000"),
        host=os.environ.get("FOUR_IN_ROW_HOST", "127.0.0.1"),
        port=int(os.environ.get("PORT", "3000")),
        poll_interval_s=float(os.environ.get("FOUR_IN_ROW_POLL_INTERVAL_S", "1.0")),
        store_timeout_s=float(os.environ.get("FOUR_IN_ROW_STORE_TIMEOUT_S", "5.0")),
        strict_symbols=_env_bool("FOUR_IN_ROW_STRICT_SYMBOLS"),
        log_level=os.environ.get("FOUR_IN_ROW_LOG_LEVEL", "INFO").upper(),
    )


def load_dotenv_if_present(*, project_root: Path | None = None) -> bool:
    """Load `.env` from the project root without overriding the real environment."""

    root = project_root or Path(__file__).resolve().parents[1]
    env_path = root / ".env"
    if not env_path.exists():
        return False

    from dotenv import load_dotenv

    return load_dotenv(dotenv_path=env_path, override=False)
