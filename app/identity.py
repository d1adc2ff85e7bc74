from __future__ import annotations

import logging

from app.api.models import Identity, Symbol
from app.core.clock import Clock, now_ms
from app.errors import InvalidSymbolError
from app.remote import RemoteStore

logger = logging.getLogger(__name__)

UNKNOWN_BROWSER = "unknown"


def detect_browser(user_agent: str | None) -> str:
    """Coarse browser family from a User-Agent string.

    Order matters: Opera and Chrome both advertise "Safari" too.
    """

    if not user_agent:
        return UNKNOWN_BROWSER
    if "OPR" in user_agent:
        return "Opera"
    if "Chrome" in user_agent:
        return "Chrome"
    if "Safari" in user_agent:
        return "Safari"
    return "Firefox"


def is_valid_symbol(user: str) -> bool:
    return user in {s.value for s in Symbol}


def make_identity(
    *,
    user: str,
    user_agent: str | None = None,
    strict: bool = False,
    clock: Clock = now_ms,
) -> Identity:
    """Build the session Identity.

    With `strict=False` any string is accepted; a non O/X symbol can then never
    take a turn. With `strict=True` it is rejected up front.
    """

    user = user.strip()
    if not is_valid_symbol(user):
        if strict:
            raise InvalidSymbolError(f"Symbol must be one of O, X (got {user!r})")
        logger.warning("Identity %r is not a play symbol; it will never be able to move", user)

    return Identity(user=user, browser=detect_browser(user_agent), timestamp=clock())


async def register_identity(*, store: RemoteStore, identity: Identity) -> bool:
    """Overwrite the store's Identity document with `identity` (last writer wins)."""

    ok = await store.write_identity(identity)
    if ok:
        logger.info("Registered identity user=%r browser=%s", identity.user, identity.browser)
    else:
        logger.warning("Store did not acknowledge identity for user=%r", identity.user)
    return ok
