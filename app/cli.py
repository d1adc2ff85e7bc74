from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import sys

from app.api.models import GameState
from app.config import Settings, load_dotenv_if_present, settings_from_env
from app.errors import InvalidSymbolError
from app.identity import make_identity
from app.remote import HttpRemoteStore
from app.render import render
from app.sync import GameSession, SyncConfig

logger = logging.getLogger(__name__)

HELP = "Commands: c = control button, 0-15 = place in cell, q = quit"


def _serve(settings: Settings) -> int:
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    return 0


async def _read_line() -> str:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, sys.stdin.readline)


async def _play(settings: Settings, *, server_url: str, symbol: str | None, strict: bool) -> int:
    if symbol is None:
        print("Enter your symbol: O or X")
        symbol = (await _read_line()).strip()

    try:
        # No browser in a terminal session; the label falls back to "unknown".
        identity = make_identity(user=symbol, user_agent=None, strict=strict)
    except InvalidSymbolError as e:
        print(str(e), file=sys.stderr)
        return 2

    def _show(state: GameState) -> None:
        print(render(state, identity), flush=True)

    logger.info("Joining %s as %r", server_url, identity.user)
    store = HttpRemoteStore.from_url(server_url, timeout_s=settings.store_timeout_s)
    session = GameSession(
        store=store,
        identity=identity,
        config=SyncConfig(interval_s=settings.poll_interval_s, timeout_s=settings.store_timeout_s),
        on_change=_show,
    )

    stop = asyncio.Event()
    poller: asyncio.Task[None] | None = None
    try:
        await session.start()
        poller = asyncio.create_task(session.run(stop=stop))
        print(HELP)

        while True:
            line = await _read_line()
            if not line:
                break
            cmd = line.strip().lower()
            if cmd in {"q", "quit", "exit"}:
                break
            if cmd in {"c", "control"}:
                await session.control()
            elif cmd.isdigit():
                await session.click(int(cmd))
            elif cmd:
                print(HELP)
    finally:
        stop.set()
        if poller is not None:
            # The loop may be mid-poll; it holds no unsaved state.
            poller.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await poller
        await store.aclose()
    return 0


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="four-in-a-row", description="Four-in-a-row on a shared 4x4 board.")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("serve", help="Run the blob store server.")

    play = sub.add_parser("play", help="Join the shared game from the terminal.")
    play.add_argument("--server", default=settings.server_url, help="Server base URL.")
    play.add_argument("--symbol", default=None, help="O or X (prompted when omitted).")
    play.add_argument(
        "--strict",
        action="store_true",
        default=settings.strict_symbols,
        help="Reject symbols other than O and X.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv_if_present()
    settings = settings_from_env()
    logging.basicConfig(level=settings.log_level)

    args = build_parser(settings).parse_args(argv)
    if args.command == "serve":
        return _serve(settings)
    return asyncio.run(_play(settings, server_url=args.server, symbol=args.symbol, strict=args.strict))


if __name__ == "__main__":
    raise SystemExit(main())
