from __future__ import annotations


class StoreUnavailableError(RuntimeError):
    """A read or write against the blob store failed, timed out, or returned garbage."""


class InvalidSymbolError(ValueError):
    """A participant declared a symbol other than "O" or "X" while strict mode is on."""
