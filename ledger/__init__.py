"""
Animica asset ledger — fungible and unique asset accounting.

Two ledger classes track who owns how much of which asset:

- FungibleAssets: owner-created multi-holder assets (create / set_metadata /
  mint / burn / transfer)
- UniqueAssets:   supply-tracked assets minted whole by their creator
  (mint / burn / transfer)

Balances and supply saturate instead of overflowing; every rejected call raises
a `LedgerError` before touching state; every successful call emits exactly one
event through the configured `EventSink`.

Only metadata is imported eagerly; the public classes are re-exported lazily.
"""

from __future__ import annotations

from importlib import import_module as _imp
from typing import Any, Dict, Tuple

from .version import __version__, git_describe

_exports: Dict[str, Tuple[str, str]] = {
    "FungibleAssets": ("runtime.fungible", "FungibleAssets"),
    "UniqueAssets": ("runtime.unique", "UniqueAssets"),
    "SupplyMismatch": ("runtime.base", "SupplyMismatch"),
    "LedgerConfig": ("config", "LedgerConfig"),
    "load_config": ("config", "load_config"),
    "LedgerError": ("errors", "LedgerError"),
    "EventSink": ("state.events", "EventSink"),
    "InMemoryEventSink": ("state.events", "InMemoryEventSink"),
    "NullEventSink": ("state.events", "NullEventSink"),
    "LoggingEventSink": ("state.events", "LoggingEventSink"),
}

__all__ = tuple(["__version__", "git_describe", *_exports.keys()])


def __getattr__(name: str) -> Any:
    if name in _exports:
        submod, symbol = _exports[name]
        mod = _imp(f"{__name__}.{submod}")
        return getattr(mod, symbol)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:  # pragma: no cover
    return sorted(list(globals().keys()) + list(__all__))
