"""
ledger.state — storage layer behind the ledger runtimes.

Submodules:
- nonce:     per-class asset id allocator
- balances:  (asset id, account) → balance map
- registry:  asset id → aggregate record; fungible metadata store
- events:    event sink backends

Common symbols are lazily re-exported from their submodules on first access.
"""

from __future__ import annotations

from importlib import import_module as _imp
from typing import Any, Dict, Tuple

# Map of public attributes → (submodule, symbol)
_exports: Dict[str, Tuple[str, str]] = {
    "IdAllocator": ("nonce", "IdAllocator"),
    "BalanceStore": ("balances", "BalanceStore"),
    "AssetRegistry": ("registry", "AssetRegistry"),
    "MetadataStore": ("registry", "MetadataStore"),
    # Events
    "EventRecord": ("events", "EventRecord"),
    "EventSink": ("events", "EventSink"),
    "InMemoryEventSink": ("events", "InMemoryEventSink"),
    "NullEventSink": ("events", "NullEventSink"),
    "LoggingEventSink": ("events", "LoggingEventSink"),
}

__all__ = tuple(_exports.keys())


def __getattr__(name: str) -> Any:
    if name in _exports:
        submod, symbol = _exports[name]
        mod = _imp(f"{__name__}.{submod}")
        return getattr(mod, symbol)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:  # pragma: no cover
    return sorted(list(globals().keys()) + list(__all__))
