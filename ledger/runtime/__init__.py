"""
ledger.runtime — the two asset-class ledgers.

- fungible: FungibleAssets (create / set_metadata / mint / burn / transfer)
- unique:   UniqueAssets (mint / burn / transfer)
- base:     shared lock, stores, event emission and supply audit
"""

from __future__ import annotations

from .base import LedgerBase, SupplyMismatch
from .fungible import FungibleAssets
from .unique import UniqueAssets

__all__ = ["LedgerBase", "SupplyMismatch", "FungibleAssets", "UniqueAssets"]
