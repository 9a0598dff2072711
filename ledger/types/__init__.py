"""
ledger.types — value types shared by the stores and runtimes.

- numeric: u128/u32 bounds and saturating arithmetic
- assets:  AssetDetails, AssetMetadata, UniqueAssetDetails, AccountId
- events:  domain events (Created, MetadataSet, Minted, Burned, Transferred)
"""

from __future__ import annotations

from .assets import (AccountId, AssetDetails, AssetMetadata,
                     UniqueAssetDetails)
from .events import (Burned, Created, LedgerEvent, MetadataSet, Minted,
                     Transferred, UniqueCreated)
from .numeric import (ASSET_ID_MAX, U128_MAX, AssetId, Balance,
                      saturating_add, saturating_sub)

__all__ = [
    "AccountId",
    "AssetId",
    "Balance",
    "AssetDetails",
    "AssetMetadata",
    "UniqueAssetDetails",
    "LedgerEvent",
    "Created",
    "UniqueCreated",
    "MetadataSet",
    "Minted",
    "Burned",
    "Transferred",
    "ASSET_ID_MAX",
    "U128_MAX",
    "saturating_add",
    "saturating_sub",
]
