"""
ledger.types.assets — per-asset aggregate records.

* `AssetDetails`        fungible asset: owner + total supply
* `AssetMetadata`       fungible asset: name + symbol, stored separately
* `UniqueAssetDetails`  unique asset: creator + supply + metadata blob

Records are frozen; stores replace them wholesale (`dataclasses.replace`), so a
failed mutation can never leave a half-updated record behind. `owner` has no
setter by construction.

Byte fields are bounded by the ledger's `max_length`; the bound is checked by
`require_bounded()` at the call boundary, not in `__post_init__`, because the
limit is per-ledger configuration rather than a property of the type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Hashable

from ..errors import TooLong
from .numeric import U128_MAX, is_u128

AccountId = Hashable
"""Opaque caller identity. The ledger only hashes and compares it."""


def account_repr(account: AccountId) -> Any:
    """JSON-friendly rendering of an account id (bytes → 0x-hex)."""
    if isinstance(account, (bytes, bytearray, memoryview)):
        return "0x" + bytes(account).hex()
    if isinstance(account, (str, int)):
        return account
    return str(account)


def require_account(name: str, value: Any) -> AccountId:
    """Account ids key the balance map, so they must be hashable."""
    try:
        hash(value)
    except TypeError:
        raise TypeError(f"{name} must be a hashable account id, got {type(value).__name__}") from None
    return value


def require_bytes(name: str, value: Any) -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"{name} must be bytes-like, got {type(value).__name__}")
    return bytes(value)


def require_bounded(name: str, value: Any, max_length: int) -> bytes:
    """
    Coerce `value` to bytes and enforce `len(value) <= max_length`.

    Raises:
        TypeError if not bytes-like.
        TooLong   if longer than `max_length`.
    """
    b = require_bytes(name, value)
    if len(b) > max_length:
        raise TooLong(
            f"{name} exceeds max length ({len(b)} > {max_length})",
            field_name=name,
            length=len(b),
            max_length=max_length,
        )
    return b


def _check_supply(supply: int) -> int:
    if not is_u128(supply):
        raise ValueError(f"supply must be within [0, {U128_MAX}]")
    return supply


# --------------------------------------------------------------------------- #
# Fungible
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class AssetDetails:
    """
    Aggregate state of a fungible asset.

    Invariants:
    - supply is u128
    - supply == sum of all balances recorded for the asset (kept by the runtime)
    """
    owner: AccountId
    supply: int = 0

    def __post_init__(self) -> None:
        _check_supply(self.supply)

    def to_dict(self) -> Dict[str, Any]:
        return {"owner": account_repr(self.owner), "supply": self.supply}


@dataclass(frozen=True, slots=True)
class AssetMetadata:
    name: bytes
    symbol: bytes

    def to_dict(self) -> Dict[str, Any]:
        return {"name": "0x" + self.name.hex(), "symbol": "0x" + self.symbol.hex()}


# --------------------------------------------------------------------------- #
# Unique
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UniqueAssetDetails:
    """
    Aggregate state of a unique asset. The metadata blob is set once at mint
    and lives inside the record; there is no separate metadata store.
    """
    creator: AccountId
    supply: int
    metadata: bytes = b""

    def __post_init__(self) -> None:
        _check_supply(self.supply)

    @property
    def owner(self) -> AccountId:
        return self.creator

    def to_dict(self) -> Dict[str, Any]:
        return {
            "creator": account_repr(self.creator),
            "supply": self.supply,
            "metadata": "0x" + self.metadata.hex(),
        }


__all__ = [
    "AccountId",
    "AssetDetails",
    "AssetMetadata",
    "UniqueAssetDetails",
    "account_repr",
    "require_account",
    "require_bytes",
    "require_bounded",
]
