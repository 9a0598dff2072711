"""
ledger.types.numeric — Balance/AssetId bounds and saturating arithmetic.

Balances and supplies are u128; asset ids are u32. Python ints are unbounded,
so the bounds are enforced explicitly and every ledger mutation goes through
the saturating helpers below: results are clamped to [0, cap] instead of
wrapping or raising.

Exports
-------
* Types: `Balance`, `AssetId`
* Constants: `U128_MAX`, `U32_MAX`, `ASSET_ID_MAX`
* Validation: `is_u128()`, `to_amount()`, `is_asset_id()`, `to_asset_id()`
* Arithmetic:
    - `saturating_add(a, b, cap=...)`  → min(a + b, cap)
    - `saturating_sub(a, b)`           → max(a - b, 0)
"""

from __future__ import annotations

from typing import Any, NewType

from ..errors import InvalidAmount, UnknownAssetId

# ------------------------------- constants -----------------------------------

U128_MAX: int = (1 << 128) - 1
U32_MAX: int = (1 << 32) - 1

ASSET_ID_MAX: int = U32_MAX
"""Largest allocatable asset id."""


# --------------------------------- types -------------------------------------

Balance = NewType("Balance", int)
AssetId = NewType("AssetId", int)


# --------------------------------- utils -------------------------------------


def is_u128(n: Any) -> bool:
    """Return True iff `n` is a (non-bool) int with 0 <= n <= U128_MAX."""
    return isinstance(n, int) and not isinstance(n, bool) and 0 <= n <= U128_MAX


def to_amount(n: Any, *, name: str = "amount") -> Balance:
    """
    Validate a caller-supplied amount. Raises InvalidAmount unless `n` is a
    u128 integer. `bool` is rejected even though it subclasses int.
    """
    if not is_u128(n):
        raise InvalidAmount(
            f"{name} must be an integer in [0, 2**128 - 1]",
            data={"field": name, "value": repr(n)[:64]},
        )
    return Balance(n)


def is_asset_id(n: Any) -> bool:
    """Return True iff `n` is a (non-bool) int with 0 <= n <= ASSET_ID_MAX."""
    return isinstance(n, int) and not isinstance(n, bool) and 0 <= n <= ASSET_ID_MAX


def to_asset_id(n: Any) -> AssetId:
    """
    Validate a caller-supplied asset id. Raises UnknownAssetId unless `n` is a
    u32 integer, so `True` or `0.0` can never stand in for asset 1 or 0.
    """
    if not is_asset_id(n):
        raise UnknownAssetId(
            "asset id must be an integer in [0, 2**32 - 1]",
            data={"value": repr(n)[:64]},
        )
    return AssetId(n)


def _ensure_nonneg_int(n: int) -> int:
    if not isinstance(n, int):
        raise TypeError(f"expected int, got {type(n).__name__}")
    if n < 0:
        raise ValueError("value must be non-negative")
    return n


# ------------------------------ arithmetic -----------------------------------


def saturating_add(a: int, b: int, *, cap: int = U128_MAX) -> int:
    """
    Saturating addition. Returns min(a + b, cap).
    """
    _ensure_nonneg_int(a)
    _ensure_nonneg_int(b)
    s = a + b
    return cap if s > cap else s


def saturating_sub(a: int, b: int) -> int:
    """
    Saturating subtraction. Returns max(a - b, 0).
    """
    _ensure_nonneg_int(a)
    _ensure_nonneg_int(b)
    return a - b if a >= b else 0


__all__ = [
    "Balance",
    "AssetId",
    "U128_MAX",
    "U32_MAX",
    "ASSET_ID_MAX",
    "is_u128",
    "to_amount",
    "is_asset_id",
    "to_asset_id",
    "saturating_add",
    "saturating_sub",
]
