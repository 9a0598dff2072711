"""
ledger.errors — typed exceptions raised by the asset ledger.

Every rejected operation raises one of these *before* touching state, so a
caught error always means "nothing happened". The classes are pure-Python and
import nothing from the rest of the package, which lets the numeric helpers,
stores and runtimes all raise them without cycles.

Hierarchy
---------
LedgerError (base)
 ├─ UnknownAssetId     : asset id absent from the registry
 ├─ NoPermission       : caller is not the asset owner where ownership is required
 ├─ NotOwned           : caller holds nothing of a unique asset it tries to move/burn
 ├─ NoSupply           : unique mint requested with supply == 0
 ├─ TooLong            : name/symbol/metadata longer than the configured bound
 ├─ InvalidAmount      : amount is not an integer in the u128 range
 ├─ NonceExhausted     : id allocator at its maximum with the "error" policy
 ├─ AssetIdCollision   : registry insert on an id that already exists (program bug)
 └─ InvariantViolation : supply audit found supply != sum of balances

None of these are retryable: each is a precondition failure that will recur
until the caller changes its arguments.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class LedgerError(Exception):
    """
    Base ledger error.

    Attributes:
        message: Human-readable explanation.
        code:    Stable machine code string (e.g. 'UNKNOWN_ASSET_ID').
        data:    Optional structured details (kept JSON-serializable).
    """
    message: str = "ledger error"
    code: str = "LEDGER_ERROR"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for logs and host error payloads."""
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


def _merge(data: Optional[Dict[str, Any]], **fields: Any) -> Optional[Dict[str, Any]]:
    d: Dict[str, Any] = dict(data or {})
    for k, v in fields.items():
        if v is not None:
            d.setdefault(k, v)
    return d or None


class UnknownAssetId(LedgerError):
    """The asset id is unknown to the registry."""

    def __init__(
        self,
        message: str = "unknown asset id",
        *,
        asset_id: Optional[int] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message, code="UNKNOWN_ASSET_ID", data=_merge(data, asset_id=asset_id)
        )


class NoPermission(LedgerError):
    """The calling account has no permission to perform the operation."""

    def __init__(
        self,
        message: str = "caller is not the asset owner",
        *,
        asset_id: Optional[int] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message, code="NO_PERMISSION", data=_merge(data, asset_id=asset_id)
        )


class NotOwned(LedgerError):
    """The calling account does not own any amount of this asset."""

    def __init__(
        self,
        message: str = "caller holds none of this asset",
        *,
        asset_id: Optional[int] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message, code="NOT_OWNED", data=_merge(data, asset_id=asset_id)
        )


class NoSupply(LedgerError):
    """Supply must be positive."""

    def __init__(self, message: str = "supply must be positive", *, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="NO_SUPPLY", data=data)


class TooLong(LedgerError):
    """
    A bounded byte field exceeds the configured maximum length.

    `field_name` names the offending argument ('name', 'symbol', 'metadata').
    """

    def __init__(
        self,
        message: str = "value exceeds max length",
        *,
        field_name: Optional[str] = None,
        length: Optional[int] = None,
        max_length: Optional[int] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code="TOO_LONG",
            data=_merge(data, field=field_name, length=length, max_length=max_length),
        )


class InvalidAmount(LedgerError):
    """Amount or supply argument is not an integer within [0, U128_MAX]."""

    def __init__(self, message: str = "invalid amount", *, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="INVALID_AMOUNT", data=data)


class NonceExhausted(LedgerError):
    """The identifier allocator reached its maximum and is configured to refuse."""

    def __init__(self, message: str = "asset id space exhausted", *, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="NONCE_EXHAUSTED", data=data)


class AssetIdCollision(LedgerError):
    """
    A registry insert found the id already present.

    Ids come straight from the allocator, so this signals a saturated nonce or a
    host that shares one registry between allocators. It is never a user error.
    """

    def __init__(
        self,
        message: str = "asset id already registered",
        *,
        asset_id: Optional[int] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message, code="ASSET_ID_COLLISION", data=_merge(data, asset_id=asset_id)
        )


class InvariantViolation(LedgerError):
    """Recorded supply disagrees with the balances stored for an asset."""

    def __init__(self, message: str = "supply invariant violated", *, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="INVARIANT_VIOLATION", data=data)


# -------- helper utilities ---------------------------------------------------


def error_to_result_fields(err: LedgerError) -> Dict[str, Any]:
    """
    Map a LedgerError to result-like fields a host can attach to its receipts.

    Returns:
        {
          "status": "REJECTED" | "FAULT",
          "error":  {code, message, data?}
        }

    Collisions and invariant violations are reported as FAULT because they
    point at a broken host or store, not at bad call arguments.
    """
    status = "FAULT" if isinstance(err, (AssetIdCollision, InvariantViolation)) else "REJECTED"
    return {"status": status, "error": err.to_dict()}


__all__ = [
    "LedgerError",
    "UnknownAssetId",
    "NoPermission",
    "NotOwned",
    "NoSupply",
    "TooLong",
    "InvalidAmount",
    "NonceExhausted",
    "AssetIdCollision",
    "InvariantViolation",
    "error_to_result_fields",
]
