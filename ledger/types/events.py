"""
ledger.types.events — domain events emitted by the ledger runtimes.

One event is emitted per successful state transition:

    fungible ("assets")            unique ("nft")
    -------------------            --------------
    Created{owner, asset_id}       Created{creator, asset_id}
    MetadataSet{asset_id, name, symbol}
    Minted{asset_id, owner, total_supply}
    Burned{asset_id, owner, total_supply}    (both classes)
    Transferred{asset_id, from, to, amount}  (both classes)

`amount` on Transferred is what actually moved after saturation, not what was
requested. `owner` on Minted is the *recipient* of the new units.

Events are frozen dataclasses; `to_dict()` renders a JSON-friendly mapping with
the canonical field names (note `from_` → "from").
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, ClassVar, Dict

from .assets import AccountId, account_repr


@dataclass(frozen=True)
class LedgerEvent:
    """Base class; subclasses set NAME."""

    NAME: ClassVar[str] = "Event"

    def to_dict(self) -> Dict[str, Any]:
        args: Dict[str, Any] = {}
        for f in fields(self):
            v = getattr(self, f.name)
            key = f.name.rstrip("_")
            if isinstance(v, (bytes, bytearray)):
                args[key] = "0x" + bytes(v).hex()
            elif f.name in ("owner", "creator", "from_", "to"):
                args[key] = account_repr(v)
            else:
                args[key] = v
        return {"name": self.NAME, "args": args}


@dataclass(frozen=True)
class Created(LedgerEvent):
    """New fungible asset created."""

    NAME: ClassVar[str] = "Created"
    owner: AccountId
    asset_id: int


@dataclass(frozen=True)
class UniqueCreated(LedgerEvent):
    """New unique asset minted into existence."""

    NAME: ClassVar[str] = "Created"
    creator: AccountId
    asset_id: int


@dataclass(frozen=True)
class MetadataSet(LedgerEvent):
    NAME: ClassVar[str] = "MetadataSet"
    asset_id: int
    name: bytes
    symbol: bytes


@dataclass(frozen=True)
class Minted(LedgerEvent):
    NAME: ClassVar[str] = "Minted"
    asset_id: int
    owner: AccountId
    total_supply: int


@dataclass(frozen=True)
class Burned(LedgerEvent):
    NAME: ClassVar[str] = "Burned"
    asset_id: int
    owner: AccountId
    total_supply: int


@dataclass(frozen=True)
class Transferred(LedgerEvent):
    NAME: ClassVar[str] = "Transferred"
    asset_id: int
    from_: AccountId
    to: AccountId
    amount: int


__all__ = [
    "LedgerEvent",
    "Created",
    "UniqueCreated",
    "MetadataSet",
    "Minted",
    "Burned",
    "Transferred",
]
