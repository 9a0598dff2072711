"""
ledger.runtime.fungible — multi-holder fungible asset class ("assets").

Operations
----------
create(caller) -> asset_id
set_metadata(caller, asset_id, name, symbol)
mint(caller, asset_id, amount, to) -> minted
burn(caller, asset_id, amount) -> burnt
transfer(caller, asset_id, amount, to) -> moved

Supply and balances saturate at [0, U128_MAX]. The returned amount is what
actually changed hands after clamping; it is also what the event reports.
Burn and transfer never fail for lack of funds: they move whatever the caller
holds, up to `amount`.

Whether `mint` requires caller == owner is a config switch
(`LedgerConfig.enforce_mint_owner`, on by default).
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, MutableMapping, Optional

from ..errors import NoPermission
from ..state.events import SOURCE_FUNGIBLE
from ..state.registry import MetadataStore
from ..types.assets import (AccountId, AssetDetails, AssetMetadata,
                            account_repr, require_account,
                            require_bounded)
from ..types.events import Burned, Created, MetadataSet, Minted, Transferred
from ..types.numeric import (AssetId, is_asset_id, saturating_add,
                             to_amount, to_asset_id)
from .base import LedgerBase


class FungibleAssets(LedgerBase):
    SOURCE = SOURCE_FUNGIBLE

    def __init__(
        self,
        *,
        metadata_backing: Optional[MutableMapping[int, AssetMetadata]] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._metadata = MetadataStore(metadata_backing)

    # ---------------------------------------------------------------- mutations

    def create(self, caller: AccountId) -> AssetId:
        """Register a new asset owned by `caller` with zero supply."""
        with self._op("create", caller):
            asset_id = self._reserve_id()
            details = AssetDetails(owner=caller)

            def apply() -> None:
                self._ids.next_id()
                self._registry.insert(asset_id, details)

            self._commit(Created(owner=caller, asset_id=asset_id), apply)
            self._log.info(
                "asset created",
                extra={"asset_id": asset_id, "caller": account_repr(caller)},
            )
            return asset_id

    def set_metadata(self, caller: AccountId, asset_id: int, name: bytes, symbol: bytes) -> None:
        """
        Overwrite the asset's name and symbol. Owner only.

        Raises:
            UnknownAssetId, NoPermission, TooLong (checked in that order).
        """
        with self._op("set_metadata", caller):
            asset_id = to_asset_id(asset_id)
            details = self._registry.require(asset_id)
            if details.owner != caller:
                raise NoPermission(asset_id=asset_id)
            limit = self.config.max_length
            meta = AssetMetadata(
                name=require_bounded("name", name, limit),
                symbol=require_bounded("symbol", symbol, limit),
            )

            self._commit(
                MetadataSet(asset_id=asset_id, name=meta.name, symbol=meta.symbol),
                lambda: self._metadata.set(asset_id, meta),
            )
            self._log.debug("metadata set", extra={"asset_id": asset_id})

    def mint(self, caller: AccountId, asset_id: int, amount: int, to: AccountId) -> int:
        """
        Issue up to `amount` new units to `to`. Returns the units actually
        minted, which is less than `amount` only when supply hits U128_MAX.
        """
        with self._op("mint", caller):
            amount = to_amount(amount)
            require_account("to", to)
            asset_id = to_asset_id(asset_id)
            details = self._registry.require(asset_id)
            if self.config.enforce_mint_owner and details.owner != caller:
                raise NoPermission(asset_id=asset_id)

            updated = replace(details, supply=saturating_add(details.supply, amount))
            minted = updated.supply - details.supply
            # balance <= supply <= U128_MAX, so this credit cannot clamp
            credit = saturating_add(self._balances.get(asset_id, to), minted)

            def apply() -> None:
                self._registry.try_mutate(asset_id, lambda _: updated)
                self._balances.set(asset_id, to, credit)

            self._commit(Minted(asset_id=asset_id, owner=to, total_supply=updated.supply), apply)
            self._log.debug(
                "minted",
                extra={"asset_id": asset_id, "to": account_repr(to), "amount": minted},
            )
            return minted

    def burn(self, caller: AccountId, asset_id: int, amount: int) -> int:
        """
        Destroy up to `amount` of the caller's units. Returns the units
        actually burnt (at most the caller's balance).
        """
        with self._op("burn", caller):
            amount = to_amount(amount)
            asset_id = to_asset_id(asset_id)

            burnt, supply, apply = self._plan_debit(asset_id, caller, amount)
            self._commit(Burned(asset_id=asset_id, owner=caller, total_supply=supply), apply)
            self._log.debug(
                "burnt",
                extra={"asset_id": asset_id, "caller": account_repr(caller), "amount": burnt},
            )
            return burnt

    def transfer(self, caller: AccountId, asset_id: int, amount: int, to: AccountId) -> int:
        """
        Move up to `amount` from the caller to `to`. Returns the units moved.
        A transfer to oneself changes nothing but is still reported.
        """
        with self._op("transfer", caller):
            amount = to_amount(amount)
            require_account("to", to)
            asset_id = to_asset_id(asset_id)
            self._registry.require(asset_id)

            moved, apply = self._plan_move(asset_id, caller, to, amount)
            self._commit(Transferred(asset_id=asset_id, from_=caller, to=to, amount=moved), apply)
            self._log.debug(
                "transferred",
                extra={
                    "asset_id": asset_id,
                    "caller": account_repr(caller),
                    "to": account_repr(to),
                    "amount": moved,
                },
            )
            return moved

    # ------------------------------------------------------------------ queries

    def asset(self, asset_id: int) -> Optional[AssetDetails]:
        with self._lock:
            return self._registry.get(asset_id)

    def metadata(self, asset_id: int) -> Optional[AssetMetadata]:
        with self._lock:
            if not is_asset_id(asset_id):
                return None
            return self._metadata.get(asset_id)


__all__ = ["FungibleAssets"]
