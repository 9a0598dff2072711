"""
ledger.runtime.unique — supply-tracked unique asset class ("nft").

Each `mint` creates a brand-new asset: the caller becomes its creator and
receives the whole supply. There is no later issuance. Holders can burn or
transfer what they hold; holding nothing at all is an error here (`NotOwned`),
unlike the fungible class where such calls just move 0.
"""

from __future__ import annotations

from typing import Optional

from ..errors import NoSupply, NotOwned
from ..state.events import SOURCE_UNIQUE
from ..types.assets import (AccountId, UniqueAssetDetails, account_repr,
                            require_account, require_bounded)
from ..types.events import Burned, Transferred, UniqueCreated
from ..types.numeric import AssetId, to_amount, to_asset_id
from .base import LedgerBase


class UniqueAssets(LedgerBase):
    SOURCE = SOURCE_UNIQUE

    def mint(self, caller: AccountId, metadata: bytes, supply: int) -> AssetId:
        """
        Create a new unique asset with `supply` units, all credited to `caller`.

        Raises:
            InvalidAmount, NoSupply, TooLong. All are checked before an id is
            allocated, so a rejected mint consumes no id.
        """
        with self._op("mint", caller):
            supply = to_amount(supply, name="supply")
            if supply == 0:
                raise NoSupply()
            meta = require_bounded("metadata", metadata, self.config.max_length)

            asset_id = self._reserve_id()
            details = UniqueAssetDetails(creator=caller, supply=supply, metadata=meta)

            def apply() -> None:
                self._ids.next_id()
                self._registry.insert(asset_id, details)
                self._balances.set(asset_id, caller, supply)

            self._commit(UniqueCreated(creator=caller, asset_id=asset_id), apply)
            self._log.info(
                "asset created",
                extra={"asset_id": asset_id, "caller": account_repr(caller), "amount": supply},
            )
            return asset_id

    def burn(self, caller: AccountId, asset_id: int, amount: int) -> int:
        """Destroy up to `amount` of the caller's units. Returns the units burnt."""
        with self._op("burn", caller):
            amount = to_amount(amount)
            asset_id = self._require_holder(asset_id, caller)

            burnt, supply, apply = self._plan_debit(asset_id, caller, amount)
            self._commit(Burned(asset_id=asset_id, owner=caller, total_supply=supply), apply)
            self._log.debug(
                "burnt",
                extra={"asset_id": asset_id, "caller": account_repr(caller), "amount": burnt},
            )
            return burnt

    def transfer(self, caller: AccountId, asset_id: int, amount: int, to: AccountId) -> int:
        """Move up to `amount` of the caller's units to `to`. Returns the units moved."""
        with self._op("transfer", caller):
            amount = to_amount(amount)
            require_account("to", to)
            asset_id = self._require_holder(asset_id, caller)

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

    def _require_holder(self, asset_id: int, caller: AccountId) -> AssetId:
        asset_id = to_asset_id(asset_id)
        self._registry.require(asset_id)
        if self._balances.get(asset_id, caller) == 0:
            raise NotOwned(asset_id=asset_id)
        return asset_id

    # ------------------------------------------------------------------ queries

    def unique_asset(self, asset_id: int) -> Optional[UniqueAssetDetails]:
        with self._lock:
            return self._registry.get(asset_id)


__all__ = ["UniqueAssets"]
