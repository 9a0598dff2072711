"""
ledger.runtime.base — shared plumbing for the two asset-class ledgers.

A ledger instance owns its registry, balance store, id allocator, event sink
and one re-entrant lock. Every public operation and query runs entirely under
that lock, so concurrent callers never observe a half-applied call.

Operations follow one shape:

    with self._op("transfer", caller):
        ...validate, raising a LedgerError on the first failed precondition...
        moved, apply = self._plan_move(...)
        self._commit(event, apply)

Every precondition is checked and every new value computed before the first
write. `_commit` hands the event to the sink and only then applies the writes,
so an exception leaving `_op`, a failing sink included, means nothing changed.
Rejections are logged at DEBUG with their error code and re-raised unchanged;
sink failures are logged at ERROR and re-raised unchanged.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import (Any, Callable, ClassVar, Dict, Iterator, List,
                    MutableMapping, Optional, Tuple)

from ..config import LedgerConfig, get_config
from ..errors import AssetIdCollision, InvariantViolation, LedgerError
from ..logging import get_logger, with_fields
from ..state.balances import BalanceKey, BalanceStore
from ..state.events import EventRecord, EventSink, InMemoryEventSink
from ..state.nonce import IdAllocator
from ..state.registry import AssetRegistry
from ..types.assets import AccountId, account_repr, require_account
from ..types.events import LedgerEvent
from ..types.numeric import AssetId, is_asset_id, saturating_add, saturating_sub


def _noop() -> None:
    pass


@dataclass(frozen=True)
class SupplyMismatch:
    """One asset whose recorded supply disagrees with the sum of its balances."""

    asset_id: int
    supply: int
    balances: int

    def to_dict(self) -> Dict[str, int]:
        return {"asset_id": self.asset_id, "supply": self.supply, "balances": self.balances}


class LedgerBase:
    SOURCE: ClassVar[str] = "ledger"

    def __init__(
        self,
        *,
        config: Optional[LedgerConfig] = None,
        sink: Optional[EventSink] = None,
        allocator: Optional[IdAllocator] = None,
        registry_backing: Optional[MutableMapping[int, Any]] = None,
        balance_backing: Optional[MutableMapping[BalanceKey, int]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config or get_config()
        self._lock = threading.RLock()
        self._ids = allocator or IdAllocator(policy=self.config.nonce_overflow)
        self._registry: AssetRegistry[Any] = AssetRegistry(registry_backing)
        self._balances = BalanceStore(balance_backing)
        self._sink: EventSink = sink if sink is not None else InMemoryEventSink()
        self._log = with_fields(
            logger or get_logger(f"ledger.runtime.{self.SOURCE}"),
            component="ledger",
            source=self.SOURCE,
        )

    # ------------------------------------------------------------------ plumbing

    @property
    def sink(self) -> EventSink:
        return self._sink

    @contextmanager
    def _op(self, op: str, caller: AccountId) -> Iterator[None]:
        with self._lock:
            try:
                require_account("caller", caller)
                yield
            except LedgerError as e:
                self._log.debug(
                    "%s rejected: %s",
                    op,
                    e.code,
                    extra={"op": op, "caller": account_repr(caller), "code": e.code},
                )
                raise

    def _emit(self, event: LedgerEvent) -> EventRecord:
        try:
            return self._sink.append(event, source=self.SOURCE)
        except Exception:
            self._log.error("event sink failed", extra={"event": event.NAME}, exc_info=True)
            raise

    def _commit(self, event: LedgerEvent, apply: Callable[[], None]) -> EventRecord:
        """Emit `event`, then run the prepared writes. A raising sink skips the writes."""
        record = self._emit(event)
        apply()
        return record

    def _reserve_id(self) -> AssetId:
        """
        The id the next insert will take, checked for a collision but not yet
        consumed. Call `self._ids.next_id()` when committing.
        """
        asset_id = self._ids.candidate()
        if self._registry.contains(asset_id):
            raise AssetIdCollision(asset_id=asset_id)
        return asset_id

    def _plan_debit(
        self, asset_id: int, holder: AccountId, amount: int
    ) -> Tuple[int, int, Callable[[], None]]:
        """
        Prepare burning up to `amount` from `holder`, shrinking supply by the
        same amount. Returns (burnt, new_supply, apply). The asset must already
        be known.
        """
        details = self._registry.require(asset_id)
        held = self._balances.get(asset_id, holder)
        burnt = held - saturating_sub(held, amount)
        updated = replace(details, supply=saturating_sub(details.supply, burnt))

        def apply() -> None:
            self._registry.try_mutate(asset_id, lambda _: updated)
            self._balances.set(asset_id, holder, held - burnt)

        return burnt, updated.supply, apply

    def _plan_move(
        self, asset_id: int, frm: AccountId, to: AccountId, amount: int
    ) -> Tuple[int, Callable[[], None]]:
        """Prepare moving up to `amount` between balances. Returns (moved, apply)."""
        held = self._balances.get(asset_id, frm)
        moved = held - saturating_sub(held, amount)
        if frm == to or moved == 0:
            return moved, _noop
        credit = saturating_add(self._balances.get(asset_id, to), moved)

        def apply() -> None:
            self._balances.set(asset_id, frm, held - moved)
            self._balances.set(asset_id, to, credit)

        return moved, apply

    # ------------------------------------------------------------------- queries

    def account(self, asset_id: int, who: AccountId) -> int:
        """Balance of `who` in `asset_id` (0 if none, including unknown assets)."""
        with self._lock:
            if not is_asset_id(asset_id):
                return 0
            return self._balances.get(asset_id, who)

    def nonce(self) -> int:
        """The id the next create/mint would be given."""
        with self._lock:
            return self._ids.value

    def asset_ids(self) -> List[int]:
        with self._lock:
            return list(self._registry.ids())

    # --------------------------------------------------------------------- audit

    def audit(self) -> List[SupplyMismatch]:
        """
        Compare every asset's recorded supply with the sum of its balances.

        Balances recorded under ids missing from the registry are reported with
        supply 0. An empty list means the books balance.
        """
        with self._lock:
            known = set()
            out: List[SupplyMismatch] = []
            for asset_id in self._registry.ids():
                known.add(asset_id)
                supply = self._registry.get(asset_id).supply
                total = self._balances.total(asset_id)
                if total != supply:
                    out.append(SupplyMismatch(asset_id, supply, total))
            for asset_id in sorted(self._balances.asset_ids() - known):
                out.append(SupplyMismatch(asset_id, 0, self._balances.total(asset_id)))
            return out

    def check_invariants(self) -> None:
        """Raise InvariantViolation if `audit()` finds anything."""
        mismatches = self.audit()
        if mismatches:
            self._log.error(
                "supply audit failed", extra={"mismatches": [m.to_dict() for m in mismatches]}
            )
            raise InvariantViolation(data={"mismatches": [m.to_dict() for m in mismatches]})


__all__ = ["LedgerBase", "SupplyMismatch"]
