"""
ledger.state.balances — (asset id, account) → balance map.

The store validates that stored values are u128 and nothing else. Asset
existence, authorization and saturation are the runtime's job; functions
passed to `mutate()` must clamp on their own.

Zero balances are not stored: writing 0 deletes the key, so "absent" and
"zero" are indistinguishable to readers and `holders()` only yields accounts
that actually hold something.

The backing mapping is injectable. Any `MutableMapping[(asset_id, account), int]`
works (a plain dict by default; a host may pass a persistent mapping).
"""

from __future__ import annotations

from typing import Callable, Iterator, MutableMapping, Optional, Set, Tuple

from ..types.assets import AccountId
from ..types.numeric import U128_MAX, is_u128

BalanceKey = Tuple[int, AccountId]


def _check_balance(value: int) -> int:
    if not is_u128(value):
        raise ValueError(f"balance must be an integer within [0, {U128_MAX}], got {value!r}")
    return value


class BalanceStore:
    __slots__ = ("_map",)

    def __init__(self, backing: Optional[MutableMapping[BalanceKey, int]] = None) -> None:
        self._map: MutableMapping[BalanceKey, int] = {} if backing is None else backing

    def get(self, asset_id: int, account: AccountId) -> int:
        """Balance of `account` in `asset_id`; 0 when never written."""
        return self._map.get((asset_id, account), 0)

    def set(self, asset_id: int, account: AccountId, value: int) -> None:
        value = _check_balance(value)
        key = (asset_id, account)
        if value == 0:
            self._map.pop(key, None)
        else:
            self._map[key] = value

    def mutate(self, asset_id: int, account: AccountId, f: Callable[[int], int]) -> int:
        """
        Read-modify-write in one step. Returns the stored result.

        If `f` raises or returns something that is not a u128, the stored
        value is left untouched.
        """
        new = _check_balance(f(self.get(asset_id, account)))
        self.set(asset_id, account, new)
        return new

    def holders(self, asset_id: int) -> Iterator[Tuple[AccountId, int]]:
        """Yield (account, balance) for every non-zero holder of `asset_id`."""
        for (aid, account), bal in list(self._map.items()):
            if aid == asset_id:
                yield account, bal

    def total(self, asset_id: int) -> int:
        return sum(bal for _, bal in self.holders(asset_id))

    def asset_ids(self) -> Set[int]:
        """Ids with at least one non-zero balance."""
        return {aid for aid, _ in self._map.keys()}

    def __len__(self) -> int:
        return len(self._map)


__all__ = ["BalanceStore", "BalanceKey"]
