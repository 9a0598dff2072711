"""
ledger.state.registry — asset id → aggregate record, plus fungible metadata.

`AssetRegistry` holds one frozen record per asset (`AssetDetails` for the
fungible class, `UniqueAssetDetails` for the unique class). Mutation goes
through `try_mutate(asset_id, f)`: `f` receives the current record and returns
its replacement, or raises. Only a returned record is written back, so a
failing `f` leaves the registry exactly as it was.

`MetadataStore` is a separate asset id → `AssetMetadata` map used by the
fungible ledger only.

Both are backed by host-supplied `MutableMapping`s (plain dicts by default).
"""

from __future__ import annotations

from typing import Callable, Generic, Iterator, MutableMapping, Optional, TypeVar

from ..errors import AssetIdCollision, UnknownAssetId
from ..types.assets import AssetMetadata
from ..types.numeric import is_asset_id, to_asset_id

D = TypeVar("D")


class AssetRegistry(Generic[D]):
    __slots__ = ("_map",)

    def __init__(self, backing: Optional[MutableMapping[int, D]] = None) -> None:
        self._map: MutableMapping[int, D] = {} if backing is None else backing

    def get(self, asset_id: int) -> Optional[D]:
        if not is_asset_id(asset_id):
            return None
        return self._map.get(asset_id)

    def contains(self, asset_id: int) -> bool:
        return is_asset_id(asset_id) and asset_id in self._map

    def require(self, asset_id: int) -> D:
        """
        Return the record or raise UnknownAssetId.

        `asset_id` must be a real u32 int; aliases such as `True` or `0.0`
        are rejected rather than matching the record they hash equal to.
        """
        details = self._map.get(to_asset_id(asset_id))
        if details is None:
            raise UnknownAssetId(asset_id=asset_id)
        return details

    def insert(self, asset_id: int, details: D) -> None:
        """
        Store a new record.

        Raises:
            AssetIdCollision if `asset_id` is already taken. Ids come from the
            allocator, so a collision means the allocator is saturated or the
            backing map was tampered with; it is never a user error.
        """
        if asset_id in self._map:
            raise AssetIdCollision(asset_id=asset_id)
        self._map[asset_id] = details

    def try_mutate(self, asset_id: int, f: Callable[[D], D]) -> D:
        current = self.require(asset_id)
        updated = f(current)
        self._map[asset_id] = updated
        return updated

    def ids(self) -> Iterator[int]:
        return iter(sorted(self._map.keys()))

    def __len__(self) -> int:
        return len(self._map)


class MetadataStore:
    __slots__ = ("_map",)

    def __init__(self, backing: Optional[MutableMapping[int, AssetMetadata]] = None) -> None:
        self._map: MutableMapping[int, AssetMetadata] = {} if backing is None else backing

    def get(self, asset_id: int) -> Optional[AssetMetadata]:
        return self._map.get(asset_id)

    def set(self, asset_id: int, metadata: AssetMetadata) -> None:
        # overwrite unconditionally
        self._map[asset_id] = metadata


__all__ = ["AssetRegistry", "MetadataStore"]
