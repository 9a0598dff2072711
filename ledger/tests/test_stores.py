from __future__ import annotations

from dataclasses import replace

import pytest

from ledger.errors import AssetIdCollision, NoPermission, UnknownAssetId
from ledger.state.balances import BalanceStore
from ledger.state.registry import AssetRegistry, MetadataStore
from ledger.types.assets import AssetDetails, AssetMetadata
from ledger.types.numeric import U128_MAX, saturating_add

ALICE = "alice"
BOB = "bob"


# ------------------------------- balances ------------------------------------


def test_absent_balance_is_zero():
    bs = BalanceStore()
    assert bs.get(0, ALICE) == 0
    assert list(bs.holders(0)) == []


def test_set_zero_removes_entry():
    backing = {}
    bs = BalanceStore(backing)
    bs.set(0, ALICE, 10)
    assert backing == {(0, ALICE): 10}
    bs.set(0, ALICE, 0)
    assert backing == {}
    assert bs.get(0, ALICE) == 0


@pytest.mark.parametrize("bad", [-1, U128_MAX + 1, 1.5, True])
def test_set_rejects_non_u128(bad):
    bs = BalanceStore()
    with pytest.raises(ValueError):
        bs.set(0, ALICE, bad)


def test_mutate_applies_function_once():
    bs = BalanceStore()
    assert bs.mutate(1, BOB, lambda b: saturating_add(b, 5)) == 5
    assert bs.mutate(1, BOB, lambda b: saturating_add(b, U128_MAX)) == U128_MAX
    assert bs.get(1, BOB) == U128_MAX


def test_mutate_failure_leaves_value():
    bs = BalanceStore()
    bs.set(1, BOB, 7)

    def boom(_):
        raise RuntimeError("no")

    with pytest.raises(RuntimeError):
        bs.mutate(1, BOB, boom)
    with pytest.raises(ValueError):
        bs.mutate(1, BOB, lambda b: b - 100)
    assert bs.get(1, BOB) == 7


def test_holders_and_total_are_per_asset():
    bs = BalanceStore()
    bs.set(0, ALICE, 3)
    bs.set(0, BOB, 4)
    bs.set(1, ALICE, 100)
    assert dict(bs.holders(0)) == {ALICE: 3, BOB: 4}
    assert bs.total(0) == 7
    assert bs.total(1) == 100
    assert bs.asset_ids() == {0, 1}


# ------------------------------- registry ------------------------------------


def test_insert_get_contains():
    reg = AssetRegistry()
    assert reg.get(0) is None
    assert not reg.contains(0)
    reg.insert(0, AssetDetails(owner=ALICE))
    assert reg.contains(0)
    assert reg.get(0) == AssetDetails(owner=ALICE, supply=0)


def test_insert_collision():
    reg = AssetRegistry()
    reg.insert(3, AssetDetails(owner=ALICE))
    with pytest.raises(AssetIdCollision) as ei:
        reg.insert(3, AssetDetails(owner=BOB))
    assert ei.value.data == {"asset_id": 3}
    assert reg.get(3).owner == ALICE


def test_try_mutate_unknown_id():
    reg = AssetRegistry()
    with pytest.raises(UnknownAssetId):
        reg.try_mutate(9, lambda d: d)
    assert len(reg) == 0


@pytest.mark.parametrize("alias", [True, 1.0])
def test_registry_does_not_match_hash_aliases(alias):
    reg = AssetRegistry()
    reg.insert(1, AssetDetails(owner=ALICE))
    assert reg.get(alias) is None
    assert not reg.contains(alias)
    with pytest.raises(UnknownAssetId):
        reg.require(alias)
    with pytest.raises(UnknownAssetId):
        reg.try_mutate(alias, lambda d: replace(d, supply=1))
    assert reg.get(1).supply == 0


def test_try_mutate_stores_only_on_success():
    reg = AssetRegistry()
    reg.insert(0, AssetDetails(owner=ALICE, supply=10))

    def reject(d):
        raise NoPermission(asset_id=0)

    with pytest.raises(NoPermission):
        reg.try_mutate(0, reject)
    assert reg.get(0).supply == 10

    out = reg.try_mutate(0, lambda d: replace(d, supply=d.supply + 5))
    assert out.supply == 15
    assert reg.get(0) == out


def test_ids_sorted():
    reg = AssetRegistry()
    for i in (5, 1, 3):
        reg.insert(i, AssetDetails(owner=ALICE))
    assert list(reg.ids()) == [1, 3, 5]


def test_details_reject_out_of_range_supply():
    with pytest.raises(ValueError):
        AssetDetails(owner=ALICE, supply=-1)
    with pytest.raises(ValueError):
        AssetDetails(owner=ALICE, supply=U128_MAX + 1)


def test_metadata_store_overwrites():
    ms = MetadataStore()
    assert ms.get(0) is None
    ms.set(0, AssetMetadata(name=b"Gold", symbol=b"GLD"))
    ms.set(0, AssetMetadata(name=b"Silver", symbol=b"SLV"))
    assert ms.get(0) == AssetMetadata(name=b"Silver", symbol=b"SLV")
    assert ms.get(0).to_dict() == {"name": "0x" + b"Silver".hex(), "symbol": "0x" + b"SLV".hex()}
