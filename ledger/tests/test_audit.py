from __future__ import annotations

import pytest

import ledger
from ledger.config import LedgerConfig
from ledger.errors import InvariantViolation
from ledger.runtime import FungibleAssets, SupplyMismatch, UniqueAssets
from ledger.version import __version__, git_describe


def test_clean_books_pass_audit():
    assets = FungibleAssets(config=LedgerConfig())
    assets.create("alice")
    assets.mint("alice", 0, 50, "bob")
    assert assets.audit() == []
    assets.check_invariants()


def test_tampered_backing_is_reported():
    balances = {}
    assets = FungibleAssets(config=LedgerConfig(), balance_backing=balances)
    assets.create("alice")
    assets.mint("alice", 0, 50, "bob")

    balances[(0, "bob")] = 49
    balances[(7, "ghost")] = 3

    assert assets.audit() == [SupplyMismatch(0, 50, 49), SupplyMismatch(7, 0, 3)]
    with pytest.raises(InvariantViolation) as ei:
        assets.check_invariants()
    assert ei.value.data["mismatches"][0] == {"asset_id": 0, "supply": 50, "balances": 49}


def test_host_supplied_registry_is_used():
    registry = {}
    nft = UniqueAssets(config=LedgerConfig(), registry_backing=registry)
    nft.mint("alice", b"x", 2)
    assert registry[0].supply == 2
    assert registry[0].to_dict() == {"creator": "alice", "supply": 2, "metadata": "0x78"}


def test_package_exports():
    assert ledger.FungibleAssets is FungibleAssets
    assert ledger.UniqueAssets is UniqueAssets
    assert ledger.__version__ == __version__
    with pytest.raises(AttributeError):
        ledger.NoSuchThing  # noqa: B018


def test_git_describe_override(monkeypatch):
    git_describe.cache_clear()
    monkeypatch.setenv("ANIMICA_GIT_DESCRIBE", "v9.9.9-test")
    try:
        assert git_describe() == "v9.9.9-test"
    finally:
        git_describe.cache_clear()
