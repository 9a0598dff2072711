from __future__ import annotations

import pytest

from ledger.config import LedgerConfig
from ledger.runtime import FungibleAssets, UniqueAssets
from ledger.state.events import InMemoryEventSink


@pytest.fixture
def config() -> LedgerConfig:
    return LedgerConfig()


@pytest.fixture
def sink() -> InMemoryEventSink:
    return InMemoryEventSink()


@pytest.fixture
def fungible(config: LedgerConfig, sink: InMemoryEventSink) -> FungibleAssets:
    return FungibleAssets(config=config, sink=sink)


@pytest.fixture
def unique(config: LedgerConfig, sink: InMemoryEventSink) -> UniqueAssets:
    return UniqueAssets(config=config, sink=sink)
