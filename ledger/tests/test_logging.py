from __future__ import annotations

import io
import json
import logging

import pytest

from ledger import logging as llog
from ledger.config import LedgerConfig
from ledger.errors import LedgerError
from ledger.runtime import FungibleAssets


@pytest.fixture
def isolated_logger():
    name = "ledger.test.logging"
    yield name
    logger = logging.getLogger(name)
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)
    llog.clear_context()


def test_json_format_includes_context_and_extras(isolated_logger):
    buf = io.StringIO()
    llog.configure(json=True, level="DEBUG", stream=buf, logger_name=isolated_logger)
    log = logging.getLogger(isolated_logger)

    with llog.trace_scope("t-1") as tid:
        assert tid == "t-1"
        llog.bind(caller=b"\x01\x02")
        log.info("asset created", extra={"asset_id": 4})

    payload = json.loads(buf.getvalue().strip())
    assert payload["msg"] == "asset created"
    assert payload["level"] == "INFO"
    assert payload["trace_id"] == "t-1"
    assert payload["caller"] == "0x0102"
    assert payload["asset_id"] == 4
    # the scope restores the previous (empty) context
    assert llog.context() == {}


def test_text_format_orders_known_keys_first(isolated_logger):
    buf = io.StringIO()
    llog.configure(json=False, level=logging.INFO, stream=buf, logger_name=isolated_logger)
    adapter = llog.with_fields(logging.getLogger(isolated_logger), source="nft")
    adapter.info("burnt", extra={"zeta": 1, "asset_id": 2})

    line = buf.getvalue().strip()
    assert "| INFO  | ledger.test.logging |" in line
    assert "source=nft asset_id=2 zeta=1" in line
    assert line.endswith("| burnt")


def test_level_from_env(isolated_logger, monkeypatch):
    monkeypatch.setenv("ANIMICA_LOG_LEVEL", "error")
    buf = io.StringIO()
    logger = llog.configure(json=False, stream=buf, logger_name=isolated_logger)
    assert logger.level == logging.ERROR
    logger.warning("dropped")
    assert buf.getvalue() == ""


def test_bind_unbind():
    try:
        llog.bind(caller="alice", asset_id=1)
        llog.unbind("asset_id")
        assert llog.context() == {"caller": "alice"}
    finally:
        llog.clear_context()


def test_ledger_logs_creation_and_rejections(caplog):
    assets = FungibleAssets(config=LedgerConfig())
    with caplog.at_level(logging.DEBUG, logger="ledger.runtime.assets"):
        assets.create("alice")
        with pytest.raises(LedgerError):
            assets.set_metadata("mallory", 0, b"x", b"y")

    created = [r for r in caplog.records if r.getMessage() == "asset created"]
    assert created and created[0].levelno == logging.INFO
    assert created[0].source == "assets"
    assert created[0].asset_id == 0

    rejected = [r for r in caplog.records if "rejected" in r.getMessage()]
    assert rejected[0].levelno == logging.DEBUG
    assert rejected[0].code == "NO_PERMISSION"
    assert rejected[0].op == "set_metadata"
