from __future__ import annotations

import dataclasses

import pytest

from ledger.config import (DEFAULT_MAX_LENGTH, NONCE_ERROR, NONCE_SATURATE,
                           LedgerConfig, load_config, summary)


def test_defaults_from_empty_env():
    cfg = load_config(env={})
    assert cfg == LedgerConfig()
    assert cfg.max_length == DEFAULT_MAX_LENGTH == 32
    assert cfg.nonce_overflow == NONCE_SATURATE
    assert cfg.enforce_mint_owner is True


def test_env_values():
    cfg = load_config(
        env={
            "ANIMICA_LEDGER_MAX_LENGTH": "64",
            "ANIMICA_LEDGER_NONCE_OVERFLOW": " Error ",
            "ANIMICA_LEDGER_ENFORCE_MINT_OWNER": "off",
        }
    )
    assert cfg.max_length == 64
    assert cfg.nonce_overflow == NONCE_ERROR
    assert cfg.enforce_mint_owner is False


def test_overrides_win_over_env():
    cfg = load_config(
        env={"ANIMICA_LEDGER_MAX_LENGTH": "64", "ANIMICA_LEDGER_ENFORCE_MINT_OWNER": "0"},
        overrides={"max_length": 8, "enforce_mint_owner": True},
    )
    assert cfg.max_length == 8
    assert cfg.enforce_mint_owner is True


@pytest.mark.parametrize(
    "raw, expected",
    [("false", False), ("0", False), (" Off ", False), ("yes", True), (0, False), (1, True)],
)
def test_enforce_mint_owner_override_parses_strings(raw, expected):
    cfg = load_config(env={}, overrides={"enforce_mint_owner": raw})
    assert cfg.enforce_mint_owner is expected


def test_enforce_mint_owner_override_rejects_junk_string():
    with pytest.raises(ValueError):
        load_config(env={}, overrides={"enforce_mint_owner": "nope"})


def test_reads_os_environ_by_default(monkeypatch):
    monkeypatch.setenv("ANIMICA_LEDGER_MAX_LENGTH", "5")
    assert load_config().max_length == 5


@pytest.mark.parametrize(
    "env",
    [
        {"ANIMICA_LEDGER_MAX_LENGTH": "-1"},
        {"ANIMICA_LEDGER_MAX_LENGTH": "lots"},
        {"ANIMICA_LEDGER_NONCE_OVERFLOW": "wrap"},
        {"ANIMICA_LEDGER_ENFORCE_MINT_OWNER": "maybe"},
    ],
)
def test_bad_values_rejected(env):
    with pytest.raises(ValueError):
        load_config(env=env)


def test_config_is_frozen():
    cfg = LedgerConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.max_length = 1  # type: ignore[misc]


def test_summary_and_to_dict():
    cfg = LedgerConfig(max_length=16, nonce_overflow=NONCE_ERROR, enforce_mint_owner=False)
    assert summary(cfg) == "ledger{max_len=16, nonce=error, mint_owner=0}"
    assert cfg.to_dict() == {
        "max_length": 16,
        "nonce_overflow": "error",
        "enforce_mint_owner": False,
    }
