import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from ledger.cli import replay
from ledger.runtime import FungibleAssets
from ledger.runtime.base import SupplyMismatch

runner = CliRunner()


@pytest.fixture(autouse=True)
def reset_ledger_logger():
    # the command attaches a handler to the runner's (short-lived) stderr
    yield
    logger = logging.getLogger("ledger")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)


SCRIPT = [
    {"class": "fungible", "op": "create", "caller": "alice"},
    {"class": "fungible", "op": "set_metadata", "caller": "alice", "asset_id": 0, "name": "Gold", "symbol": "0x474c44"},
    {"class": "fungible", "op": "mint", "caller": "alice", "asset_id": 0, "amount": 100, "to": "bob"},
    {"class": "fungible", "op": "transfer", "caller": "bob", "asset_id": 0, "amount": 40, "to": "carol"},
    {"class": "fungible", "op": "burn", "caller": "bob", "asset_id": 0, "amount": 1000},
    {"class": "fungible", "op": "set_metadata", "caller": "mallory", "asset_id": 0, "name": "x", "symbol": "y"},
    {"class": "unique", "op": "mint", "caller": "alice", "metadata": "cat", "supply": 0},
    {"class": "unique", "op": "mint", "caller": "alice", "metadata": "cat", "supply": 3},
]


def write_script(tmp_path: Path, doc) -> Path:
    path = tmp_path / "script.json"
    path.write_text(json.dumps(doc))
    return path


def run_cli(args: list[str], expect: int = 0) -> str:
    result = runner.invoke(replay.app, args)
    assert result.exit_code == expect, result.output
    return result.stdout


def test_replay_json_output(tmp_path: Path) -> None:
    out = json.loads(run_cli([str(write_script(tmp_path, SCRIPT)), "--json"]))
    statuses = [r["status"] for r in out["results"]]
    assert statuses == ["ok", "ok", "ok", "ok", "ok", "NO_PERMISSION", "NO_SUPPLY", "ok"]

    assert out["results"][0]["result"] == 0
    assert out["results"][4]["result"] == 60
    metadata_event = out["results"][1]["events"][0]
    assert metadata_event["args"]["symbol"] == "0x" + b"GLD".hex()
    assert metadata_event["args"]["name"] == "0x" + b"Gold".hex()

    minted = out["results"][2]["events"]
    assert minted == [
        {
            "name": "Minted",
            "source": "assets",
            "index": 2,
            "args": {"asset_id": 0, "owner": "bob", "total_supply": 100},
        }
    ]
    # rejected calls emit nothing
    assert out["results"][5]["events"] == []
    assert out["results"][6]["events"] == []
    assert out["results"][7]["events"][0]["source"] == "nft"
    assert out["audit"] == {"ok": True, "mismatches": []}


def test_replay_text_output(tmp_path: Path) -> None:
    text = run_cli([str(write_script(tmp_path, {"calls": SCRIPT}))])
    assert "fungible.create(alice)" in text
    assert "assets.Transferred" in text
    assert "NO_PERMISSION" in text
    assert "supply audit ok" in text


def test_replay_max_length_override(tmp_path: Path) -> None:
    script = [
        {"class": "fungible", "op": "create", "caller": "alice"},
        {"class": "fungible", "op": "set_metadata", "caller": "alice", "asset_id": 0, "name": "Gold", "symbol": "G"},
    ]
    out = json.loads(run_cli([str(write_script(tmp_path, script)), "--json", "--max-length", "2"]))
    assert out["results"][1]["status"] == "TOO_LONG"


def test_replay_permissive_mint(tmp_path: Path) -> None:
    script = [
        {"class": "fungible", "op": "create", "caller": "alice"},
        {"class": "fungible", "op": "mint", "caller": "bob", "asset_id": 0, "amount": 5, "to": "bob"},
    ]
    path = write_script(tmp_path, script)
    strict = json.loads(run_cli([str(path), "--json"]))
    assert strict["results"][1]["status"] == "NO_PERMISSION"
    loose = json.loads(run_cli([str(path), "--json", "--permissive-mint"]))
    assert loose["results"][1]["status"] == "ok"


@pytest.mark.parametrize(
    "doc",
    [
        {"calls": "nope"},
        [{"class": "bank", "op": "create", "caller": "a"}],
        [{"class": "fungible", "op": "explode", "caller": "a"}],
        [{"class": "fungible", "op": "create"}],
        [{"class": "fungible", "op": "mint", "caller": "a", "asset_id": 0}],
        [{"class": "unique", "op": "mint", "caller": "a", "metadata": "0xzz", "supply": 1}],
    ],
)
def test_replay_rejects_malformed_scripts(tmp_path: Path, doc) -> None:
    result = runner.invoke(replay.app, [str(write_script(tmp_path, doc))])
    assert result.exit_code == 2


def test_replay_unreadable_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    assert runner.invoke(replay.app, [str(path)]).exit_code == 2


def test_replay_exits_nonzero_when_audit_fails(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(FungibleAssets, "audit", lambda self: [SupplyMismatch(0, 10, 9)])
    out = json.loads(run_cli([str(write_script(tmp_path, SCRIPT[:1])), "--json"], expect=1))
    assert out["audit"]["ok"] is False
    assert out["audit"]["mismatches"] == [
        {"class": "fungible", "asset_id": 0, "supply": 10, "balances": 9}
    ]
