from __future__ import annotations

"""
ledger.cli.replay
-----------------

Apply a JSON script of ledger calls to a fresh fungible and unique ledger,
print each outcome and the events it emitted, then audit supply.

Script format: either a list of calls or {"calls": [...]}. Each call is

    {"class": "fungible" | "unique", "op": "<operation>", "caller": "<account>", ...args}

with args named as in the Python API (asset_id, amount, to, name, symbol,
metadata, supply). Byte args are utf-8 strings, or 0x-hex for raw bytes.
Account ids are used as given (strings).

Examples
--------
python -m ledger.cli.replay demo.json
python -m ledger.cli.replay demo.json --json --max-length 64

Exit codes: 0 ok, 1 supply audit failed, 2 unreadable/malformed script.
Rejected calls do not change the exit code; they are reported inline.
"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import typer

from .. import logging as llog
from ..config import load_config
from ..errors import LedgerError
from ..runtime import FungibleAssets, UniqueAssets
from ..state.events import InMemoryEventSink

app = typer.Typer(
    name="ledger-replay",
    add_completion=False,
    help="Replay a JSON script of asset ledger calls and audit the result.",
)

# -------------------- utils --------------------


def _as_bytes(v: Any) -> Any:
    if isinstance(v, str):
        if v[:2] in ("0x", "0X"):
            return bytes.fromhex(v[2:])
        return v.encode("utf-8")
    return v


# op name → positional arg names after caller
_FUNGIBLE_OPS: Dict[str, List[str]] = {
    "create": [],
    "set_metadata": ["asset_id", "name", "symbol"],
    "mint": ["asset_id", "amount", "to"],
    "burn": ["asset_id", "amount"],
    "transfer": ["asset_id", "amount", "to"],
}
_UNIQUE_OPS: Dict[str, List[str]] = {
    "mint": ["metadata", "supply"],
    "burn": ["asset_id", "amount"],
    "transfer": ["asset_id", "amount", "to"],
}
_BYTE_ARGS = frozenset(("name", "symbol", "metadata"))


def _load_script(path: Path) -> List[Dict[str, Any]]:
    try:
        doc = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        typer.secho(f"cannot read script {path}: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(2)
    calls = doc.get("calls") if isinstance(doc, dict) else doc
    if not isinstance(calls, list) or not all(isinstance(c, dict) for c in calls):
        typer.secho("script must be a list of call objects", fg=typer.colors.RED, err=True)
        raise typer.Exit(2)
    return calls


def _bind_call(
    idx: int, call: Dict[str, Any], fungible: FungibleAssets, unique: UniqueAssets
) -> Callable[[], Any]:
    klass = call.get("class", "fungible")
    op = call.get("op")
    if klass == "fungible":
        target, table = fungible, _FUNGIBLE_OPS
    elif klass == "unique":
        target, table = unique, _UNIQUE_OPS
    else:
        typer.secho(f"call #{idx}: unknown class {klass!r}", fg=typer.colors.RED, err=True)
        raise typer.Exit(2)
    if op not in table:
        typer.secho(f"call #{idx}: unknown {klass} op {op!r}", fg=typer.colors.RED, err=True)
        raise typer.Exit(2)
    if "caller" not in call:
        typer.secho(f"call #{idx}: missing caller", fg=typer.colors.RED, err=True)
        raise typer.Exit(2)

    args = [call["caller"]]
    for name in table[op]:
        if name not in call:
            typer.secho(f"call #{idx}: {op} needs {name!r}", fg=typer.colors.RED, err=True)
            raise typer.Exit(2)
        v = call[name]
        try:
            args.append(_as_bytes(v) if name in _BYTE_ARGS else v)
        except ValueError:
            typer.secho(f"call #{idx}: {name!r} is not valid hex", fg=typer.colors.RED, err=True)
            raise typer.Exit(2)
    fn = getattr(target, op)
    return lambda: fn(*args)


def _describe(call: Dict[str, Any]) -> str:
    return f"{call.get('class', 'fungible')}.{call.get('op')}({call.get('caller')})"


# -------------------- commands --------------------


@app.command()
def replay(
    script: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON script of calls."),
    json_out: bool = typer.Option(False, "--json", help="Output as JSON."),
    max_length: Optional[int] = typer.Option(
        None, "--max-length", min=0, help="Override the name/symbol/metadata byte bound."
    ),
    permissive_mint: bool = typer.Option(
        False, "--permissive-mint", help="Let anyone mint fungible assets, not just the owner."
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Ledger log level."),
) -> None:
    """
    Run every call in SCRIPT in order against fresh ledgers.
    """
    llog.configure(level=log_level)

    overrides: Dict[str, Any] = {}
    if max_length is not None:
        overrides["max_length"] = max_length
    if permissive_mint:
        overrides["enforce_mint_owner"] = False
    try:
        cfg = load_config(overrides=overrides)
    except ValueError as e:
        typer.secho(f"bad configuration: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(2)

    sink = InMemoryEventSink()
    fungible = FungibleAssets(config=cfg, sink=sink)
    unique = UniqueAssets(config=cfg, sink=sink)

    calls = _load_script(script)
    results: List[Dict[str, Any]] = []
    with llog.trace_scope():
        for idx, call in enumerate(calls):
            run = _bind_call(idx, call, fungible, unique)
            seen = len(sink)
            row: Dict[str, Any] = {"index": idx, "call": _describe(call)}
            try:
                row["result"] = run()
                row["status"] = "ok"
            except LedgerError as e:
                row["status"] = e.code
                row["error"] = e.to_dict()
            except TypeError as e:
                row["status"] = "TYPE_ERROR"
                row["error"] = {"code": "TYPE_ERROR", "message": str(e)}
            row["events"] = [r.to_dict() for r in sink.get_events()[seen:]]
            results.append(row)

    mismatches = [
        {"class": klass, **m.to_dict()}
        for klass, ledger in (("fungible", fungible), ("unique", unique))
        for m in ledger.audit()
    ]

    if json_out:
        typer.echo(
            json.dumps(
                {"results": results, "audit": {"ok": not mismatches, "mismatches": mismatches}},
                indent=2,
                sort_keys=True,
            )
        )
    else:
        for row in results:
            line = f"#{row['index']:<3} {row['call']:<32} {row['status']}"
            if row.get("result") is not None:
                line += f" -> {row['result']}"
            typer.echo(line)
            for ev in row["events"]:
                typer.echo(f"      {ev['source']}.{ev['name']} {json.dumps(ev['args'], sort_keys=True)}")
        if mismatches:
            typer.secho(f"supply audit FAILED: {mismatches}", fg=typer.colors.RED)
        else:
            typer.secho("supply audit ok", fg=typer.colors.GREEN)

    if mismatches:
        raise typer.Exit(1)


def get_app() -> typer.Typer:
    return app


if __name__ == "__main__":
    app()
