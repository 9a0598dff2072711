"""
ledger.config — construction-time configuration for ledger instances.

Knobs:
  • max_length          bound on name/symbol/metadata byte length (MaxLength)
  • nonce_overflow      what the id allocator does at its maximum:
                          "saturate" → keep returning the max id (the next insert
                                       then fails with AssetIdCollision)
                          "error"    → raise NonceExhausted
  • enforce_mint_owner  whether fungible mint requires caller == owner

Environment variables (all optional):
  ANIMICA_LEDGER_MAX_LENGTH          -> integer ≥ 0 (default: 32)
  ANIMICA_LEDGER_NONCE_OVERFLOW      -> saturate|error (default: saturate)
  ANIMICA_LEDGER_ENFORCE_MINT_OWNER  -> 0/1/true/false (default: 1)

Programmatic usage:
    from ledger.config import load_config
    cfg = load_config(overrides={"max_length": 64})
    assets = FungibleAssets(config=cfg)
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from functools import lru_cache
from typing import Dict, Mapping, Optional, Union

# ----------------------------- helpers -------------------------------------

_BOOL_TRUE = {"1", "true", "t", "yes", "y", "on"}
_BOOL_FALSE = {"0", "false", "f", "no", "n", "off"}

NONCE_SATURATE = "saturate"
NONCE_ERROR = "error"
NONCE_POLICIES = (NONCE_SATURATE, NONCE_ERROR)

DEFAULT_MAX_LENGTH = 32


def _bool_env(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    v = value.strip().lower()
    if v in _BOOL_TRUE:
        return True
    if v in _BOOL_FALSE:
        return False
    raise ValueError(f"invalid boolean: {value!r}")


# ------------------------------ dataclass -----------------------------------


@dataclass(frozen=True)
class LedgerConfig:
    max_length: int = DEFAULT_MAX_LENGTH
    nonce_overflow: str = NONCE_SATURATE
    enforce_mint_owner: bool = True

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


def _validate(cfg: LedgerConfig) -> LedgerConfig:
    if isinstance(cfg.max_length, bool) or not isinstance(cfg.max_length, int):
        raise ValueError("max_length must be an integer")
    if cfg.max_length < 0:
        raise ValueError("max_length must be ≥ 0")
    if cfg.nonce_overflow not in NONCE_POLICIES:
        raise ValueError(f"nonce_overflow must be one of {NONCE_POLICIES}")
    return cfg


# ------------------------------ loader --------------------------------------


def load_config(
    env: Optional[Mapping[str, str]] = None,
    *,
    overrides: Optional[Mapping[str, Union[str, int, bool]]] = None,
) -> LedgerConfig:
    """
    Build a LedgerConfig from environment and optional overrides.

    Overrides win over the environment, which wins over defaults.

    Args:
        env: mapping to read variables from (default: os.environ)
        overrides: explicit field overrides; keys: 'max_length',
          'nonce_overflow', 'enforce_mint_owner'

    Raises:
        ValueError on malformed or out-of-range values.
    """
    env = os.environ if env is None else env
    overrides = dict(overrides or {})

    if "max_length" in overrides:
        max_length = int(overrides["max_length"])
    else:
        max_length = int(env.get("ANIMICA_LEDGER_MAX_LENGTH", DEFAULT_MAX_LENGTH))

    nonce_overflow = str(
        overrides.get(
            "nonce_overflow", env.get("ANIMICA_LEDGER_NONCE_OVERFLOW", NONCE_SATURATE)
        )
    ).strip().lower()

    if "enforce_mint_owner" in overrides:
        raw = overrides["enforce_mint_owner"]
        # strings get the same parsing as the env var; "false" must not be truthy
        enforce = _bool_env(raw, True) if isinstance(raw, str) else bool(raw)
    else:
        enforce = _bool_env(env.get("ANIMICA_LEDGER_ENFORCE_MINT_OWNER"), True)

    return _validate(
        LedgerConfig(
            max_length=max_length,
            nonce_overflow=nonce_overflow,
            enforce_mint_owner=enforce,
        )
    )


@lru_cache(maxsize=1)
def get_config() -> LedgerConfig:
    """
    Cached process-wide config read from the environment.
    """
    return load_config()


def summary(cfg: Optional[LedgerConfig] = None) -> str:
    """One-line summary of the active knobs, for startup logs."""
    cfg = cfg or get_config()
    return (
        "ledger{"
        f"max_len={cfg.max_length}, nonce={cfg.nonce_overflow}, "
        f"mint_owner={int(cfg.enforce_mint_owner)}"
        "}"
    )


__all__ = [
    "LedgerConfig",
    "NONCE_SATURATE",
    "NONCE_ERROR",
    "NONCE_POLICIES",
    "DEFAULT_MAX_LENGTH",
    "load_config",
    "get_config",
    "summary",
]
