"""
ledger.version — semantic version string and VCS describe helper.

Kept dependency-free so it can be imported before logging or config.

Usage:
    from ledger.version import __version__, git_describe
"""

from __future__ import annotations

import os
import subprocess
from functools import lru_cache

# Bump on any change to ledger semantics (error codes, event fields, id policy).
__version__ = "0.1.0"


@lru_cache(maxsize=1)
def git_describe() -> str:
    """
    Return a best-effort 'git describe' style string.

    Resolution order:
      1) Environment override ANIMICA_GIT_DESCRIBE.
      2) `git describe --tags --dirty --always`.
      3) `<__version__>+local`.
    """
    override = os.getenv("ANIMICA_GIT_DESCRIBE")
    if override:
        return override.strip()

    try:
        out = subprocess.check_output(
            ["git", "describe", "--tags", "--dirty", "--always"],
            stderr=subprocess.DEVNULL,
        )
        desc = out.decode("utf-8", "replace").strip()
        if desc:
            return desc
    except (OSError, subprocess.SubprocessError):
        pass

    return f"{__version__}+local"


__all__ = ["__version__", "git_describe"]
