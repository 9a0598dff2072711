"""
ledger.state.nonce — per-class asset id allocator.

Ids are handed out from a counter that starts at 0 and only moves forward.
At `max_id` the allocator either saturates (keeps returning `max_id` and leaves
the counter in place) or refuses with NonceExhausted, depending on the
configured policy. Saturation never wraps to 0, so ids are never recycled; the
duplicate `max_id` is caught by the registry's insert check.

Not thread-safe on its own; ledger runtimes call it under their lock.
"""

from __future__ import annotations

import logging

from ..config import NONCE_ERROR, NONCE_POLICIES, NONCE_SATURATE
from ..errors import NonceExhausted
from ..types.numeric import ASSET_ID_MAX, AssetId

log = logging.getLogger(__name__)


class IdAllocator:
    __slots__ = ("_next", "_max", "_policy", "_exhausted")

    def __init__(
        self,
        *,
        start: int = 0,
        max_id: int = ASSET_ID_MAX,
        policy: str = NONCE_SATURATE,
    ) -> None:
        if policy not in NONCE_POLICIES:
            raise ValueError(f"unknown nonce policy: {policy!r}")
        if not (0 <= start <= max_id):
            raise ValueError("start must be within [0, max_id]")
        self._next = start
        self._max = max_id
        self._policy = policy
        # set once max_id itself has been handed out
        self._exhausted = False

    @property
    def value(self) -> int:
        """Current nonce (the id the next allocation will return)."""
        return self._next

    @property
    def max_id(self) -> int:
        return self._max

    def peek(self) -> AssetId:
        return AssetId(self._next)

    def candidate(self) -> AssetId:
        """
        The id `next_id()` would return, without advancing.

        Raises:
            NonceExhausted if the id space is used up and the policy is "error".
        """
        if self._exhausted:
            if self._policy == NONCE_ERROR:
                raise NonceExhausted(data={"max_id": self._max})
            log.warning("asset id allocator saturated at %d", self._max)
        return AssetId(self._next)

    def next_id(self) -> AssetId:
        """
        Return the current nonce and advance it by one, saturating at `max_id`.

        Raises:
            NonceExhausted if the id space is used up and the policy is "error".
        """
        current = self.candidate()
        if self._exhausted:
            return current
        if current == self._max:
            log.warning("asset id allocator reached its maximum %d", self._max)
            self._exhausted = True
        else:
            self._next = current + 1
        return current


__all__ = ["IdAllocator"]
