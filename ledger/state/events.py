"""
ledger.state.events — pluggable event sinks.

The ledger runtimes append exactly one event per successful call through an
`EventSink`. Three backends ship here:

- InMemoryEventSink: ordered, thread-safe, queryable; for tests and hosts that
  read events back after a call.
- NullEventSink: drops everything.
- LoggingEventSink: writes each event as a log record and optionally forwards
  it to an inner sink.

Each stored `EventRecord` carries a per-sink sequence number (`index`) and the
`source` tag of the asset class that emitted it ("assets" or "nft").
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import (Any, Dict, Iterator, List, Optional, Protocol,
                    runtime_checkable)

from ..types.events import LedgerEvent

SOURCE_FUNGIBLE = "assets"
SOURCE_UNIQUE = "nft"


@dataclass(frozen=True)
class EventRecord:
    """
    A stored event.

    Fields
    ------
    index : int
        0-based position in the sink, in append order.
    source : str
        Asset class tag of the emitting ledger.
    event : LedgerEvent
        The event payload.
    """

    index: int
    source: str
    event: LedgerEvent

    @property
    def name(self) -> str:
        return self.event.NAME

    def to_dict(self) -> Dict[str, Any]:
        d = self.event.to_dict()
        d["index"] = self.index
        d["source"] = self.source
        return d


@runtime_checkable
class EventSink(Protocol):
    """
    Where a ledger reports its events.

    `append` is called under the ledger's lock, after every precondition has
    passed but before the call's writes are applied. It should not raise; if it
    does, the exception propagates to the caller and the ledger state is left
    as it was before the call.
    """

    def append(self, event: LedgerEvent, *, source: str) -> EventRecord:
        """Append one event. Returns the stored record."""


def _record_matches(
    rec: EventRecord,
    source: Optional[str],
    name: Optional[str],
    asset_id: Optional[int],
) -> bool:
    if source is not None and rec.source != source:
        return False
    if name is not None and rec.name != name:
        return False
    if asset_id is not None and getattr(rec.event, "asset_id", None) != asset_id:
        return False
    return True


class InMemoryEventSink:
    """Thread-safe in-memory sink. Keeps every record in RAM."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._records: List[EventRecord] = []

    def append(self, event: LedgerEvent, *, source: str) -> EventRecord:
        with self._lock:
            rec = EventRecord(index=len(self._records), source=source, event=event)
            self._records.append(rec)
        return rec

    def get_events(
        self,
        *,
        source: Optional[str] = None,
        name: Optional[str] = None,
        asset_id: Optional[int] = None,
    ) -> List[EventRecord]:
        with self._lock:
            return [r for r in self._records if _record_matches(r, source, name, asset_id)]

    @property
    def events(self) -> List[LedgerEvent]:
        with self._lock:
            return [r.event for r in self._records]

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __iter__(self) -> Iterator[EventRecord]:
        return iter(self.get_events())


class NullEventSink:
    """A sink that drops everything."""

    def append(self, event: LedgerEvent, *, source: str) -> EventRecord:
        # Return a record to keep call sites simple, even though it's not stored.
        return EventRecord(index=-1, source=source, event=event)


class LoggingEventSink:
    """
    Emit each event as a log record (`event`, `source` and `event_args` in
    `extra`), then hand it to `inner` if one is given.
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        *,
        level: int = logging.INFO,
        inner: Optional[EventSink] = None,
    ) -> None:
        self._log = logger or logging.getLogger("ledger.events")
        self._level = level
        self._inner = inner
        self._lock = threading.Lock()
        self._count = 0

    def append(self, event: LedgerEvent, *, source: str) -> EventRecord:
        payload = event.to_dict()
        self._log.log(
            self._level,
            "%s.%s",
            source,
            event.NAME,
            extra={"event": event.NAME, "source": source, "event_args": payload["args"]},
        )
        if self._inner is not None:
            return self._inner.append(event, source=source)
        with self._lock:
            rec = EventRecord(index=self._count, source=source, event=event)
            self._count += 1
        return rec


__all__ = [
    "SOURCE_FUNGIBLE",
    "SOURCE_UNIQUE",
    "EventRecord",
    "EventSink",
    "InMemoryEventSink",
    "NullEventSink",
    "LoggingEventSink",
]
