# fortune_kline/core/logging_layer.py
# Journal Layer
# FORTUNE-KLINE v1.0.0
#
# Scope: Event-sourced, in-memory journal of recoveries made during a walk.
# No file IO. No global mutable state. No wall clock: every event carries the
# caller's logical step (the age being processed, 0 for request-level events).
#
# Canonical import:
#   from fortune_kline.core.logging_layer import EventLogger, Event, EventFilter
#
# Dependencies: fortune_kline.core.integrity_layer
# Prohibited: datetime.now(), uuid, random, file IO, global mutable state

# ===========================================================================
# SECTION 1 -- STDLIB IMPORTS
# ===========================================================================

import hashlib
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

# ===========================================================================
# SECTION 2 -- INTEGRITY DEPENDENCY
# ===========================================================================

from fortune_kline.core.integrity_layer import (
    ChainVerificationResult,
    HashChain,
    IntegrityLayer,
)

# ===========================================================================
# SECTION 3 -- CONSTANTS
# ===========================================================================

_NAN_SENTINEL: str = "NaN_DETECTED"
_INF_SENTINEL: str = "Inf_DETECTED"

_HASH_SEP: str = "|"

_GENESIS: str = "FORTUNE-KLINE journal v1"

# Event types emitted by the engine.
FACT_DEFAULTED: str = "FACT_DEFAULTED"
CANDIDATE_DEFAULTED: str = "CANDIDATE_DEFAULTED"
DIRECTION_FALLBACK: str = "DIRECTION_FALLBACK"
STEP_NUDGED: str = "STEP_NUDGED"
BOUNDARY_REFLECTED: str = "BOUNDARY_REFLECTED"
RECORD_REJECTED: str = "RECORD_REJECTED"
WALK_COMPLETED: str = "WALK_COMPLETED"

# ===========================================================================
# SECTION 4 -- DATACLASSES: Event, EventFilter
# ===========================================================================

@dataclass(frozen=True)
class Event:
    """
    Record of a single journal event.

    Fields
    ------
    id    : Deterministic identifier derived from the instance counter.
    type  : Category string (e.g. FACT_DEFAULTED, STEP_NUDGED).
    step  : Caller-supplied logical step. Never generated internally.
    data  : Sanitized payload. NaN/Inf replaced with sentinel strings.
    hash  : SHA-256 hex digest over (id, type, step, data).
    """
    id: str
    type: str
    step: int
    data: Dict[str, Any]
    hash: str


@dataclass
class EventFilter:
    """
    Filter specification for EventLogger.query_events().

    All fields are optional. Omitted fields apply no constraint.

    Fields
    ------
    event_type : Only events whose .type equals this value.
    start_step : Only events with step >= start_step.
    end_step   : Only events with step <= end_step.
    limit      : At most this many events, oldest first.
    """
    event_type: Optional[str] = None
    start_step: Optional[int] = None
    end_step: Optional[int] = None
    limit: Optional[int] = None


# ===========================================================================
# SECTION 5 -- INTERNAL HELPERS
# ===========================================================================

def _sanitize_numeric(value: Any) -> Any:
    """Replace float NaN or Inf with the appropriate sentinel string. Never raises."""
    if isinstance(value, float):
        if math.isnan(value):
            return _NAN_SENTINEL
        if math.isinf(value):
            return _INF_SENTINEL
    return value


def _sanitize_data(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: _sanitize_numeric(v) for k, v in data.items()}


def _compute_hash(
    event_id: str,
    event_type: str,
    step: int,
    data: Dict[str, Any],
) -> str:
    """
    SHA-256 over id | type | step | repr(sorted(data.items())).

    sorted() makes the preimage independent of dict insertion order.
    """
    sorted_items: str = repr(sorted(data.items()))
    preimage: str = (
        event_id
        + _HASH_SEP
        + event_type
        + _HASH_SEP
        + str(step)
        + _HASH_SEP
        + sorted_items
    )
    return hashlib.sha256(preimage.encode("ascii", errors="replace")).hexdigest()


def _make_event_id(counter: int) -> str:
    return "EVT-{:016d}".format(counter)


def _check_step(name: str, step: Any) -> None:
    if step is None:
        raise JournalError(name + " must be caller-supplied; None is not permitted")
    if isinstance(step, bool) or not isinstance(step, int):
        raise JournalError(
            "{} must be an int; got: {}".format(name, type(step))
        )
    if step < 0:
        raise JournalError("{} must be >= 0; got: {}".format(name, step))


# ===========================================================================
# SECTION 6 -- EventLogger
# ===========================================================================

class EventLogger:
    """
    Event-sourced journal with deterministic hash-chain integrity.

    Storage
    -------
    Events are held in an instance-level list. Each EventLogger is fully
    independent; one journal belongs to one request.

    Zero lost events
    ----------------
    log_event() raises JournalError on any failure condition instead of
    silently discarding the event.

    Chain
    -----
    Every stored event is also appended to a HashChain. verify_integrity()
    recomputes the chain and detects any payload edited after logging.
    """

    def __init__(self) -> None:
        self._store: List[Event] = []
        self._counter: int = 0
        self._integrity: IntegrityLayer = IntegrityLayer()
        self._chain: HashChain = self._integrity.init_hash_chain(_GENESIS)

    # -----------------------------------------------------------------------
    # SECTION 6.1 -- log_event
    # -----------------------------------------------------------------------

    def log_event(self, event_type: str, data: Dict[str, Any], step: int) -> str:
        """
        Record one event. Return the assigned event ID.

        Parameters
        ----------
        event_type : Non-empty category string.
        data       : Key-value payload. Float values are sanitized; all
                     other values must be JSON-serializable.
        step       : Caller-supplied logical step (age), >= 0.

        Raises
        ------
        JournalError : If event_type is empty, data is not a dict, step is
                       invalid or the payload cannot be chained.
        """
        if not event_type or not isinstance(event_type, str):
            raise JournalError("event_type must be a non-empty string")
        if not isinstance(data, dict):
            raise JournalError(
                "data must be a dict; got: {}".format(type(data))
            )
        _check_step("step", step)

        sanitized: Dict[str, Any] = _sanitize_data(data)
        try:
            self._integrity.append_to_chain(self._chain, event_type, sanitized, step)
        except (TypeError, ValueError) as exc:
            raise JournalError("payload is not JSON-serializable: {}".format(exc)) from exc

        self._counter += 1
        event_id: str = _make_event_id(self._counter)
        event = Event(
            id=event_id,
            type=event_type,
            step=step,
            data=sanitized,
            hash=_compute_hash(event_id, event_type, step, sanitized),
        )
        self._store.append(event)
        return event_id

    # -----------------------------------------------------------------------
    # SECTION 6.2 -- query_events
    # -----------------------------------------------------------------------

    def query_events(self, filter: EventFilter) -> List[Event]:
        """
        Return events matching the filter, oldest first.

        Filtering order: event_type, start_step, end_step, then limit.

        Raises
        ------
        JournalError : If filter is None.
        """
        if filter is None:
            raise JournalError("filter must not be None")

        results: List[Event] = []
        for event in self._store:
            if filter.event_type is not None and event.type != filter.event_type:
                continue
            if filter.start_step is not None and event.step < filter.start_step:
                continue
            if filter.end_step is not None and event.step > filter.end_step:
                continue
            results.append(event)

        if filter.limit is not None:
            results = results[: filter.limit]

        return results

    # -----------------------------------------------------------------------
    # SECTION 6.3 -- get_event_stream
    # -----------------------------------------------------------------------

    def get_event_stream(self, start_step: int) -> Iterator[Event]:
        """
        Yield events in insertion order whose step is >= start_step.

        Raises
        ------
        JournalError : If start_step is None, not an int, or negative.
        """
        _check_step("start_step", start_step)
        for event in self._store:
            if event.step >= start_step:
                yield event

    # -----------------------------------------------------------------------
    # SECTION 6.4 -- utilities
    # -----------------------------------------------------------------------

    def event_count(self) -> int:
        return len(self._store)

    def chain_head(self) -> str:
        """Hash of the latest chained event; identical journals share it."""
        return self._chain.head()

    def verify_integrity(self) -> ChainVerificationResult:
        return self._integrity.verify_chain(self._chain)


# ===========================================================================
# SECTION 7 -- EXCEPTIONS
# ===========================================================================

class JournalError(Exception):
    """
    Raised by EventLogger when an invariant is violated.

    Never silently swallowed. Silent failure is prohibited (zero lost
    events invariant).
    """


__all__ = [
    "Event",
    "EventFilter",
    "EventLogger",
    "JournalError",
    "FACT_DEFAULTED",
    "CANDIDATE_DEFAULTED",
    "DIRECTION_FALLBACK",
    "STEP_NUDGED",
    "BOUNDARY_REFLECTED",
    "RECORD_REJECTED",
    "WALK_COMPLETED",
]
