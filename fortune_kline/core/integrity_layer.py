# fortune_kline/core/integrity_layer.py
# Version: 1.0.0
# Integrity / Hash-Chain Layer
#
# =============================================================================
# SCOPE
# =============================================================================
#
# Determinism evidence for the sequence engine:
#
#   fingerprint_points(points)  -- SHA-256 over canonical JSON of a sequence.
#   fingerprint_rules(rules)    -- SHA-256 over canonical JSON of a rule table.
#   IntegrityLayer              -- append-only hash chain used by the event
#                                  journal for tamper detection.
#
# DETERMINISM GUARANTEES:
#   DET-01  No stochastic operations. No uuid, no os.urandom, no random.
#   DET-02  All inputs passed explicitly. No module-level mutable reads.
#   DET-03  No IO of any kind.
#   DET-04  All hashing is SHA-256 over canonical (sorted-key, compact,
#           ASCII) JSON.
#
# PROHIBITED ACTIONS CONFIRMED ABSENT:
#   - No logging calls
#   - No print statements
#   - No os.environ / os.getenv
#   - No module-level mutable containers
#
# =============================================================================

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from hashlib import sha256
from typing import Any, Dict, Iterable, List, Optional


# =============================================================================
# SECTION 1: HASH-CHAIN TYPES
# =============================================================================

@dataclass(frozen=True)
class ChainEvent:
    """
    Single event in an append-only hash chain.

    event_id     = SHA-256(prev_hash || event_type || canonical_json(data))
    current_hash = SHA-256(event_id || event_type || canonical_json(data) || prev_hash)

    The caller's logical step is stored for audit but is not part of either
    hash, so the chain certifies content and order only.
    """

    event_id: str
    event_type: str
    data: Dict
    previous_hash: str
    current_hash: str
    step: int


@dataclass(frozen=True)
class ChainVerificationResult:
    """
    Result of a full hash-chain verification pass.

    Attributes
    ----------
    valid : bool
        True only when every event passes linkage and content checks.
    broken_at : Optional[int]
        Zero-based index of the first failing event, or None if valid.
    error_message : Optional[str]
        Description of the first failure, or None if valid.
    """

    valid: bool
    broken_at: Optional[int]
    error_message: Optional[str]


@dataclass
class HashChain:
    """
    Append-only hash chain anchored by SHA-256(genesis_event).

    events grows via IntegrityLayer.append_to_chain(). Mutating a payload
    after appending is detected by verify_chain().
    """

    genesis_hash: str
    events: List[ChainEvent] = field(default_factory=list)

    def head(self) -> str:
        """current_hash of the last event, or genesis_hash when empty."""
        return self.events[-1].current_hash if self.events else self.genesis_hash


# =============================================================================
# SECTION 2: INTERNAL PURE HELPERS
# =============================================================================

def _sha256_hex(data: bytes) -> str:
    return sha256(data).hexdigest()


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (set, frozenset)):
        return sorted(_json_default(o) if isinstance(o, Enum) else o for o in obj)
    if isinstance(obj, tuple):
        return list(obj)
    raise TypeError("not JSON-serializable for fingerprinting: " + type(obj).__name__)


def _canonical_json(obj: Any) -> str:
    """
    Serialize to a canonical JSON string.

    Keys sorted, compact separators, ASCII only. Enum members serialize to
    their value. allow_nan is off: a non-finite float is an engine defect and
    must not be hashed silently.
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=True,
        allow_nan=False,
        default=_json_default,
    )


def _derive_event_id(prev_hash: str, event_type: str, data: Dict) -> str:
    raw: str = prev_hash + event_type + _canonical_json(data)
    return _sha256_hex(raw.encode("utf-8"))


def _derive_current_hash(
    event_id: str,
    event_type: str,
    data: Dict,
    prev_hash: str,
) -> str:
    raw: str = event_id + event_type + _canonical_json(data) + prev_hash
    return _sha256_hex(raw.encode("utf-8"))


# =============================================================================
# SECTION 3: FINGERPRINTS
# =============================================================================

def fingerprint_points(points: Iterable[Any]) -> str:
    """
    SHA-256 of a produced sequence.

    Each point is serialized through its to_dict(). Two runs that produce
    byte-identical sequences produce identical fingerprints.

    Returns
    -------
    str
        64-character lowercase hexadecimal digest.
    """
    payload = [p.to_dict() for p in points]
    return _sha256_hex(_canonical_json(payload).encode("ascii"))


def fingerprint_rules(rules: Any) -> str:
    """
    SHA-256 of a QuantRules table.

    Mapping keys are flattened to strings ("Supportive/clash" for composite
    direction keys) so the canonical form has only string keys.
    """
    payload: Dict[str, Any] = {}
    for name in sorted(vars(rules)):
        value = getattr(rules, name)
        if hasattr(value, "items"):
            flat: Dict[str, Any] = {}
            for key, item in value.items():
                if isinstance(key, tuple):
                    flat_key = "/".join(str(getattr(k, "value", k)) for k in key)
                else:
                    flat_key = str(getattr(key, "value", key))
                flat[flat_key] = getattr(item, "value", item)
            payload[name] = flat
        else:
            payload[name] = value
    return _sha256_hex(_canonical_json(payload).encode("ascii"))


# =============================================================================
# SECTION 4: INTEGRITY LAYER
# =============================================================================

class IntegrityLayer:
    """
    Stateless hash-chain helper.

    No instance variables are set or read during method execution. A new
    instance may be created freely at any call site.

    Methods
    -------
    init_hash_chain(genesis_event)
        Create an empty HashChain anchored to SHA-256(genesis_event).
    append_to_chain(chain, event_type, data, step)
        Append a deterministic ChainEvent (mutates chain).
    verify_chain(chain)
        Check linkage and recompute every content hash.
    """

    def init_hash_chain(self, genesis_event: str) -> HashChain:
        genesis_hash: str = _sha256_hex(genesis_event.encode("utf-8"))
        return HashChain(genesis_hash=genesis_hash, events=[])

    def append_to_chain(
        self,
        chain: HashChain,
        event_type: str,
        data: Dict,
        step: int = 0,
    ) -> ChainEvent:
        """
        Append a new deterministic ChainEvent to an existing chain.

        Parameters
        ----------
        chain : HashChain
            The chain to append to (mutated in place).
        event_type : str
            ASCII label for the event category.
        data : Dict
            JSON-serializable payload. Must remain unchanged after the call.
        step : int
            Caller's logical step (age). Stored, not hashed.

        Returns
        -------
        ChainEvent
            The newly appended event.
        """
        prev_hash: str = chain.head()
        event_id: str = _derive_event_id(prev_hash, event_type, data)
        current_hash: str = _derive_current_hash(event_id, event_type, data, prev_hash)

        event = ChainEvent(
            event_id=event_id,
            event_type=event_type,
            data=data,
            previous_hash=prev_hash,
            current_hash=current_hash,
            step=step,
        )
        chain.events.append(event)
        return event

    def verify_chain(self, chain: HashChain) -> ChainVerificationResult:
        """
        Verify every event for linkage and content integrity. O(n).

        An empty chain is valid by definition.
        """
        for i, event in enumerate(chain.events):
            expected_prev: str = (
                chain.events[i - 1].current_hash if i > 0 else chain.genesis_hash
            )

            if event.previous_hash != expected_prev:
                return ChainVerificationResult(
                    valid=False,
                    broken_at=i,
                    error_message=(
                        "Chain linkage broken at event "
                        + str(i)
                        + ": previous_hash mismatch"
                    ),
                )

            recomputed: str = _derive_current_hash(
                event.event_id,
                event.event_type,
                event.data,
                event.previous_hash,
            )
            if recomputed != event.current_hash:
                return ChainVerificationResult(
                    valid=False,
                    broken_at=i,
                    error_message=(
                        "Content hash mismatch at event "
                        + str(i)
                        + ": event data may have been tampered"
                    ),
                )

        return ChainVerificationResult(
            valid=True,
            broken_at=None,
            error_message=None,
        )


__all__ = [
    "ChainEvent",
    "ChainVerificationResult",
    "HashChain",
    "IntegrityLayer",
    "fingerprint_points",
    "fingerprint_rules",
]
