# tests/unit/core/test_logging_layer.py
# Target: fortune_kline/core/logging_layer.py
# No mocks, deterministic.

import pytest

from fortune_kline.core.logging_layer import (
    FACT_DEFAULTED,
    STEP_NUDGED,
    EventFilter,
    EventLogger,
    JournalError,
)


def _filled_logger() -> EventLogger:
    logger = EventLogger()
    logger.log_event(FACT_DEFAULTED, {"age": 1}, 1)
    logger.log_event(STEP_NUDGED, {"open": 50}, 2)
    logger.log_event(FACT_DEFAULTED, {"age": 3}, 3)
    logger.log_event(FACT_DEFAULTED, {"age": 4}, 4)
    return logger


# =============================================================================
# SECTION 1 -- log_event
# =============================================================================

class TestLogEvent:
    def test_ids_are_sequential(self):
        logger = EventLogger()
        assert logger.log_event(FACT_DEFAULTED, {}, 1) == "EVT-0000000000000001"
        assert logger.log_event(FACT_DEFAULTED, {}, 2) == "EVT-0000000000000002"

    def test_event_count(self):
        assert _filled_logger().event_count() == 4

    def test_non_finite_values_sanitized(self):
        logger = EventLogger()
        logger.log_event(STEP_NUDGED, {"a": float("nan"), "b": float("inf"), "c": 1.5}, 0)
        event = logger.query_events(EventFilter())[0]
        assert event.data == {"a": "NaN_DETECTED", "b": "Inf_DETECTED", "c": 1.5}

    def test_hash_independent_of_key_order(self):
        a, b = EventLogger(), EventLogger()
        a.log_event(STEP_NUDGED, {"x": 1, "y": 2}, 1)
        b.log_event(STEP_NUDGED, {"y": 2, "x": 1}, 1)
        assert a.query_events(EventFilter())[0].hash == b.query_events(EventFilter())[0].hash

    @pytest.mark.parametrize("event_type", ["", None, 5])
    def test_bad_type_raises(self, event_type):
        with pytest.raises(JournalError):
            EventLogger().log_event(event_type, {}, 0)  # type: ignore

    def test_non_dict_data_raises(self):
        with pytest.raises(JournalError):
            EventLogger().log_event(STEP_NUDGED, [1, 2], 0)  # type: ignore

    @pytest.mark.parametrize("step", [None, -1, True, 1.0, "1"])
    def test_bad_step_raises(self, step):
        with pytest.raises(JournalError):
            EventLogger().log_event(STEP_NUDGED, {}, step)  # type: ignore

    def test_unserializable_payload_raises_and_is_not_counted(self):
        logger = EventLogger()
        with pytest.raises(JournalError, match="JSON-serializable"):
            logger.log_event(STEP_NUDGED, {"obj": object()}, 0)
        assert logger.event_count() == 0
        assert logger.log_event(STEP_NUDGED, {}, 0) == "EVT-0000000000000001"


# =============================================================================
# SECTION 2 -- queries
# =============================================================================

class TestQueries:
    def test_filter_by_type(self):
        events = _filled_logger().query_events(EventFilter(event_type=FACT_DEFAULTED))
        assert [e.step for e in events] == [1, 3, 4]

    def test_filter_by_step_window(self):
        events = _filled_logger().query_events(EventFilter(start_step=2, end_step=3))
        assert [e.step for e in events] == [2, 3]

    def test_limit_applied_last(self):
        events = _filled_logger().query_events(EventFilter(event_type=FACT_DEFAULTED, limit=2))
        assert [e.step for e in events] == [1, 3]

    def test_none_filter_raises(self):
        with pytest.raises(JournalError):
            EventLogger().query_events(None)  # type: ignore

    def test_event_stream(self):
        assert [e.step for e in _filled_logger().get_event_stream(3)] == [3, 4]

    def test_event_stream_bad_start(self):
        with pytest.raises(JournalError):
            list(EventLogger().get_event_stream(-1))


# =============================================================================
# SECTION 3 -- chain integrity
# =============================================================================

class TestIntegrity:
    def test_fresh_and_filled_logs_verify(self):
        assert EventLogger().verify_integrity().valid
        assert _filled_logger().verify_integrity().valid

    def test_identical_logs_share_head(self):
        assert _filled_logger().chain_head() == _filled_logger().chain_head()

    def test_head_moves_on_append(self):
        logger = EventLogger()
        before = logger.chain_head()
        logger.log_event(STEP_NUDGED, {}, 0)
        assert logger.chain_head() != before

    def test_tampering_detected(self):
        logger = _filled_logger()
        logger.query_events(EventFilter())[1].data["open"] = 99
        result = logger.verify_integrity()
        assert not result.valid
        assert result.broken_at == 1
