import pytest

from fortune_kline.core.exceptions import (
    KLineConsistencyError,
    KLineError,
    KLineInvariantError,
    KLineNumericalError,
    KLineValidationError,
    RuleTableLoadError,
)


class TestKLineErrorBase:
    """KLineError base class -- construction and attributes."""

    def test_construction_stores_message(self):
        exc = KLineError(message="test message")
        assert exc.message == "test message"
        assert str(exc) == "test message"

    def test_defaults(self):
        exc = KLineError(message="msg")
        assert exc.field_name == ""
        assert exc.value is None

    def test_empty_message_raises_value_error(self):
        with pytest.raises(ValueError, match="non-empty string"):
            KLineError(message="")

    def test_non_string_field_name_raises_value_error(self):
        with pytest.raises(ValueError):
            KLineError(message="msg", field_name=123)  # type: ignore[arg-type]

    def test_equality_same_type_same_values(self):
        a = KLineError(message="msg", field_name="f", value=1)
        b = KLineError(message="msg", field_name="f", value=1)
        assert a == b

    def test_equality_different_type(self):
        assert KLineError(message="msg") != "msg"

    def test_repr_contains_class_name(self):
        exc = KLineError(message="msg", field_name="f", value=0)
        assert "KLineError" in repr(exc)
        assert "field_name" in repr(exc)

    @pytest.mark.parametrize("cls", [
        KLineNumericalError,
        KLineValidationError,
        KLineConsistencyError,
        KLineInvariantError,
        RuleTableLoadError,
    ])
    def test_hierarchy(self, cls):
        assert issubclass(cls, KLineError)


class TestConcreteErrors:
    def test_numerical_message(self):
        exc = KLineNumericalError(field_name="body_scale", value=float("nan"))
        assert "body_scale" in exc.message
        assert "non-finite" in exc.message

    def test_numerical_empty_field_raises(self):
        with pytest.raises(ValueError):
            KLineNumericalError(field_name="", value=1.0)

    def test_validation_stores_constraint(self):
        exc = KLineValidationError(field_name="age", value=0, constraint="must be >= 1")
        assert exc.constraint == "must be >= 1"
        assert "must be >= 1" in exc.message
        assert exc.field_name == "age"

    def test_validation_empty_constraint_raises(self):
        with pytest.raises(ValueError):
            KLineValidationError(field_name="age", value=0, constraint="")

    def test_consistency_fields(self):
        exc = KLineConsistencyError("noise_low", 1.2, "noise_high", 1.1, "low < high")
        assert exc.field_name == "noise_low"
        assert exc.value == 1.2
        assert exc.field_b == "noise_high"
        assert exc.value_b == 1.1
        assert "low < high" in exc.message

    def test_invariant_fields(self):
        exc = KLineInvariantError(age=7, invariant="INV-PT-02", detail="flat body")
        assert exc.age == 7
        assert exc.invariant == "INV-PT-02"
        assert "age 7" in exc.message

    def test_rule_table_load_error_keeps_cause(self):
        cause = KLineValidationError(field_name="x", value=1, constraint="c")
        exc = RuleTableLoadError("bad table", cause=cause)
        assert exc.cause is cause
        assert exc.message == "RuleTableLoadError: bad table"

    def test_messages_are_deterministic(self):
        a = KLineNumericalError(field_name="f", value=float("inf"))
        b = KLineNumericalError(field_name="f", value=float("inf"))
        assert a.message == b.message
