from __future__ import annotations

import threading

import pytest

from vetted import (
    FieldAccessError,
    InvalidInitialState,
    RejectionPolicy,
    UnknownFieldError,
    ValidatedEntity,
    ValidationRejected,
)
from vetted.config import reset_settings
from vetted.entity import derived, internal, read_only, sequence, validated
from vetted.entity.rules import in_range, not_blank


class Gauge(ValidatedEntity):
    __slots__ = ()

    label = read_only(rule=not_blank())
    level = validated(in_range(0, 100), default=0)
    readings = sequence(in_range(0, 100))
    calibration = internal(default=1.0)

    @derived(default=0)
    def peak(self) -> int:
        return max(self.readings)


def test_read_after_construct_returns_provided_values() -> None:
    gauge = Gauge(label="boiler", level=40, readings=[10, 20])
    assert gauge.read("label") == "boiler"
    assert gauge.read("level") == 40
    assert gauge.read("readings") == (10, 20)
    assert gauge.label == "boiler"


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0, 0), (100, 100), (55, 55), (-1, 30), (101, 30), (100.5, 30)],
)
def test_mutate_respects_bounds(value: float, expected: float) -> None:
    gauge = Gauge(label="boiler", level=30)
    result = gauge.mutate("level", value)
    assert gauge.read("level") == expected
    assert result.ok is (expected == value)


def test_repeated_reads_are_stable() -> None:
    gauge = Gauge(label="boiler", level=12)
    assert {gauge.read("level") for _ in range(5)} == {12}


def test_rejected_mutation_returns_result() -> None:
    gauge = Gauge(label="boiler", level=10)
    result = gauge.mutate("level", 250)
    assert not result
    assert result.op == "mutate"
    assert result.field == "level"
    assert result.value == 250
    assert result.previous == result.current == 10
    assert result.reason == "250 is outside [0, 100]"


def test_raise_policy_signals_rejection() -> None:
    gauge = Gauge(label="boiler", level=10, policy=RejectionPolicy.RAISE)
    with pytest.raises(ValidationRejected) as excinfo:
        gauge.mutate("level", 250)
    assert excinfo.value.result.reason == "250 is outside [0, 100]"
    assert gauge.level == 10


def test_policy_defaults_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VETTED_REJECTION_POLICY", "raise")
    reset_settings()
    gauge = Gauge(label="boiler")
    assert gauge.policy is RejectionPolicy.RAISE
    with pytest.raises(ValidationRejected):
        gauge.append("readings", 500)


def test_append_validates_each_element() -> None:
    gauge = Gauge(label="boiler")
    assert not gauge.append("readings", 105)
    assert gauge.append("readings", 80)
    assert gauge.readings == (80,)


def test_sequence_accessor_returns_copy() -> None:
    gauge = Gauge(label="boiler", readings=[1, 2])
    readings = gauge.readings
    assert isinstance(readings, tuple)
    snapshot = gauge.snapshot()
    with pytest.raises(TypeError):
        snapshot["level"] = 99  # type: ignore[index]
    assert gauge.readings == (1, 2)


def test_snapshot_hides_internal_fields() -> None:
    gauge = Gauge(label="boiler")
    assert set(gauge.snapshot()) == {"label", "level", "readings"}


def test_internal_field_is_not_readable() -> None:
    gauge = Gauge(label="boiler")
    with pytest.raises(FieldAccessError):
        gauge.read("calibration")
    with pytest.raises(FieldAccessError):
        _ = gauge.calibration
    assert gauge._get("calibration") == 1.0


def test_direct_assignment_is_refused() -> None:
    gauge = Gauge(label="boiler")
    with pytest.raises(FieldAccessError):
        gauge.level = 50
    with pytest.raises(FieldAccessError):
        gauge.label = "other"
    with pytest.raises(FieldAccessError):
        gauge.anything = 1  # type: ignore[attr-defined]
    with pytest.raises(FieldAccessError):
        del gauge.level
    assert not hasattr(gauge, "__dict__")


def test_read_only_field_cannot_be_mutated() -> None:
    gauge = Gauge(label="boiler")
    with pytest.raises(FieldAccessError):
        gauge.mutate("label", "other")
    with pytest.raises(FieldAccessError):
        gauge.append("level", 1)


def test_unknown_names() -> None:
    gauge = Gauge(label="boiler")
    with pytest.raises(UnknownFieldError):
        gauge.read("missing")
    with pytest.raises(UnknownFieldError):
        gauge.derive("missing")


def test_derive_falls_back_to_default() -> None:
    gauge = Gauge(label="boiler")
    assert gauge.derive("peak") == 0
    gauge.append("readings", 70)
    gauge.append("readings", 90)
    assert gauge.derive("peak") == 90
    assert gauge.peak == 90


def test_strict_construction_rejects_invalid_values() -> None:
    with pytest.raises(InvalidInitialState) as excinfo:
        Gauge(label=" ", level=150)
    assert len(excinfo.value.problems) == 2


def test_construction_rejects_unknown_and_missing_fields() -> None:
    with pytest.raises(InvalidInitialState):
        Gauge(label="boiler", colour="red")
    with pytest.raises(InvalidInitialState):
        Gauge()


def test_lenient_construction_keeps_values(caplog: pytest.LogCaptureFixture) -> None:
    gauge = Gauge(label="boiler", level=150, strict=False)
    assert gauge.level == 150
    assert "Accepting invalid initial state" in caplog.text
    assert not gauge.mutate("level", 120)
    assert gauge.mutate("level", 50)


def test_lenient_construction_still_needs_storable_values() -> None:
    with pytest.raises(InvalidInitialState):
        Gauge(label="boiler", readings=5, strict=False)


def test_reserved_field_names_are_refused() -> None:
    with pytest.raises(TypeError):

        class Broken(ValidatedEntity):
            policy = validated()


def test_concurrent_appends_are_not_lost() -> None:
    gauge = Gauge(label="boiler")

    def _worker() -> None:
        for _ in range(50):
            gauge.append("readings", 1)

    threads = [threading.Thread(target=_worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(gauge.readings) == 200


def test_derive_never_raises_on_incompatible_values() -> None:
    class Mixed(ValidatedEntity):
        __slots__ = ()

        values = sequence(in_range(0, 100))

        @derived(default=-1)
        def total(self) -> float:
            return sum(self.values) + "units"  # type: ignore[operator]

    mixed = Mixed(values=[1, 2])
    assert mixed.derive("total") == -1
