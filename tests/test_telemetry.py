import pytest

from richtext_engine.runtime import telemetry


def test_unknown_preset_is_rejected() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="verbose")


def test_config_and_preset_are_exclusive() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="development")


def test_span_reraises_and_collects_metadata() -> None:
    with pytest.raises(RuntimeError):
        with telemetry.span("tests::span", metadata={"case": "failure"}) as handle:
            handle.add_metadata("step", 1)
            assert handle.metadata == {"case": "failure", "step": "1"}
            raise RuntimeError("boom")


def test_record_event_rejects_unknown_level() -> None:
    with pytest.raises(ValueError):
        telemetry.record_event("tests.event", level="loud")
