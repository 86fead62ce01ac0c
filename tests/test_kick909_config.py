from __future__ import annotations

import pytest
from pydantic import ValidationError

from kick909.config import DURATION_ENV, SAMPLE_RATE_ENV, ControlParameters, SynthesisConfig
from kick909.errors import InvalidConfigError


def test_control_parameters_defaults() -> None:
    params = ControlParameters()
    assert params.tune == 0.5
    assert params.attack == 0.0
    assert params.decay == 0.5
    assert params.level == 1.0
    assert params.out_of_range() == ()


def test_out_of_range_values_are_kept() -> None:
    params = ControlParameters(tune=3.0, attack=-0.5, decay=0.2, level=1.5)
    assert params.tune == 3.0
    assert params.attack == -0.5
    assert params.out_of_range() == ("tune", "attack", "level")


def test_clamped_copy() -> None:
    params = ControlParameters(tune=3.0, attack=-0.5, decay=0.2, level=1.5)
    clamped = params.clamped()
    assert clamped == ControlParameters(tune=1.0, attack=0.0, decay=0.2, level=1.0)
    assert params.tune == 3.0


def test_control_parameters_are_frozen() -> None:
    params = ControlParameters()
    with pytest.raises(ValidationError):
        params.tune = 0.1  # type: ignore[misc]


def test_control_parameters_reject_unknown_keys() -> None:
    with pytest.raises(ValidationError):
        ControlParameters.model_validate({"tune": 0.5, "tone": 0.2})


def test_synthesis_config_from_duration() -> None:
    config = SynthesisConfig.from_duration(1.0)
    assert config.sample_rate == 48_000.0
    assert config.sample_count == 48_000
    assert config.duration == pytest.approx(1.0)

    short = SynthesisConfig.from_duration(0.25, sample_rate=44_100.0)
    assert short.sample_count == 11_025


def test_synthesis_config_validation() -> None:
    with pytest.raises(ValidationError):
        SynthesisConfig(sample_rate=0.0)
    with pytest.raises(ValidationError):
        SynthesisConfig(sample_count=-1)
    with pytest.raises(InvalidConfigError):
        SynthesisConfig.from_duration(-1.0)


def test_synthesis_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(SAMPLE_RATE_ENV, "96000")
    monkeypatch.setenv(DURATION_ENV, "0.5")
    config = SynthesisConfig.from_env()
    assert config.sample_rate == 96_000.0
    assert config.sample_count == 48_000


def test_synthesis_config_env_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(SAMPLE_RATE_ENV, raising=False)
    monkeypatch.delenv(DURATION_ENV, raising=False)
    assert SynthesisConfig.from_env() == SynthesisConfig()


def test_synthesis_config_env_rejects_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(DURATION_ENV, "one second")
    with pytest.raises(InvalidConfigError):
        SynthesisConfig.from_env()
