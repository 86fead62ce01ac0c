from __future__ import annotations

import logging
import os

from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidConfigError

_LOGGER = logging.getLogger("kick909.config")

DEFAULT_SAMPLE_RATE = 48_000
DEFAULT_DURATION = 1.0
SAMPLE_RATE_ENV = "KICK909_SAMPLE_RATE"
DURATION_ENV = "KICK909_DURATION"

_KNOB_NAMES: tuple[str, ...] = ("tune", "attack", "decay", "level")


class ControlParameters(BaseModel):
    """The four front-panel knobs of the kick voice.

    Each knob is meant to sit in [0, 1] but values are not range-checked:
    out-of-range settings extrapolate the timing and frequency formulas.
    Use ``clamped()`` to opt into the nominal range.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    tune: float = Field(default=0.5, description="Pitch of body and sweep start.")
    attack: float = Field(default=0.0, description="Length of the amplitude ramp.")
    decay: float = Field(default=0.5, description="Length of amplitude and pitch decay.")
    level: float = Field(default=1.0, description="Output gain.")

    def out_of_range(self) -> tuple[str, ...]:
        return tuple(name for name in _KNOB_NAMES if not 0.0 <= getattr(self, name) <= 1.0)

    def clamped(self) -> ControlParameters:
        update = {name: min(max(getattr(self, name), 0.0), 1.0) for name in _KNOB_NAMES}
        return self.model_copy(update=update)


class SynthesisConfig(BaseModel):
    """Sample rate and buffer length for one render."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    sample_rate: float = Field(default=float(DEFAULT_SAMPLE_RATE), gt=0)
    sample_count: int = Field(default=int(DEFAULT_SAMPLE_RATE * DEFAULT_DURATION), ge=0)

    @property
    def duration(self) -> float:
        return self.sample_count / self.sample_rate

    @classmethod
    def from_duration(
        cls,
        duration: float,
        sample_rate: float = float(DEFAULT_SAMPLE_RATE),
    ) -> SynthesisConfig:
        if duration < 0:
            raise InvalidConfigError(f"duration must be non-negative, got {duration}")
        return cls(sample_rate=sample_rate, sample_count=int(sample_rate * duration))

    @classmethod
    def from_env(cls) -> SynthesisConfig:
        sample_rate = _env_float(SAMPLE_RATE_ENV, float(DEFAULT_SAMPLE_RATE))
        duration = _env_float(DURATION_ENV, DEFAULT_DURATION)
        _LOGGER.debug("Synthesis config from env: sample_rate=%s duration=%s", sample_rate, duration)
        return cls.from_duration(duration, sample_rate=sample_rate)


def _env_float(name: str, default: float) -> float:
    configured = os.environ.get(name)
    if not configured:
        return default
    try:
        return float(configured)
    except ValueError as exc:
        raise InvalidConfigError(f"{name} must be a number, got {configured!r}") from exc
