"""
Kick voice:

1. Timing: knob values -> sample counts, step sizes and sweep frequencies
2. Envelopes: linear attack/decay amplitude ramp and a rising pitch fraction
3. Oscillator: sine with a start -> body pitch sweep and a short DC click
"""

from __future__ import annotations

import math
import sys
from collections.abc import Iterator
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np
from numpy.typing import NDArray

from .config import ControlParameters
from .errors import InvalidConfigError

FloatArray = NDArray[np.float64]

TWO_PI = math.tau

# =============================================================================
# CONSTANTS
# =============================================================================

ATTACK_BASE = 0.001  # seconds
ATTACK_RANGE = 0.005
DECAY_BASE = 0.15
DECAY_RANGE = 0.3
BASE_FREQ = 40.0  # Hz, settled body pitch
BASE_FREQ_RANGE = 40.0
START_FREQ = 300.0  # Hz, initial transient pitch
START_FREQ_RANGE = 200.0
CLICK_DURATION = 0.0005
CLICK_OFFSET = 0.5


# =============================================================================
# TIMING
# =============================================================================


@dataclass(frozen=True, slots=True)
class KickTiming:
    """Quantities derived once per render from the knobs and sample rate."""

    attack_time: float
    decay_time: float
    base_freq: float
    start_freq: float
    attack_samples: int
    decay_samples: int
    click_samples: int
    attack_step: float
    decay_step: float
    pitch_step: float


def _sample_count(seconds: float, sample_rate: float) -> int:
    samples = seconds * sample_rate
    if math.isnan(samples):
        return 0
    if math.isinf(samples):
        # An overflowing window never closes within a render.
        return sys.maxsize if samples > 0 else -sys.maxsize
    return math.floor(samples)


def _step(count: int) -> float:
    # Degenerate windows finish in a single sample.
    return 1.0 / count if count > 0 else 1.0


def kick_timing(params: ControlParameters, sample_rate: float) -> KickTiming:
    attack_time = ATTACK_BASE + ATTACK_RANGE * params.attack
    decay_time = DECAY_BASE + DECAY_RANGE * params.decay
    attack_samples = _sample_count(attack_time, sample_rate)
    decay_samples = _sample_count(decay_time, sample_rate)
    return KickTiming(
        attack_time=attack_time,
        decay_time=decay_time,
        base_freq=BASE_FREQ + BASE_FREQ_RANGE * params.tune,
        start_freq=START_FREQ + START_FREQ_RANGE * params.tune,
        attack_samples=attack_samples,
        decay_samples=decay_samples,
        click_samples=_sample_count(CLICK_DURATION, sample_rate),
        attack_step=_step(attack_samples),
        decay_step=_step(decay_samples),
        pitch_step=_step(decay_samples),
    )


# =============================================================================
# ENVELOPES + OSCILLATOR
# =============================================================================


@dataclass(slots=True)
class EnvelopeState:
    """Running accumulators for a single render."""

    amplitude: float = 0.0
    pitch: float = 0.0
    phase: float = 0.0

    def advance(self, n: int, timing: KickTiming) -> None:
        # Attack and decay are selected by index alone; there is no sustain.
        if n < timing.attack_samples:
            self.amplitude = min(self.amplitude + timing.attack_step, 1.0)
        else:
            self.amplitude = max(self.amplitude - timing.decay_step, 0.0)

        if n < timing.decay_samples:
            self.pitch = min(self.pitch + timing.pitch_step, 1.0)

    def oscillate(self, frequency: float, sample_rate: float) -> float:
        # math.sin rejects infinity; a runaway phase yields NaN, which the writer encodes as silence.
        value = math.sin(self.phase) if math.isfinite(self.phase) else math.nan
        self.phase += TWO_PI * frequency / sample_rate
        # Single subtraction, not a modulo.
        if self.phase > TWO_PI:
            self.phase -= TWO_PI
        return value


class KickFrame(NamedTuple):
    index: int
    amplitude: float
    pitch: float
    frequency: float
    value: float


def sweep_frequency(timing: KickTiming, pitch: float) -> float:
    return timing.start_freq * (1.0 - pitch) + timing.base_freq * pitch


def iter_kick_frames(
    params: ControlParameters,
    sample_count: int,
    sample_rate: float,
) -> Iterator[KickFrame]:
    """Yield every sample of the kick together with the envelope values behind it."""

    if sample_count < 0:
        raise InvalidConfigError(f"sample_count must be non-negative, got {sample_count}")
    timing = kick_timing(params, sample_rate)
    state = EnvelopeState()
    gain = params.level
    for n in range(sample_count):
        state.advance(n, timing)
        frequency = sweep_frequency(timing, state.pitch)
        value = state.oscillate(frequency, sample_rate)
        if n < timing.click_samples:
            value += CLICK_OFFSET
        # No clipping here: the PCM writer is the only normalisation boundary.
        value *= state.amplitude * gain
        yield KickFrame(n, state.amplitude, state.pitch, frequency, value)


def synthesize(
    params: ControlParameters,
    sample_count: int,
    sample_rate: float,
) -> FloatArray:
    """Render one kick into a read-only buffer of exactly ``sample_count`` samples."""

    if sample_count < 0:
        raise InvalidConfigError(f"sample_count must be non-negative, got {sample_count}")
    frames = iter_kick_frames(params, sample_count, sample_rate)
    buffer: FloatArray = np.fromiter(
        (frame.value for frame in frames),
        dtype=np.float64,
        count=sample_count,
    )
    buffer.flags.writeable = False
    return buffer
