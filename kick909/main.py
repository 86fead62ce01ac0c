from __future__ import annotations

import logging
from pathlib import Path
from typing import IO

from .audio import write_container, write_wav
from .config import ControlParameters, SynthesisConfig
from .logging_utils import log_exception
from .synth import FloatArray, synthesize

_LOGGER = logging.getLogger("kick909.main")


def render(
    params: ControlParameters | None = None,
    config: SynthesisConfig | None = None,
) -> FloatArray:
    if params is None:
        params = ControlParameters()
    if config is None:
        config = SynthesisConfig.from_env()
    outside = params.out_of_range()
    if outside:
        _LOGGER.warning(
            "Knobs outside [0, 1] are used as given: %s",
            ", ".join(f"{name}={getattr(params, name)}" for name in outside),
        )
    _LOGGER.debug(
        "Rendering kick %s (%d samples @ %s Hz)",
        params.model_dump(),
        config.sample_count,
        config.sample_rate,
    )
    return synthesize(params, config.sample_count, config.sample_rate)


def save_wav(
    destination: str | Path | IO[bytes],
    params: ControlParameters | None = None,
    config: SynthesisConfig | None = None,
) -> int:
    """Render a kick and write it as a WAV container; returns bytes written."""

    if config is None:
        config = SynthesisConfig.from_env()
    try:
        audio = render(params, config)
        sample_rate = int(config.sample_rate)
        match destination:
            case str() | Path():
                path = write_wav(destination, audio, sample_rate)
                return path.stat().st_size
            case _:
                return write_container(destination, audio, sample_rate)
    except Exception as exc:
        log_exception("save_wav", exc)
        raise
