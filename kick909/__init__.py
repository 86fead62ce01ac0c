from __future__ import annotations

from .audio import (
    PCM24_MAX,
    PCM24_MIN,
    SAMPLE_RATE,
    build_header,
    encode_container,
    encode_pcm24,
    quantize_pcm24,
    write_container,
    write_wav,
)
from .config import ControlParameters, SynthesisConfig
from .errors import ContainerFormatError, ContainerWriteError, InvalidConfigError, Kick909Error
from .main import render, save_wav
from .synth import KickFrame, KickTiming, iter_kick_frames, kick_timing, synthesize

__all__ = [
    "PCM24_MAX",
    "PCM24_MIN",
    "SAMPLE_RATE",
    "ContainerFormatError",
    "ContainerWriteError",
    "ControlParameters",
    "InvalidConfigError",
    "Kick909Error",
    "KickFrame",
    "KickTiming",
    "SynthesisConfig",
    "build_header",
    "encode_container",
    "encode_pcm24",
    "iter_kick_frames",
    "kick_timing",
    "quantize_pcm24",
    "render",
    "save_wav",
    "synthesize",
    "write_container",
    "write_wav",
]

__version__ = "0.1.0"
