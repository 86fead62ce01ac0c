from __future__ import annotations

import logging
import struct
from collections.abc import Sequence
from pathlib import Path
from typing import IO, Any

import numpy as np
from numpy.typing import NDArray

from .config import DEFAULT_SAMPLE_RATE
from .errors import ContainerFormatError, ContainerWriteError

_LOGGER = logging.getLogger("kick909.audio")

IntArray = NDArray[np.int32]
AudioNumbers = NDArray[np.floating[Any]] | Sequence[float]

SAMPLE_RATE = DEFAULT_SAMPLE_RATE

PCM24_MAX = 8_388_607  # 2**23 - 1
PCM24_MIN = -8_388_608
NUM_CHANNELS = 1
BITS_PER_SAMPLE = 24
BLOCK_ALIGN = NUM_CHANNELS * BITS_PER_SAMPLE // 8
PCM_FORMAT = 1
FMT_CHUNK_SIZE = 16
HEADER_SIZE = 44

# RIFF/WAVE/fmt/data, all little-endian.
_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")
_UINT32_MAX = 0xFFFF_FFFF


def build_header(sample_count: int, sample_rate: int) -> bytes:
    """Pack the fixed 44-byte header for ``sample_count`` mono 24-bit samples."""

    if sample_count < 0:
        raise ContainerFormatError(f"sample_count must be non-negative, got {sample_count}")
    if not 0 < sample_rate <= _UINT32_MAX // BLOCK_ALIGN:
        raise ContainerFormatError(f"sample_rate {sample_rate} does not fit the fmt chunk")
    data_size = sample_count * BLOCK_ALIGN
    if data_size + HEADER_SIZE - 8 > _UINT32_MAX:
        raise ContainerFormatError(f"{sample_count} samples exceed the 4 GiB RIFF limit")
    return _HEADER.pack(
        b"RIFF",
        HEADER_SIZE - 8 + data_size,
        b"WAVE",
        b"fmt ",
        FMT_CHUNK_SIZE,
        PCM_FORMAT,
        NUM_CHANNELS,
        sample_rate,
        sample_rate * BLOCK_ALIGN,
        BLOCK_ALIGN,
        BITS_PER_SAMPLE,
        b"data",
        data_size,
    )


def _round_half_away(values: NDArray[np.float64]) -> NDArray[np.float64]:
    magnitude = np.abs(values)
    whole = np.floor(magnitude)
    # The fractional part is exact, so ties are detected without the +0.5 rounding error.
    whole += (magnitude - whole) >= 0.5
    return np.copysign(whole, values)


def quantize_pcm24(samples: AudioNumbers) -> IntArray:
    """Clip, scale, round and clip again into the signed 24-bit range.

    Positive full scale is ``PCM24_MAX``; a clipped -1.0 lands on ``PCM24_MIN``
    so both rails of the 24-bit range are reachable. NaN encodes as silence.
    """

    mono = np.nan_to_num(np.asarray(samples, dtype=np.float64).reshape(-1), nan=0.0)
    clipped = np.clip(mono, -1.0, 1.0)
    rounded = _round_half_away(clipped * PCM24_MAX)
    rounded[clipped == -1.0] = PCM24_MIN
    return np.clip(rounded, PCM24_MIN, PCM24_MAX).astype(np.int32)


def encode_pcm24(samples: AudioNumbers) -> bytes:
    """Encode samples as packed 3-byte little-endian two's complement."""

    quantized = quantize_pcm24(samples).astype("<i4")
    return quantized.view(np.uint8).reshape(-1, 4)[:, :3].tobytes()


def encode_container(samples: AudioNumbers, sample_rate: int) -> bytes:
    mono = np.asarray(samples, dtype=np.float64).reshape(-1)
    return build_header(mono.size, sample_rate) + encode_pcm24(mono)


def _write_all(sink: IO[bytes], payload: bytes) -> int:
    view = memoryview(payload)
    total = 0
    while total < len(view):
        written = sink.write(view[total:])
        if written is None:
            # Non-blocking raw stream with nothing accepted.
            raise ContainerWriteError("sink would block")
        if written <= 0:
            raise ContainerWriteError(f"sink accepted no bytes after {total} of {len(view)}")
        total += written
    return total


def write_container(sink: IO[bytes], samples: AudioNumbers, sample_rate: int) -> int:
    """Write the complete container to ``sink`` and return the number of bytes written.

    The header needs the full sample count, so the buffer is encoded before the
    first byte goes out. The first failing write aborts; nothing is retried or
    cleaned up.
    """

    mono = np.asarray(samples, dtype=np.float64).reshape(-1)
    header = build_header(mono.size, sample_rate)
    data = encode_pcm24(mono)
    try:
        written = _write_all(sink, header)
        written += _write_all(sink, data)
        flush = getattr(sink, "flush", None)
        if callable(flush):
            flush()
    except OSError as exc:
        raise ContainerWriteError(f"failed to write WAV data: {exc}") from exc
    _LOGGER.debug("Wrote %d samples (%d bytes) at %d Hz", mono.size, written, sample_rate)
    return written


def write_wav(path: str | Path, samples: AudioNumbers, sample_rate: int = SAMPLE_RATE) -> Path:
    """Write ``samples`` to ``path`` as a mono 24-bit PCM WAV file."""

    target = Path(path)
    try:
        handle = target.open("wb")
    except OSError as exc:
        raise ContainerWriteError(f"failed to open {target} for writing: {exc}") from exc
    with handle:
        write_container(handle, samples, sample_rate)
    return target
