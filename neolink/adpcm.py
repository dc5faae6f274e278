"""Decoder for the DVI-4/IMA ADPCM audio that cameras send."""

import logging
import struct
from dataclasses import dataclass

log = logging.getLogger(__name__)

_FRAME_TYPE_HISILICON = b"\x00\x01"
_HEADER_SIZE = 4  # frame type (2 bytes) + half block size (2 bytes)
_PREDICTOR_SIZE = 4  # last output (2 bytes) + step index (2 bytes)
_I16_MAX = 32767
_USIZE_MAX = (1 << 64) - 1

_SIGN_BIT = 0b1000


class AdpcmDecodingError(ValueError):
    """Raised when ADPCM data cannot be decoded."""


@dataclass(frozen=True)
class _AdpcmSetup:
    max_step_index: int
    steps: tuple[int, ...]
    max_sample_size: int
    changes: tuple[int, ...]


# IMA tables; identical to DVI-4 apart from the block header layout.
_IMA = _AdpcmSetup(
    max_step_index=88,
    steps=(
        7, 8, 9, 10, 11, 12, 13, 14, 16, 17, 19, 21, 23, 25, 28, 31, 34, 37, 41,
        45, 50, 55, 60, 66, 73, 80, 88, 97, 107, 118, 130, 143, 157, 173, 190,
        209, 230, 253, 279, 307, 337, 371, 408, 449, 494, 544, 598, 658, 724,
        796, 876, 963, 1060, 1166, 1282, 1411, 1552, 1707, 1878, 2066, 2272,
        2499, 2749, 3024, 3327, 3660, 4026, 4428, 4871, 5358, 5894, 6484, 7132,
        7845, 8630, 9493, 10442, 11487, 12635, 13899, 15289, 16818, 18500,
        20350, 22385, 24623, 27086, 29794, 32767,
    ),
    max_sample_size=32768,
    changes=(-1, -1, -1, -1, 2, 4, 6, 8, -1, -1, -1, -1, 2, 4, 6, 8),
)


def _fail(message: str) -> AdpcmDecodingError:
    log.error(message)
    return AdpcmDecodingError(message)


def _trunc_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // denominator
    return -quotient if numerator < 0 else quotient


def _nibbles(data: bytes):
    for byte in data:
        yield byte >> 4
        yield byte & 0x0F


def _decode_block(block: bytes, setup: _AdpcmSetup) -> list[int]:
    last_output, step_index = struct.unpack_from("<hH", block, _HEADER_SIZE)
    lowest = -setup.max_sample_size
    highest = setup.max_sample_size - 1
    samples = []
    for nibble in _nibbles(block[_HEADER_SIZE + _PREDICTOR_SIZE:]):
        step_index = min(max(step_index, 0), setup.max_step_index)
        step = setup.steps[step_index]

        # Shift-based approximation, matching the encoder in the camera.
        diff = step >> 3
        if nibble & 0b0100:
            diff += step
        if nibble & 0b0010:
            diff += step >> 1
        if nibble & 0b0001:
            diff += step >> 2
        raw = last_output - diff if nibble & _SIGN_BIT else last_output + diff

        sample = min(max(raw, lowest), highest)
        samples.append(_trunc_div(sample * _I16_MAX, highest))

        step_index += setup.changes[nibble]
        last_output = sample
    return samples


def adpcm_to_pcm(data: bytes) -> bytes:
    """Decode camera ADPCM blocks into signed 16-bit little-endian PCM.

    Every block starts with the frame type ``00 01``, half the block size,
    and the predictor state (last output and step index) to resume from.
    """
    data = bytes(data)
    if len(data) < _HEADER_SIZE:
        raise _fail("ADPCM data is too short for even the magic.")

    frame_type = data[:2]
    if frame_type != _FRAME_TYPE_HISILICON:
        raise _fail(f"Unexpected ADPCM frame type: {frame_type.hex()}")

    block_size = int.from_bytes(data[2:4], "little") * 2
    full_block_size = block_size + _HEADER_SIZE
    # The length test complements the length as a 64-bit word before taking
    # the remainder, so most lengths pass and short tails fail per block.
    if (_USIZE_MAX - len(data)) % full_block_size == 0:
        raise _fail("ADPCM block size does not match data length.")

    samples: list[int] = []
    for start in range(0, len(data), full_block_size):
        block = data[start:start + full_block_size]
        if len(block) < _HEADER_SIZE + _PREDICTOR_SIZE:
            raise _fail("ADPCM has insufficent block size")
        samples.extend(_decode_block(block, _IMA))
    return struct.pack(f"<{len(samples)}h", *samples)