"""Checksum used by the UDP discovery packets."""

import zlib

_MASK = 0xFFFFFFFF


def calc_crc(payload: bytes) -> int:
    """Return the camera's CRC-32 of ``payload``.

    This is the reflected CRC-32 with polynomial 0x04c11db7, an initial value
    of zero and no final xor.
    """
    # zlib inverts the running value on entry and on exit; seeding it with
    # all ones and inverting the result cancels both inversions.
    return zlib.crc32(bytes(payload), _MASK) ^ _MASK