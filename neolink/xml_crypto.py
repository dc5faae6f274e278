"""Obfuscation applied to the XML payload of UDP discovery packets."""

from itertools import cycle

_XML_KEY = (
    0x1F2D3C4B,
    0x5A6C7F8D,
    0x38172E4B,
    0x8271635A,
    0x863F1A2B,
    0xA5C6F7D8,
    0x8371E1B4,
    0x17F2D3A5,
)


def _key_stream(offset: int) -> bytes:
    return b"".join(
        ((word + offset) & 0xFFFFFFFF).to_bytes(4, "little") for word in _XML_KEY
    )


def decrypt(offset: int, buf: bytes) -> bytes:
    """Xor ``buf`` with the key schedule derived from ``offset``."""
    return bytes(byte ^ key for byte, key in zip(buf, cycle(_key_stream(offset))))


def encrypt(offset: int, buf: bytes) -> bytes:
    """Encrypt ``buf``; the cipher is its own inverse."""
    return decrypt(offset, buf)