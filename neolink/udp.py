"""UDP packets exchanged with cameras: discovery, acknowledgement and data.

There are three kinds of packet:

* ``UdpDiscovery`` sets up a connection, exchanging connection ids and MTU
  as an obfuscated XML payload.
* ``UdpAck`` is sent after every data packet that arrives.
* ``UdpData`` carries part of a stream of higher level packets; one higher
  level packet may be split across several data packets.
"""

import struct
import time
from dataclasses import dataclass, field
from typing import BinaryIO

from .crc import calc_crc
from .udp_xml import UdpXml, UdpXmlError
from .xml_crypto import decrypt, encrypt

MAGIC_HEADER_UDP_NEGO = 0x2A87CF3A
MAGIC_HEADER_UDP_ACK = 0x2A87CF20
MAGIC_HEADER_UDP_DATA = 0x2A87CF10

RX_TIMEOUT = 5.0
"""Seconds to wait for more bytes before giving up on a read."""


class UdpParseError(ValueError):
    """Raised when bytes do not form a valid UDP packet."""


@dataclass
class UdpDiscovery:
    """Negotiation packet; ``tid`` is also the key for the XML payload."""

    tid: int
    payload: UdpXml = field(default_factory=UdpXml)


@dataclass
class UdpAck:
    """Acknowledges data packets up to ``packet_id``.

    ``payload`` is a truth map of packets after ``packet_id`` that are
    still missing.
    """

    connection_id: int
    packet_id: int
    payload: bytes = b""


@dataclass
class UdpData:
    """Carries a chunk of a higher level packet."""

    connection_id: int
    packet_id: int
    payload: bytes = b""


Packet = UdpDiscovery | UdpAck | UdpData


class _Incomplete(Exception):
    """More input is needed; ``needed`` is how many bytes at least."""

    def __init__(self, needed: int) -> None:
        super().__init__(needed)
        self.needed = needed


class _Cursor:
    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0

    def take(self, count: int) -> bytes:
        end = self._pos + count
        if end > len(self._data):
            raise _Incomplete(end - len(self._data))
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def u32(self) -> int:
        return int.from_bytes(self.take(4), "little")

    def i32(self) -> int:
        return int.from_bytes(self.take(4), "little", signed=True)

    def expect_u32(self, expected: int, what: str) -> None:
        value = self.u32()
        if value != expected:
            raise UdpParseError(f"{what}: expected {expected}, found {value}")


def _parse(data: bytes) -> Packet:
    cursor = _Cursor(data)
    magic = cursor.u32()
    if magic == MAGIC_HEADER_UDP_NEGO:
        return _parse_discovery(cursor)
    if magic == MAGIC_HEADER_UDP_ACK:
        return _parse_ack(cursor)
    if magic == MAGIC_HEADER_UDP_DATA:
        return _parse_data(cursor)
    raise UdpParseError(f"unknown packet magic {magic:#010x}")


def _parse_discovery(cursor: _Cursor) -> UdpDiscovery:
    payload_size = cursor.u32()
    cursor.expect_u32(1, "discovery header field")
    tid = cursor.u32()
    checksum = cursor.u32()
    encrypted = cursor.take(payload_size)
    actual = calc_crc(encrypted)
    if checksum != actual:
        raise UdpParseError(
            f"discovery checksum mismatch: header {checksum:#010x}, "
            f"payload {actual:#010x}"
        )
    try:
        payload = UdpXml.from_bytes(decrypt(tid, encrypted))
    except UdpXmlError as exc:
        raise UdpParseError(f"bad discovery payload: {exc}") from exc
    return UdpDiscovery(tid=tid, payload=payload)


def _parse_ack(cursor: _Cursor) -> UdpAck:
    connection_id = cursor.i32()
    cursor.expect_u32(0, "ack header field")
    cursor.expect_u32(0, "ack header field")
    packet_id = cursor.u32()
    cursor.u32()  # changes from packet to packet; meaning unknown
    payload_size = cursor.u32()
    payload = cursor.take(payload_size) if payload_size > 0 else b""
    return UdpAck(connection_id=connection_id, packet_id=packet_id, payload=payload)


def _parse_data(cursor: _Cursor) -> UdpData:
    connection_id = cursor.i32()
    cursor.expect_u32(0, "data header field")
    packet_id = cursor.u32()
    payload_size = cursor.u32()
    payload = cursor.take(payload_size)
    return UdpData(connection_id=connection_id, packet_id=packet_id, payload=payload)


def decode(data: bytes) -> Packet:
    """Decode one packet from the start of ``data``; trailing bytes are ignored."""
    try:
        return _parse(bytes(data))
    except _Incomplete as exc:
        raise UdpParseError(
            f"packet is truncated, at least {exc.needed} more byte(s) needed"
        ) from exc


def read_packet(stream: BinaryIO, timeout: float = RX_TIMEOUT) -> Packet:
    """Read exactly one packet from a binary stream.

    Reads only as many bytes as the packet needs. Raises ``EOFError`` when the
    stream yields nothing for longer than ``timeout`` seconds.
    """
    buffer = bytearray()
    while True:
        try:
            return _parse(bytes(buffer))
        except _Incomplete as exc:
            to_read = max(exc.needed, 1)

        start = time.monotonic()
        while True:
            try:
                chunk = stream.read(to_read)
            except BlockingIOError:
                continue
            if chunk is None:
                continue
            if chunk:
                buffer.extend(chunk)
                break
            if time.monotonic() - start > timeout:
                raise EOFError("read returned 0 bytes")


def encode(packet: Packet) -> bytes:
    """Serialise a packet to its wire form."""
    try:
        match packet:
            case UdpDiscovery():
                body = encrypt(packet.tid, packet.payload.to_bytes())
                header = struct.pack(
                    "<IIIII",
                    MAGIC_HEADER_UDP_NEGO,
                    len(body),
                    1,
                    packet.tid,
                    calc_crc(body),
                )
            case UdpAck():
                body = bytes(packet.payload)
                header = struct.pack(
                    "<IiIIIII",
                    MAGIC_HEADER_UDP_ACK,
                    packet.connection_id,
                    0,
                    0,
                    packet.packet_id,
                    0,
                    len(body),
                )
            case UdpData():
                body = bytes(packet.payload)
                header = struct.pack(
                    "<IiIII",
                    MAGIC_HEADER_UDP_DATA,
                    packet.connection_id,
                    0,
                    packet.packet_id,
                    len(body),
                )
            case _:
                raise TypeError(f"not a UDP packet: {packet!r}")
    except struct.error as exc:
        raise ValueError(f"cannot encode {packet!r}: {exc}") from exc
    return header + body