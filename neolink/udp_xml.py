"""XML payloads carried inside UDP discovery packets."""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, get_args

_DECLARATION = b'<?xml version="1.0" encoding="utf-8"?>'


class UdpXmlError(ValueError):
    """Raised when a UDP XML payload cannot be read or written."""


def _uint(bits: int) -> Any:
    return field(default=0, metadata={"bounds": (0, (1 << bits) - 1)})


def _sint(bits: int) -> Any:
    half = 1 << (bits - 1)
    return field(default=0, metadata={"bounds": (-half, half - 1)})


def _text(tag: str | None = None) -> Any:
    return field(default="", metadata={"tag": tag} if tag else {})


def _tagged(tag: str) -> Any:
    return field(default=None, metadata={"tag": tag})


@dataclass
class PortList:
    """Port to reply to."""

    port: int = _uint(32)


@dataclass
class C2dS:
    """Discovery of any camera on the local network."""

    to: PortList = field(default_factory=PortList)


@dataclass
class ClientList:
    """Port on which the client listens."""

    port: int = _uint(32)


@dataclass
class C2dC:
    """Connection request to the camera with a given UID."""

    uid: str = _text()
    cli: ClientList = field(default_factory=ClientList)
    cid: int = _sint(32)
    mtu: int = _uint(32)
    debug: bool = False
    os: str = _text("p")


@dataclass
class Timer:
    """Timer values sent in a discovery reply."""

    def_: int = field(default=0, metadata={"tag": "def", "bounds": (0, 0xFFFFFFFF)})
    hb: int = _uint(32)
    hbt: int = _uint(32)


@dataclass
class D2cCr:
    """Camera reply to a discovery request."""

    timer: Timer = field(default_factory=Timer)
    rsp: int = _uint(32)
    cid: int = _sint(32)
    did: int = _sint(32)


@dataclass
class C2dDisc:
    """Client disconnect."""

    cid: int = _sint(32)
    did: int = _sint(32)


@dataclass
class D2cDisc:
    """Camera disconnect."""

    cid: int = _sint(32)
    did: int = _sint(32)


@dataclass
class D2cT:
    """Camera transmission details."""

    sid: int = _uint(32)
    conn: str = _text()
    cid: int = _sint(32)
    did: int = _sint(32)


@dataclass
class C2dT:
    """Client transmission details."""

    sid: int = _uint(32)
    conn: str = _text()
    cid: int = _sint(32)
    mtu: int = _uint(32)


@dataclass
class C2mQ:
    """Query from the client to the relay lookup server."""

    uid: str = _text()
    os: str = _text("p")


@dataclass
class IpPort:
    """Host and port of a service."""

    ip: str = _text()
    port: int = _uint(16)


@dataclass
class M2cQr:
    """Lookup server reply with the locations of the other services."""

    reg: IpPort = field(default_factory=IpPort)
    relay: IpPort = field(default_factory=IpPort)
    log: IpPort = field(default_factory=IpPort)
    t: IpPort = field(default_factory=IpPort)


@dataclass
class C2rC:
    """Connection request from the client to the register server."""

    uid: str = _text()
    cli: IpPort = field(default_factory=IpPort)
    relay: IpPort = field(default_factory=IpPort)
    cid: int = _sint(32)
    debug: bool = False
    family: int = _uint(8)
    os: str = _text("p")


@dataclass
class R2cT:
    """Register server reply with the camera location."""

    dev: IpPort = field(default_factory=IpPort)
    cid: int = _sint(32)
    sid: int = _uint(32)


@dataclass
class D2cCfm:
    """Camera confirmation of a connection."""

    sid: int = _uint(32)
    conn: str = _text()
    rsp: int = _uint(32)
    cid: int = _sint(32)
    did: int = _sint(32)
    time_r: int = _uint(32)


@dataclass
class C2rCfm:
    """Client confirmation to the register server."""

    sid: int = _uint(32)
    conn: str = _text()
    rsp: int = _uint(32)
    cid: int = _sint(32)
    did: int = _sint(32)


@dataclass
class UdpXml:
    """The top level ``P2P`` document; any subset of messages may be present."""

    c2d_s: C2dS | None = _tagged("C2D_S")
    c2d_c: C2dC | None = _tagged("C2D_C")
    d2c_c_r: D2cCr | None = _tagged("D2C_C_R")
    d2c_t: D2cT | None = _tagged("D2C_T")
    c2d_t: C2dT | None = _tagged("C2D_T")
    d2c_cfm: D2cCfm | None = _tagged("D2C_CFM")
    c2d_disc: C2dDisc | None = _tagged("C2D_DISC")
    d2c_disc: D2cDisc | None = _tagged("D2C_DISC")
    c2m_q: C2mQ | None = _tagged("C2M_Q")
    m2c_q_r: M2cQr | None = _tagged("M2C_Q_R")
    c2r_c: C2rC | None = _tagged("C2R_C")
    r2c_t: R2cT | None = _tagged("R2C_T")
    c2r_cfm: C2rCfm | None = _tagged("C2R_CFM")

    @classmethod
    def from_bytes(cls, data: bytes) -> "UdpXml":
        """Parse a ``P2P`` XML document."""
        try:
            root = ET.fromstring(bytes(data))
        except ET.ParseError as exc:
            raise UdpXmlError(f"malformed XML: {exc}") from exc
        if root.tag != "P2P":
            raise UdpXmlError(f"expected <P2P> root element, found <{root.tag}>")
        return _decode(cls, root)

    def to_bytes(self) -> bytes:
        """Serialise to a ``P2P`` XML document with an XML declaration."""
        root = ET.Element("P2P")
        _encode(self, root)
        return _DECLARATION + ET.tostring(root, encoding="unicode").encode("utf-8")


def _tag_of(f: Any) -> str:
    return f.metadata.get("tag", f.name)


def _concrete(tp: Any) -> Any:
    args = [arg for arg in get_args(tp) if arg is not type(None)]
    return args[0] if args else tp


def _decode(cls: type, elem: ET.Element) -> Any:
    children: dict[str, ET.Element] = {}
    for child in elem:
        children.setdefault(child.tag, child)
    values = {}
    for f in fields(cls):
        node = children.get(_tag_of(f))
        if node is not None:
            values[f.name] = _decode_value(_concrete(f.type), node, f)
    return cls(**values)


def _decode_value(tp: Any, node: ET.Element, f: Any) -> Any:
    if is_dataclass(tp):
        return _decode(tp, node)
    text = (node.text or "").strip()
    if tp is bool:
        lowered = text.lower()
        if lowered in ("true", "1"):
            return True
        if lowered in ("false", "0"):
            return False
        raise UdpXmlError(f"<{node.tag}> is not a boolean: {text!r}")
    if tp is int:
        try:
            value = int(text)
        except ValueError as exc:
            raise UdpXmlError(f"<{node.tag}> is not an integer: {text!r}") from exc
        _check_bounds(f, value)
        return value
    return text


def _check_bounds(f: Any, value: int) -> None:
    bounds = f.metadata.get("bounds")
    if bounds and not bounds[0] <= value <= bounds[1]:
        raise UdpXmlError(
            f"<{_tag_of(f)}> value {value} outside {bounds[0]}..{bounds[1]}"
        )


def _encode(obj: Any, parent: ET.Element) -> None:
    for f in fields(obj):
        value = getattr(obj, f.name)
        if value is None:
            continue
        node = ET.SubElement(parent, _tag_of(f))
        if is_dataclass(value):
            _encode(value, node)
        elif isinstance(value, bool):
            node.text = "true" if value else "false"
        elif isinstance(value, int):
            _check_bounds(f, value)
            node.text = str(value)
        else:
            node.text = str(value)