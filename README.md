# neolink

Pure-Python building blocks for working with Reolink-family IP cameras.
It has no runtime dependencies beyond the standard library.

## What is in the package

- `neolink.udp`: the three UDP packet kinds, `UdpDiscovery`, `UdpAck` and
  `UdpData`. `decode(data)` parses one packet from the start of a byte
  string (trailing bytes are ignored), `encode(packet)` produces its wire
  form, and `read_packet(stream, timeout=5.0)` reads exactly one packet from
  a binary stream. Malformed or truncated input raises `UdpParseError`;
  `read_packet` raises `EOFError` when the stream yields nothing for longer
  than `timeout` seconds.
- `neolink.udp_xml`: the `<P2P>` document carried by discovery packets,
  `UdpXml`, and its messages (`C2dS`, `C2dC`, `D2cCr`, `D2cT`, `C2dT`,
  `D2cCfm`, `C2dDisc`, `D2cDisc`, `C2mQ`, `M2cQr`, `C2rC`, `R2cT`,
  `C2rCfm`, with the parts `PortList`, `ClientList`, `Timer`, `IpPort`).
  `UdpXml.from_bytes` parses a document and `UdpXml.to_bytes` writes one
  with an XML declaration; bad XML, a wrong root element or out-of-range
  numbers raise `UdpXmlError`.
- `neolink.xml_crypto`: `encrypt(offset, buf)` and `decrypt(offset, buf)`
  apply the keyed XOR used on discovery payloads (the packet's `tid` is the
  offset). The cipher is its own inverse.
- `neolink.crc`: `calc_crc(payload)`, the CRC-32 variant (initial value 0,
  no final xor) that discovery packets carry.
- `neolink.adpcm`: `adpcm_to_pcm(data)` decodes the cameras' DVI-4/IMA
  ADPCM blocks into signed 16-bit little-endian PCM, raising
  `AdpcmDecodingError` for malformed data.
- `neolink.config`: `parse_config(text)` and `load_config(path)` read and
  validate a TOML configuration into `Config`, `CameraConfig` and
  `UserConfig`, raising `ConfigError` on any problem.
- `neolink.utils`: `AddressOrUid`, `find_camera_by_name`,
  `get_permitted_users` and `parse_on_off`.

## UDP packets

```python
from neolink.udp import UdpAck, decode, encode

ack = UdpAck(connection_id=80, packet_id=2439, payload=b"")
wire = encode(ack)
assert decode(wire) == ack
```

Discovery packets hold an encrypted `UdpXml` payload and a checksum of it;
`encode` and `decode` take care of both:

```python
from neolink.udp import UdpDiscovery, decode, encode
from neolink.udp_xml import C2dDisc, UdpXml

packet = UdpDiscovery(tid=96, payload=UdpXml(c2d_disc=C2dDisc(cid=82000, did=80)))
assert decode(encode(packet)) == packet
```

The cipher can also be used directly:

```python
from neolink.xml_crypto import decrypt, encrypt

scrambled = encrypt(87, b"<P2P></P2P>")
assert decrypt(87, scrambled) == b"<P2P></P2P>"
```

## Audio

Each ADPCM block starts with the frame type `00 01`, half the block size
(little-endian), then the predictor state (last output and step index).

```python
from neolink.adpcm import AdpcmDecodingError, adpcm_to_pcm

block = bytes.fromhex("0001" "0600" "0000" "0000") + bytes(8)
try:
    pcm = adpcm_to_pcm(block)
except AdpcmDecodingError as exc:
    print("bad audio block:", exc)
else:
    assert len(pcm) == 32  # 16 samples of 2 bytes
```

## Configuration

```toml
bind = "0.0.0.0"
bind_port = 8554

[[cameras]]
name = "Garage"
username = "admin"
password = "password"
address = "192.168.1.10:9000"
stream = "both"

[[users]]
name = "viewer"
pass = "password"
```

Top-level keys are `cameras` (required), `bind` (default `0.0.0.0`),
`bind_port` (default 8554), `certificate`, `tls_client_auth` (`none`,
`request` or `require`; default `none`) and `users`. A camera has `name`,
`username`, optional `password`, exactly one of `address` or `uid`,
`stream` (`mainStream`, `subStream`, `externStream`, `both` or `all`;
default `both`), `channel_id` (0 to 31, default 0) and `permitted_users`.
The keys `timeout` and `format` are still read so they can be reported, but
nothing uses them. A user has `name` (or `username`) and `pass` (or
`password`); the names `anyone` and `anonymous` are reserved.

```python
from neolink.config import ConfigError, load_config
from neolink.utils import AddressOrUid, find_camera_by_name, get_permitted_users

try:
    config = load_config("config.toml")
except ConfigError as exc:
    raise SystemExit(f"invalid configuration: {exc}")

camera = find_camera_by_name(config, "Garage")  # LookupError if absent
target = AddressOrUid.from_config(camera.address, camera.uid)
print(target)  # Address: 192.168.1.10:9000
allowed = get_permitted_users(config.users, camera.permitted_users)
```

`get_permitted_users` grants every configured user when the camera lists
`anyone` or has no list while users exist, and only `anonymous` when there
are neither. `parse_on_off` reads `true`/`on`/`yes` as `True` and
`false`/`off`/`no` as `False`, raising `ValueError` otherwise.

## What the package does not do

There is no command-line program and no RTSP server. The package does not
open connections to cameras, log in, stream video, send audio, or change
camera settings such as the status light, motion sensor or reboot; it
provides the packet formats, audio decoding and configuration that such
tools would build on.