"""Tools for Reolink-family IP cameras: UDP packet framing, discovery payload crypto, ADPCM audio decoding and configuration."""

__version__ = "0.1.0"

__all__ = ["adpcm", "config", "crc", "udp", "udp_xml", "utils", "xml_crypto"]