"""Loading and validation of the TOML configuration file."""

import tomllib
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any

RESERVED_NAMES = ("anyone", "anonymous")
STREAM_SOURCES = ("mainStream", "subStream", "externStream", "both", "all")
TLS_CLIENT_AUTH_MODES = ("none", "request", "require")

_REQUIRED = object()

_PASS_KEY = "password"
_USER_NAME_KEYS = ("name", "username")
_USER_PASS_KEYS = ("pass", _PASS_KEY)


class ConfigError(ValueError):
    """Raised when a configuration cannot be read, parsed or validated."""


@dataclass(kw_only=True)
class UserConfig:
    """A user allowed to connect to the RTSP server."""

    name: str
    password: str

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ConfigError("username cannot be empty")
        if self.name in RESERVED_NAMES:
            raise ConfigError(f"This is a reserved username: {self.name}")


@dataclass(kw_only=True)
class CameraConfig:
    """Connection and streaming settings for one camera."""

    name: str
    username: str
    address: str | None = None
    uid: str | None = None
    password: str | None = None
    # No longer used; kept so that users can be warned about it.
    timeout: timedelta | None = None
    # No longer used; kept so that users can be warned about it.
    format: str | None = None
    stream: str = "both"
    permitted_users: list[str] | None = None
    channel_id: int = 0

    def __post_init__(self) -> None:
        if self.address is None and self.uid is None:
            raise ConfigError(
                f"Camera {self.name}: Either camera address or uid must be given"
            )
        if self.address is not None and self.uid is not None:
            raise ConfigError(
                f"Camera {self.name}: Must provide either camera address or uid not both"
            )
        if self.stream not in STREAM_SOURCES:
            raise ConfigError(
                f"Camera {self.name}: Incorrect stream source {self.stream!r}"
            )
        if not 0 <= self.channel_id <= 31:
            raise ConfigError(
                f"Camera {self.name}: Invalid channel {self.channel_id}"
            )


@dataclass(kw_only=True)
class Config:
    """The whole configuration file."""

    cameras: list[CameraConfig]
    bind_addr: str = "0.0.0.0"
    bind_port: int = 8554
    certificate: str | None = None
    tls_client_auth: str = "none"
    users: list[UserConfig] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not 0 <= self.bind_port <= 65535:
            raise ConfigError(f"Invalid port {self.bind_port}")
        if self.tls_client_auth not in TLS_CLIENT_AUTH_MODES:
            raise ConfigError(f"Incorrect tls auth {self.tls_client_auth!r}")


def _lookup(table: dict, keys: tuple[str, ...], where: str, default: Any) -> Any:
    present = [key for key in keys if key in table]
    if len(present) > 1:
        raise ConfigError(f"{where}: duplicate field `{present[0]}`")
    if present:
        return table[present[0]]
    if default is _REQUIRED:
        raise ConfigError(f"{where}: missing field `{keys[0]}`")
    return default


def _str(table: dict, where: str, *keys: str, default: Any = _REQUIRED) -> Any:
    value = _lookup(table, keys, where, default)
    if value is not default and not isinstance(value, str):
        raise ConfigError(f"{where}: `{keys[0]}` must be a string")
    return value


def _int(table: dict, where: str, key: str, default: Any = _REQUIRED) -> int:
    value = _lookup(table, (key,), where, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{where}: `{key}` must be an integer")
    return value


def _table_list(table: dict, where: str, key: str, default: Any = _REQUIRED) -> list:
    value = _lookup(table, (key,), where, default)
    if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
        raise ConfigError(f"{where}: `{key}` must be a list of tables")
    return value


def _duration(value: Any, where: str) -> timedelta:
    if isinstance(value, dict):
        secs, nanos = value.get("secs"), value.get("nanos")
    elif isinstance(value, list) and len(value) == 2:
        secs, nanos = value
    else:
        raise ConfigError(f"{where}: `timeout` must have secs and nanos")
    for part in (secs, nanos):
        if isinstance(part, bool) or not isinstance(part, int) or part < 0:
            raise ConfigError(f"{where}: `timeout` must have secs and nanos")
    return timedelta(seconds=secs, microseconds=nanos / 1000)


def _camera(table: dict) -> CameraConfig:
    where = "camera"
    name = _str(table, where, "name")
    where = f"camera {name}"
    permitted = _lookup(table, ("permitted_users",), where, None)
    if permitted is not None and not (
        isinstance(permitted, list) and all(isinstance(u, str) for u in permitted)
    ):
        raise ConfigError(f"{where}: `permitted_users` must be a list of strings")
    timeout = _lookup(table, ("timeout",), where, None)
    password = _str(table, where, _PASS_KEY, default=None)
    return CameraConfig(
        name=name,
        username=_str(table, where, "username"),
        address=_str(table, where, "address", default=None),
        uid=_str(table, where, "uid", default=None),
        password=password,
        timeout=None if timeout is None else _duration(timeout, where),
        format=_str(table, where, "format", default=None),
        stream=_str(table, where, "stream", default="both"),
        permitted_users=permitted,
        channel_id=_int(table, where, "channel_id", default=0),
    )


def _user(table: dict) -> UserConfig:
    where = "user"
    name = _str(table, where, *_USER_NAME_KEYS)
    password = _str(table, where, *_USER_PASS_KEYS)
    return UserConfig(name=name, password=password)


def parse_config(text: str) -> Config:
    """Parse and validate configuration given as TOML text."""
    try:
        document = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse the config: {exc}") from exc
    where = "config"
    return Config(
        cameras=[_camera(t) for t in _table_list(document, where, "cameras")],
        bind_addr=_str(document, where, "bind", default="0.0.0.0"),
        bind_port=_int(document, where, "bind_port", default=8554),
        certificate=_str(document, where, "certificate", default=None),
        tls_client_auth=_str(document, where, "tls_client_auth", default="none"),
        users=[_user(t) for t in _table_list(document, where, "users", default=[])],
    )


def load_config(path: str | Path) -> Config:
    """Read, parse and validate the configuration file at ``path``."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {str(path)!r}") from exc
    try:
        return parse_config(text)
    except ConfigError as exc:
        raise ConfigError(f"Failed to load the {str(path)!r} config file: {exc}") from exc