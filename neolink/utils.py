"""Helpers shared by the subcommands."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from .config import CameraConfig, Config, UserConfig


class AddressKind(Enum):
    """How a camera is reached."""

    ADDRESS = "Address"
    UID = "UID"


@dataclass(frozen=True)
class AddressOrUid:
    """A camera location: either a network address or a UID."""

    kind: AddressKind
    host: str

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.host}"

    @classmethod
    def from_config(cls, address: str | None, uid: str | None) -> "AddressOrUid":
        """Build from the ``address`` and ``uid`` fields of a camera config."""
        if address is None and uid is None:
            raise ValueError("Neither address or uid given")
        if address is not None and uid is not None:
            raise ValueError("Either address or uid should be given not both")
        if address is not None:
            return cls(AddressKind.ADDRESS, address)
        return cls(AddressKind.UID, uid)


def find_camera_by_name(config: Config, name: str) -> CameraConfig:
    """Return the first camera in ``config`` called ``name``."""
    camera = next((c for c in config.cameras if c.name == name), None)
    if camera is None:
        raise LookupError(f"Camera {name} not found in the config file")
    return camera


def get_permitted_users(
    users: Sequence[UserConfig], permitted_users: Iterable[str] | None
) -> set[str]:
    """Work out which user names may view a camera.

    ``anyone`` in the camera's list, or no list while users are defined,
    grants every defined user; with neither, only ``anonymous`` is allowed.
    """
    all_users = {user.name for user in users}
    if permitted_users is None:
        return all_users if users else {"anonymous"}
    permitted = set(permitted_users)
    if "anyone" in permitted:
        return all_users
    return permitted


def parse_on_off(text: str) -> bool:
    """Parse an on/off command line value."""
    if text in ("true", "on", "yes"):
        return True
    if text in ("false", "off", "no"):
        return False
    raise ValueError(
        f"Could not understand {text}, check your input, "
        "should be true/false, on/off or yes/no"
    )