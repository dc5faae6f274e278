import pytest

from neolink.config import CameraConfig, Config, UserConfig
from neolink.utils import (
    AddressKind,
    AddressOrUid,
    find_camera_by_name,
    get_permitted_users,
    parse_on_off,
)


def _users(*names):
    password = "password"
    return [UserConfig(name=name, password=password) for name in names]


def _config():
    return Config(
        cameras=[
            CameraConfig(name="Garage", username="admin", address="10.0.0.2"),
            CameraConfig(name="Door", username="admin", uid="TESTUID0000001"),
        ]
    )


def test_address_from_config():
    location = AddressOrUid.from_config("10.0.0.2", None)
    assert location.kind is AddressKind.ADDRESS
    assert location.host == "10.0.0.2"
    assert str(location) == "Address: 10.0.0.2"


def test_uid_from_config():
    location = AddressOrUid.from_config(None, "TESTUID0000001")
    assert location.kind is AddressKind.UID
    assert str(location) == "UID: TESTUID0000001"


def test_address_or_uid_neither():
    with pytest.raises(ValueError, match="Neither address or uid given"):
        AddressOrUid.from_config(None, None)


def test_address_or_uid_both():
    with pytest.raises(ValueError, match="not both"):
        AddressOrUid.from_config("10.0.0.2", "TESTUID0000001")


def test_find_camera_by_name():
    config = _config()
    camera = find_camera_by_name(config, "Door")
    assert camera is config.cameras[1]


def test_find_camera_missing():
    with pytest.raises(LookupError, match="Camera Attic not found in the config file"):
        find_camera_by_name(_config(), "Attic")


def test_permitted_anyone_grants_all_users():
    users = _users("alice", "bob")
    assert get_permitted_users(users, ["anyone"]) == {"alice", "bob"}


def test_permitted_default_with_users_grants_all():
    users = _users("alice", "bob")
    assert get_permitted_users(users, None) == {"alice", "bob"}


def test_permitted_explicit_list():
    users = _users("alice", "bob")
    assert get_permitted_users(users, ["bob"]) == {"bob"}


def test_permitted_no_users_is_anonymous():
    assert get_permitted_users([], None) == {"anonymous"}


@pytest.mark.parametrize("text", ["true", "on", "yes"])
def test_parse_on(text):
    assert parse_on_off(text) is True


@pytest.mark.parametrize("text", ["false", "off", "no"])
def test_parse_off(text):
    assert parse_on_off(text) is False


@pytest.mark.parametrize("text", ["ON", "1", "", "maybe"])
def test_parse_on_off_rejects(text):
    with pytest.raises(ValueError, match="should be true/false, on/off or yes/no"):
        parse_on_off(text)