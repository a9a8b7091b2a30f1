import pytest

from gattlink.characteristic import Characteristic
from gattlink.constants import Property
from gattlink.local_service import LocalService
from gattlink.remote import RemoteCharacteristic
from gattlink.remote_service import RemoteService
from gattlink.service import Service
from gattlink.stack import Stack, use_stack


@pytest.fixture
def stack():
    previous = use_stack(Stack())
    yield
    use_stack(previous)


@pytest.fixture
def peer_service():
    rs = RemoteService("180d", 1, 20)
    chars = [
        RemoteCharacteristic("2A37", 1, 2, Property.NOTIFY, 3),
        RemoteCharacteristic("2a38", 1, 5, Property.READ, 6),
        RemoteCharacteristic("2a37", 1, 7, Property.NOTIFY, 8),
    ]
    for c in chars:
        rs.add_characteristic(c)
    return Service.wrap(rs), chars


def test_empty_service():
    s = Service()
    assert not s
    assert s.uuid == ""
    assert s.characteristic_count() == 0
    assert not s.characteristic(0)
    assert s.has_characteristic("2a37") is False


def test_wrap_rejects_other_types():
    with pytest.raises(TypeError):
        Service.wrap(42)


def test_wrap_local():
    ls = LocalService("180f")
    s = Service.wrap(ls)
    assert s.local is ls
    assert s.uuid == "180f"


def test_local_add_characteristic(stack):
    s = Service("180f")
    c = Characteristic("2a19", Property.READ, 1)
    s.add_characteristic(c)
    assert s.local.characteristics == [c.local]
    assert s.characteristics == [c.local]
    assert s.characteristic_count() == 0
    assert not s.characteristic("2a19")


def test_add_to_remote_is_ignored(stack, peer_service):
    s, chars = peer_service
    s.add_characteristic(Characteristic("2a19", Property.READ, 1))
    assert s.characteristic_count() == len(chars)


def test_remote_lookup(peer_service):
    s, chars = peer_service
    assert s
    assert s.uuid == "180d"
    assert s.characteristic_count() == 3
    assert s.has_characteristic("2a37") is True
    assert s.has_characteristic("2a37", 1) is True
    assert s.has_characteristic("2a37", 2) is False
    assert s.characteristic("2a37", 1).remote is chars[2]
    assert s.characteristic("2A38").remote is chars[1]
    assert s.characteristic(0).remote is chars[0]
    assert not s.characteristic(5)
    assert not s.characteristic("ffff")