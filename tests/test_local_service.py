import pytest

from gattlink.constants import AttributeType, Property
from gattlink.local import LocalCharacteristic
from gattlink.local_service import LocalService
from gattlink.stack import Stack, use_stack


@pytest.fixture
def stack():
    fresh = Stack()
    previous = use_stack(fresh)
    yield fresh
    use_stack(previous)


def test_new_service_has_no_handles_or_characteristics():
    service = LocalService("180f")
    assert service.uuid == "180f"
    assert service.attribute_type == AttributeType.SERVICE
    assert (service.start_handle, service.end_handle) == (0, 0)
    assert service.characteristics == []


def test_set_handles():
    service = LocalService("180f")
    service.set_handles(5, 9)
    assert service.start_handle == 5
    assert service.end_handle == 9


def test_add_characteristics_in_order():
    service = LocalService("180f")
    first = LocalCharacteristic("2a19", Property.READ, 1)
    second = LocalCharacteristic("2a1a", Property.READ, 1)
    service.add_characteristic(first)
    service.add_characteristic(second)
    assert service.characteristics == [first, second]
    assert service.characteristic_count == 2


def test_add_wrapped_local_characteristic():
    class Wrapper:
        def __init__(self, local):
            self.local = local

    inner = LocalCharacteristic("2a19", Property.READ, 1)
    service = LocalService("180f")
    service.add_characteristic(Wrapper(inner))
    assert service.characteristics == [inner]


def test_non_local_objects_are_ignored():
    service = LocalService("180f")
    service.add_characteristic(object())
    service.add_characteristic("2a19")
    assert service.characteristic_count == 0


def test_stack_finds_service_of_characteristic(stack):
    service = LocalService("180f")
    characteristic = LocalCharacteristic("2a19", Property.READ, 1)
    service.add_characteristic(characteristic)
    stack.add_service(service)
    assert stack.service_uuid_for_characteristic(characteristic) == "180f"


def test_broadcast_sets_service_data(stack):
    service = LocalService("180f")
    characteristic = LocalCharacteristic("2a19", Property.BROADCAST | Property.READ, 2)
    service.add_characteristic(characteristic)
    stack.add_service(service)
    assert characteristic.broadcast() is True
    characteristic.write_value(b"\x05\x06")
    assert stack.service_data == ("180f", b"\x05\x06")