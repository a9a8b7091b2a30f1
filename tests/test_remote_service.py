from gattlink.constants import Property
from gattlink.remote import RemoteCharacteristic
from gattlink.remote_service import RemoteDevice, RemoteService


def _characteristic(uuid, handle):
    return RemoteCharacteristic(uuid, 1, handle, Property.READ, handle + 1)


def test_service_keeps_uuid_and_handles():
    service = RemoteService("180f", 0x0010, 0x0020)
    assert service.uuid == "180f"
    assert (service.start_handle, service.end_handle) == (0x0010, 0x0020)
    assert service.characteristic_count == 0


def test_service_characteristics_keep_order():
    service = RemoteService("180f", 1, 9)
    first = _characteristic("2a19", 2)
    second = _characteristic("2a1a", 4)
    service.add_characteristic(first)
    service.add_characteristic(second)
    assert service.characteristic_count == 2
    assert service.characteristics == [first, second]
    assert service.characteristics[1] is second


def test_device_starts_empty():
    device = RemoteDevice()
    assert device.service_count == 0
    assert device.services == []


def test_device_add_and_clear_services():
    device = RemoteDevice()
    a = RemoteService("1800", 1, 5)
    b = RemoteService("1801", 6, 9)
    device.add_service(a)
    device.add_service(b)
    assert device.service_count == 2
    assert [s.uuid for s in device.services] == ["1800", "1801"]
    device.clear_services()
    assert device.service_count == 0
    assert device.services == []


def test_device_can_be_refilled_after_clear():
    device = RemoteDevice()
    device.add_service(RemoteService("1800", 1, 5))
    device.clear_services()
    replacement = RemoteService("180a", 1, 3)
    device.add_service(replacement)
    assert device.services == [replacement]