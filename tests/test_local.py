import types

import pytest

from gattlink.constants import AttributeType, CharacteristicEvent, Property
from gattlink.local import LocalAttribute, LocalCharacteristic, LocalDescriptor
from gattlink.stack import PacketKind, Stack, use_stack

PEER = bytes([1, 2, 3, 4, 5, 6])


@pytest.fixture
def stack():
    fresh = Stack()
    previous = use_stack(fresh)
    yield fresh
    use_stack(previous)


def test_attribute_types():
    assert LocalAttribute("1234").attribute_type is AttributeType.UNKNOWN
    assert LocalDescriptor("2901", "x").attribute_type is AttributeType.DESCRIPTOR
    assert LocalCharacteristic("2a19", Property.READ, 1).attribute_type is AttributeType.CHARACTERISTIC


def test_descriptor_value_and_index():
    d = LocalDescriptor("2901", "name")
    assert d.value == b"name"
    assert d.value_size == 4
    assert d[1] == ord("a")


def test_descriptor_value_capped_at_512():
    d = LocalDescriptor("2901", bytes(600))
    assert d.value_size == 512


def test_value_size_capped_at_512():
    c = LocalCharacteristic("2a19", Property.READ, 1000)
    assert c.value_size == 512


def test_notify_property_adds_cccd():
    c = LocalCharacteristic("2a19", Property.READ | Property.NOTIFY, 2)
    assert [d.uuid for d in c.descriptors] == ["2902"]
    plain = LocalCharacteristic("2a19", Property.READ, 2)
    assert plain.descriptors == []


def test_cccd_descriptor_tracks_subscription():
    c = LocalCharacteristic("2a19", Property.NOTIFY, 2)
    c.write_cccd_value(None, 0x0001)
    assert c.descriptors[0].value == (1).to_bytes(2, "little")


def test_write_value_truncates(stack):
    c = LocalCharacteristic("2a19", Property.READ, 3)
    assert c.write_value(b"abcdef") is True
    assert c.value == b"abc"
    assert c.value_length == 3


def test_fixed_length_keeps_full_size(stack):
    c = LocalCharacteristic("2a19", Property.READ, 4, True)
    c.write_value(b"\x07")
    assert c.value_length == 4
    assert c.value[0] == 7


def test_with_value_sizes_to_value(stack):
    c = LocalCharacteristic.with_value("2a00", Property.READ, "hello")
    assert c.value == b"hello"
    assert c.value_size == 5
    assert c[4] == ord("o")


def test_value_handle_follows_handle():
    c = LocalCharacteristic("2a19", Property.READ, 1)
    c.handle = 20
    assert c.value_handle == 21


def test_broadcast_requires_property(stack):
    assert LocalCharacteristic("2a19", Property.READ, 1).broadcast() is False
    assert LocalCharacteristic("2a19", Property.BROADCAST, 1).broadcast() is True


def test_broadcast_sets_service_data_and_readvertises(stack):
    c = LocalCharacteristic("2a19", Property.BROADCAST | Property.READ, 2)
    stack.add_service(types.SimpleNamespace(uuid="180f", characteristics=[c]))
    stack.advertising = True
    c.broadcast()
    c.write_value(b"\x05\x06")
    assert stack.service_data == ("180f", b"\x05\x06")
    assert stack.advertising is True


def test_notify_sent_when_subscribed(stack):
    stack.connections[1] = (0, PEER)
    c = LocalCharacteristic("2a19", Property.NOTIFY, 1)
    c.write_cccd_value(None, 0x0001)
    assert c.write_value(b"\x09") is True
    packet = stack.outgoing[-1]
    assert packet.kind is PacketKind.NOTIFICATION
    assert packet.handle == c.value_handle
    assert packet.value == b"\x09"


def test_indicate_preferred_over_notify(stack):
    stack.connections[1] = (0, PEER)
    c = LocalCharacteristic("2a19", Property.NOTIFY | Property.INDICATE, 1)
    c.write_cccd_value(None, 0x0003)
    c.write_value(b"\x01")
    assert stack.outgoing[-1].kind is PacketKind.INDICATION


def test_notify_fails_without_link(stack):
    c = LocalCharacteristic("2a19", Property.NOTIFY, 1)
    c.write_cccd_value(None, 0x0001)
    assert c.write_value(b"\x01") is False


def test_written_flag_resets(stack):
    c = LocalCharacteristic("2a19", Property.WRITE, 4)
    seen = []
    c.set_event_handler(CharacteristicEvent.WRITTEN, lambda dev, ch: seen.append((dev, ch.value)))
    c.write_from_peer("central", b"ok")
    assert seen == [("central", b"ok")]
    assert c.written() is True
    assert c.written() is False


def test_read_for_peer_fires_handler_and_slices(stack):
    c = LocalCharacteristic.with_value("2a00", Property.READ, "abcdef")
    reads = []
    c.set_event_handler(CharacteristicEvent.READ, lambda dev, ch: reads.append(dev))
    assert c.read_for_peer("peer", 2, 3) == b"cde"
    assert reads == ["peer"]


def test_cccd_events_fire_only_on_change():
    c = LocalCharacteristic("2a19", Property.NOTIFY, 1)
    events = []
    c.set_event_handler(CharacteristicEvent.SUBSCRIBED, lambda d, ch: events.append("sub"))
    c.set_event_handler(CharacteristicEvent.UNSUBSCRIBED, lambda d, ch: events.append("unsub"))
    c.write_cccd_value(None, 0x0001)
    c.write_cccd_value(None, 0x0005)
    assert c.subscribed() is True
    c.write_cccd_value(None, 0x0000)
    assert events == ["sub", "unsub"]
    assert c.subscribed() is False


def test_unknown_event_is_ignored():
    c = LocalCharacteristic("2a19", Property.NOTIFY, 1)
    c.set_event_handler(9, lambda d, ch: None)
    c.write_cccd_value(None, 0x0001)
    assert c.cccd_value == 1


def test_add_descriptor_only_accepts_local():
    c = LocalCharacteristic("2a19", Property.READ, 1)
    d = LocalDescriptor("2901", "level")
    c.add_descriptor(d)
    c.add_descriptor(None)
    assert c.descriptors == [d]