"""Enumerations shared across the GATT object model."""

from enum import IntEnum, IntFlag

MAX_VALUE_SIZE = 512
"""Largest attribute value, in bytes, that a local attribute holds."""


class Property(IntFlag):
    """Characteristic property bits as carried in the characteristic declaration."""

    BROADCAST = 0x01
    READ = 0x02
    WRITE_WITHOUT_RESPONSE = 0x04
    WRITE = 0x08
    NOTIFY = 0x10
    INDICATE = 0x20


class CharacteristicEvent(IntEnum):
    """Events a characteristic can report to a registered handler."""

    SUBSCRIBED = 0
    UNSUBSCRIBED = 1
    READ = 2
    WRITTEN = 3
    UPDATED = 3


class DeviceEvent(IntEnum):
    """Events the local device can report about peers."""

    CONNECTED = 0
    DISCONNECTED = 1
    DISCOVERED = 2


class AttributeType(IntEnum):
    """GATT attribute type of a local attribute."""

    UNKNOWN = 0x0000
    SERVICE = 0x2800
    CHARACTERISTIC = 0x2803
    DESCRIPTOR = 0x2900