"""Attributes hosted by the local GATT server."""

from __future__ import annotations

from typing import Any, Callable

from .constants import MAX_VALUE_SIZE, AttributeType, CharacteristicEvent, Property
from .stack import current_stack

CCCD_UUID = "2902"

EventHandler = Callable[[Any, "LocalCharacteristic"], None]


def _to_bytes(value: bytes | bytearray | str) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


class LocalAttribute:
    """An attribute in the local database, identified by its UUID string."""

    attribute_type = AttributeType.UNKNOWN

    def __init__(self, uuid: str):
        self.uuid = uuid

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.uuid!r})"


class LocalDescriptor(LocalAttribute):
    """A descriptor with a fixed value of at most 512 bytes."""

    attribute_type = AttributeType.DESCRIPTOR

    def __init__(self, uuid: str, value: bytes | str):
        super().__init__(uuid)
        self._value = _to_bytes(value)[:MAX_VALUE_SIZE]
        self.handle = 0

    @property
    def value(self) -> bytes:
        return self._value

    @property
    def value_size(self) -> int:
        return len(self.value)

    def __getitem__(self, offset: int) -> int:
        return self.value[offset]


class _ClientConfigDescriptor(LocalDescriptor):
    """CCCD whose value mirrors the owning characteristic's subscription state."""

    def __init__(self, characteristic: LocalCharacteristic):
        super().__init__(CCCD_UUID, b"")
        self._characteristic = characteristic

    @property
    def value(self) -> bytes:
        return self._characteristic.cccd_value.to_bytes(2, "little")


class LocalCharacteristic(LocalAttribute):
    """A characteristic served by the local device."""

    attribute_type = AttributeType.CHARACTERISTIC

    def __init__(self, uuid: str, properties: int, value_size: int, fixed_length: bool = False):
        super().__init__(uuid)
        self.properties = Property(properties)
        self.value_size = min(value_size, MAX_VALUE_SIZE)
        self.fixed_length = fixed_length
        self.handle = 0
        self.value_length = 0
        self._buffer = bytearray(self.value_size)
        self._broadcast = False
        self._written = False
        self._cccd_value = 0
        self._event_handlers: dict[CharacteristicEvent, EventHandler] = {}
        self.descriptors: list[LocalDescriptor] = []
        if self.properties & (Property.NOTIFY | Property.INDICATE):
            self.descriptors.append(_ClientConfigDescriptor(self))

    @classmethod
    def with_value(cls, uuid: str, properties: int, value: bytes | str) -> LocalCharacteristic:
        """Create a characteristic sized to ``value`` and holding it."""
        data = _to_bytes(value)
        characteristic = cls(uuid, properties, len(data))
        characteristic.write_value(data)
        return characteristic

    @property
    def value(self) -> bytes:
        return bytes(self._buffer[: self.value_length])

    @property
    def value_handle(self) -> int:
        return self.handle + 1

    @property
    def cccd_value(self) -> int:
        return self._cccd_value

    def __getitem__(self, offset: int) -> int:
        return self._buffer[offset]

    def write_value(self, value: bytes | str) -> bool:
        """Store a new value and push it to subscribers or the advertisement."""
        data = _to_bytes(value)
        length = min(len(data), self.value_size)
        self._buffer[:length] = data[:length]
        self.value_length = self.value_size if self.fixed_length else length

        stack = current_stack()
        if self.properties & Property.INDICATE and self._cccd_value & 0x0002:
            return stack.indicate(self.value_handle, self.value)
        if self.properties & Property.NOTIFY and self._cccd_value & 0x0001:
            return stack.notify(self.value_handle, self.value)

        if self._broadcast:
            service_uuid = stack.service_uuid_for_characteristic(self)
            stack.set_advertised_service_data(service_uuid, data)
            if not stack.connected() and stack.advertising:
                stack.advertise()
        return True

    def broadcast(self) -> bool:
        """Enable broadcasting in advertisements; needs the BROADCAST property."""
        if self.properties & Property.BROADCAST:
            self._broadcast = True
            return True
        return False

    def written(self) -> bool:
        """Return whether a peer wrote since the last call, and clear the flag."""
        was_written, self._written = self._written, False
        return was_written

    def subscribed(self) -> bool:
        return self._cccd_value != 0

    def add_descriptor(self, descriptor: Any) -> None:
        """Attach a local descriptor; descriptors that are not local are ignored."""
        if isinstance(descriptor, LocalDescriptor):
            self.descriptors.append(descriptor)

    def set_event_handler(self, event: int, handler: EventHandler | None) -> None:
        """Register ``handler`` for ``event``; unknown events are ignored."""
        try:
            key = CharacteristicEvent(event)
        except ValueError:
            return
        if handler is None:
            self._event_handlers.pop(key, None)
        else:
            self._event_handlers[key] = handler

    def _fire(self, event: CharacteristicEvent, device: Any) -> None:
        handler = self._event_handlers.get(event)
        if handler is not None:
            handler(device, self)

    def read_for_peer(self, device: Any, offset: int, length: int) -> bytes:
        """Serve a peer's read of ``length`` bytes starting at ``offset``."""
        self._fire(CharacteristicEvent.READ, device)
        return bytes(self._buffer[offset : offset + length])

    def write_from_peer(self, device: Any, value: bytes) -> None:
        """Apply a value written by a peer."""
        self._written = True
        self.write_value(value)
        self._fire(CharacteristicEvent.WRITTEN, device)

    def write_cccd_value(self, device: Any, value: int) -> None:
        """Apply a peer's subscription change."""
        value &= 0x0003
        if value == self._cccd_value:
            return
        self._cccd_value = value
        event = CharacteristicEvent.SUBSCRIBED if value else CharacteristicEvent.UNSUBSCRIBED
        self._fire(event, device)