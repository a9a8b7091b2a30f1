"""Attributes discovered on a connected peer's GATT server."""

from __future__ import annotations

from typing import Any, Callable

from .constants import CharacteristicEvent, Property
from .stack import current_stack

CCCD_UUID = "2902"
ATT_HEADER_SIZE = 3
_ATT_ERROR_RSP = 0x01

EventHandler = Callable[[Any, "RemoteCharacteristic"], None]


def _to_bytes(value: bytes | bytearray | str) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


class RemoteAttribute:
    """An attribute of a peer, identified by its UUID string."""

    def __init__(self, uuid: str):
        self.uuid = uuid

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.uuid!r})"


class _RemoteValue(RemoteAttribute):
    """Shared value cache and ATT read/write logic for a peer attribute."""

    def __init__(self, uuid: str, connection_handle: int):
        super().__init__(uuid)
        self.connection_handle = connection_handle
        self._value = b""

    @property
    def value(self) -> bytes:
        return self._value

    @property
    def value_length(self) -> int:
        return len(self._value)

    def __getitem__(self, offset: int) -> int:
        if not self._value:
            return 0
        return self._value[offset]

    def _capped(self, value: bytes | bytearray | str) -> bytes:
        data = _to_bytes(value)
        max_length = current_stack().mtu(self.connection_handle) - ATT_HEADER_SIZE
        return data[:max_length]

    def _write_request(self, handle: int, data: bytes) -> bool:
        response = current_stack().write_request(self.connection_handle, handle, data)
        if not response or response[0] == _ATT_ERROR_RSP:
            return False
        self._value = data
        return True

    def _read(self, handle: int) -> bool:
        stack = current_stack()
        if not stack.link_connected(self.connection_handle):
            return False
        response = stack.read_request(self.connection_handle, handle)
        if not response or response[0] == _ATT_ERROR_RSP:
            self._value = b""
            return False
        self._value = bytes(response[1:])
        return True


class RemoteDescriptor(_RemoteValue):
    """A descriptor on a peer, read and written over ATT."""

    def __init__(self, uuid: str, connection_handle: int, handle: int):
        super().__init__(uuid, connection_handle)
        self.handle = handle

    def __getitem__(self, offset: int) -> int:
        return super().__getitem__(offset)

    def write_value(self, value: bytes | bytearray | str) -> bool:
        """Write with a request; the value is cut to fit the link MTU."""
        if not current_stack().link_connected(self.connection_handle):
            return False
        return self._write_request(self.handle, self._capped(value))

    def read(self) -> bool:
        """Fetch the current value from the peer."""
        return self._read(self.handle)


class RemoteCharacteristic(_RemoteValue):
    """A characteristic on a peer, with its descriptors and cached value."""

    def __init__(
        self,
        uuid: str,
        connection_handle: int,
        start_handle: int,
        properties: int,
        value_handle: int,
    ):
        super().__init__(uuid, connection_handle)
        self.start_handle = start_handle
        self.properties = Property(properties)
        self.value_handle = value_handle
        self.descriptors: list[RemoteDescriptor] = []
        self._value_updated = False
        self._updated_value_read = True
        self._updated_handler: EventHandler | None = None

    @property
    def descriptor_count(self) -> int:
        return len(self.descriptors)

    def __getitem__(self, offset: int) -> int:
        return super().__getitem__(offset)

    def write_value(self, value: bytes | bytearray | str) -> bool:
        """Write the value with a request or a command, as the properties allow."""
        stack = current_stack()
        if not stack.link_connected(self.connection_handle):
            return False
        data = self._capped(value)
        if self.properties & Property.WRITE:
            return self._write_request(self.value_handle, data)
        if self.properties & Property.WRITE_WITHOUT_RESPONSE:
            stack.write_command(self.connection_handle, self.value_handle, data)
            self._value = data
            return True
        return False

    def value_updated(self) -> bool:
        """Return whether a notification arrived since the last call, and clear it."""
        current_stack().link_connected(self.connection_handle)
        updated, self._value_updated = self._value_updated, False
        return updated

    def updated_value_read(self) -> bool:
        """Return whether the last notified value was already consumed, and mark it so."""
        was_read, self._updated_value_read = self._updated_value_read, True
        return was_read

    def read(self) -> bool:
        """Fetch the current value from the peer."""
        return self._read(self.value_handle)

    def write_cccd(self, value: int) -> bool:
        """Write the client configuration, using the CCCD or the handle after the value."""
        payload = (value & 0xFFFF).to_bytes(2, "little")
        for descriptor in self.descriptors:
            if descriptor.uuid == CCCD_UUID:
                return descriptor.write_value(payload)
        if self.properties & (Property.NOTIFY | Property.INDICATE):
            fallback = RemoteDescriptor("", self.connection_handle, self.value_handle + 1)
            return fallback.write_value(payload)
        return False

    def set_event_handler(self, event: int, handler: EventHandler | None) -> None:
        """Register a handler; only the UPDATED event applies to a peer characteristic."""
        if event == CharacteristicEvent.UPDATED:
            self._updated_handler = handler

    def add_descriptor(self, descriptor: RemoteDescriptor) -> None:
        self.descriptors.append(descriptor)

    def notify_value(self, device: Any, value: bytes) -> None:
        """Take a value pushed by the peer and report it to the handler."""
        self._value = bytes(value)
        self._value_updated = True
        self._updated_value_read = False
        if self._updated_handler is not None:
            self._updated_handler(device, self)