"""A characteristic handle that fronts either a local or a peer characteristic."""

from __future__ import annotations

from typing import Any, Callable

from .constants import Property
from .descriptor import Descriptor
from .local import LocalCharacteristic, LocalDescriptor
from .remote import RemoteCharacteristic

CharacteristicHandler = Callable[[Any, "Characteristic"], None]

_CCCD_NOTIFY = 0x0001
_CCCD_INDICATE = 0x0002


class Characteristic:
    """A characteristic of the local server or of a peer; empty when it wraps neither."""

    def __init__(
        self,
        uuid: str | None = None,
        properties: int = 0,
        value_size: int = 0,
        fixed_length: bool = False,
    ):
        self._local: LocalCharacteristic | None = None
        self._remote: RemoteCharacteristic | None = None
        if uuid is not None:
            self._local = LocalCharacteristic(uuid, properties, value_size, fixed_length)

    @classmethod
    def with_value(cls, uuid: str, properties: int, value: bytes | str) -> Characteristic:
        """Create a local characteristic sized to ``value`` and holding it."""
        return cls.wrap(LocalCharacteristic.with_value(uuid, properties, value))

    @classmethod
    def wrap(cls, attribute: LocalCharacteristic | RemoteCharacteristic | None) -> Characteristic:
        """Front an existing local or peer characteristic; ``None`` gives an empty one."""
        characteristic = cls()
        if isinstance(attribute, LocalCharacteristic):
            characteristic._local = attribute
        elif isinstance(attribute, RemoteCharacteristic):
            characteristic._remote = attribute
        elif attribute is not None:
            raise TypeError(f"cannot wrap {type(attribute).__name__} as a characteristic")
        return characteristic

    @property
    def local(self) -> LocalCharacteristic | None:
        return self._local

    @property
    def remote(self) -> RemoteCharacteristic | None:
        return self._remote

    @property
    def uuid(self) -> str:
        if self._local is not None:
            return self._local.uuid
        if self._remote is not None:
            return self._remote.uuid
        return ""

    @property
    def properties(self) -> Property:
        if self._local is not None:
            return self._local.properties
        if self._remote is not None:
            return self._remote.properties
        return Property(0)

    @property
    def value_size(self) -> int:
        if self._local is not None:
            return self._local.value_size
        if self._remote is not None:
            return self._remote.value_length
        return 0

    @property
    def value(self) -> bytes:
        if self._local is not None:
            return self._local.value
        if self._remote is not None:
            return self._remote.value
        return b""

    @property
    def value_length(self) -> int:
        if self._local is not None:
            return self._local.value_length
        if self._remote is not None:
            return self._remote.value_length
        return 0

    def __getitem__(self, offset: int) -> int:
        if self._local is not None:
            return self._local[offset]
        if self._remote is not None:
            return self._remote[offset]
        return 0

    def __bool__(self) -> bool:
        return self._local is not None or self._remote is not None

    def __repr__(self) -> str:
        return f"Characteristic({self.uuid!r})"

    # -- value access ---------------------------------------------------

    def read_value(self, size: int) -> bytes:
        """Return up to ``size`` bytes of the value.

        A peer characteristic is read again when its last notified value was
        already consumed and it is readable; a failed read gives empty bytes.
        """
        if size < 0:
            raise ValueError("size must not be negative")
        if self._local is not None:
            return self._local.value[:size]
        if self._remote is not None:
            if self._remote.updated_value_read() and self.can_read():
                if not self.read():
                    return b""
            return self._remote.value[:size]
        return b""

    def read_int(self, size: int = 1, signed: bool = False) -> int:
        """Read the value as a little-endian integer of ``size`` bytes.

        Missing bytes count as zero.
        """
        if size <= 0:
            raise ValueError("size must be positive")
        data = self.read_value(size).ljust(size, b"\x00")
        return int.from_bytes(data, "little", signed=signed)

    def write_value(self, value: bytes | bytearray | str) -> bool:
        """Write the value locally or to the peer; False for an empty handle."""
        if self._local is not None:
            return bool(self._local.write_value(value))
        if self._remote is not None:
            return bool(self._remote.write_value(value))
        return False

    def write_int(self, value: int, size: int = 1, signed: bool = False) -> bool:
        """Write ``value`` as a little-endian integer of ``size`` bytes."""
        if size <= 0:
            raise ValueError("size must be positive")
        return self.write_value(value.to_bytes(size, "little", signed=signed))

    # -- local server ---------------------------------------------------

    def broadcast(self) -> bool:
        if self._local is not None:
            return self._local.broadcast()
        return False

    def written(self) -> bool:
        if self._local is not None:
            return self._local.written()
        return False

    def subscribed(self) -> bool:
        if self._local is not None:
            return self._local.subscribed()
        return False

    def value_updated(self) -> bool:
        if self._remote is not None:
            return self._remote.value_updated()
        return False

    def add_descriptor(self, descriptor: Descriptor | LocalDescriptor) -> None:
        """Attach a local descriptor to a local characteristic; otherwise ignored."""
        if self._local is None:
            return
        if isinstance(descriptor, Descriptor):
            inner = descriptor.local
            if inner is not None:
                self._local.add_descriptor(inner)
        else:
            self._local.add_descriptor(descriptor)

    def set_event_handler(self, event: int, handler: CharacteristicHandler | None) -> None:
        """Register ``handler(device, characteristic)`` for ``event``."""
        wrapped = None
        if handler is not None:

            def wrapped(device: Any, attribute: Any) -> None:
                handler(device, Characteristic.wrap(attribute))

        if self._local is not None:
            self._local.set_event_handler(event, wrapped)
        if self._remote is not None:
            self._remote.set_event_handler(event, wrapped)

    # -- peer descriptors -----------------------------------------------

    def descriptor_count(self) -> int:
        if self._remote is not None:
            return self._remote.descriptor_count
        return 0

    def _matching_descriptors(self, uuid: str):
        if self._remote is None:
            return
        wanted = uuid.lower()
        for descriptor in self._remote.descriptors:
            if descriptor.uuid.lower() == wanted:
                yield descriptor

    def has_descriptor(self, uuid: str, index: int = 0) -> bool:
        """Return whether the peer has an ``index``-th descriptor with ``uuid``."""
        return self.descriptor(uuid, index).remote is not None

    def descriptor(self, key: int | str, index: int = 0) -> Descriptor:
        """Look up a peer descriptor by position, or by UUID and occurrence.

        UUIDs compare without regard to case; a miss gives an empty descriptor.
        """
        if self._remote is None:
            return Descriptor()
        if isinstance(key, int):
            if 0 <= key < self._remote.descriptor_count:
                return Descriptor.wrap(self._remote.descriptors[key])
            return Descriptor()
        for count, found in enumerate(self._matching_descriptors(key)):
            if count == index:
                return Descriptor.wrap(found)
        return Descriptor()

    # -- peer operations ------------------------------------------------

    def can_read(self) -> bool:
        if self._remote is not None:
            return bool(self.properties & Property.READ)
        return False

    def read(self) -> bool:
        if self._remote is not None:
            return self._remote.read()
        return False

    def can_write(self) -> bool:
        if self._remote is not None:
            return bool(self.properties & (Property.WRITE | Property.WRITE_WITHOUT_RESPONSE))
        return False

    def can_subscribe(self) -> bool:
        if self._remote is not None:
            return bool(self.properties & (Property.NOTIFY | Property.INDICATE))
        return False

    def subscribe(self) -> bool:
        """Enable indications if supported, otherwise notifications."""
        if self._remote is not None:
            mode = _CCCD_INDICATE if self.properties & Property.INDICATE else _CCCD_NOTIFY
            return self._remote.write_cccd(mode)
        return False

    def can_unsubscribe(self) -> bool:
        return self.can_subscribe()

    def unsubscribe(self) -> bool:
        if self._remote is not None:
            return self._remote.write_cccd(0x0000)
        return False