"""A descriptor handle that fronts either a local or a peer descriptor."""

from __future__ import annotations

from .local import LocalDescriptor
from .remote import RemoteDescriptor


class Descriptor:
    """A descriptor of the local server or of a peer; empty when it wraps neither."""

    def __init__(self, uuid: str | None = None, value: bytes | str = b""):
        self._local: LocalDescriptor | None = None
        self._remote: RemoteDescriptor | None = None
        if uuid is not None:
            self._local = LocalDescriptor(uuid, value)

    @classmethod
    def wrap(cls, attribute: LocalDescriptor | RemoteDescriptor | None) -> Descriptor:
        """Front an existing local or peer descriptor; ``None`` gives an empty one."""
        descriptor = cls()
        if isinstance(attribute, LocalDescriptor):
            descriptor._local = attribute
        elif isinstance(attribute, RemoteDescriptor):
            descriptor._remote = attribute
        elif attribute is not None:
            raise TypeError(f"cannot wrap {type(attribute).__name__} as a descriptor")
        return descriptor

    @property
    def local(self) -> LocalDescriptor | None:
        return self._local

    @property
    def remote(self) -> RemoteDescriptor | None:
        return self._remote

    @property
    def uuid(self) -> str:
        if self._local is not None:
            return self._local.uuid
        if self._remote is not None:
            return self._remote.uuid
        return ""

    @property
    def value_size(self) -> int:
        if self._local is not None:
            return self._local.value_size
        if self._remote is not None:
            return self._remote.value_length
        return 0

    @property
    def value_length(self) -> int:
        return self.value_size

    @property
    def value(self) -> bytes:
        if self._local is not None:
            return self._local.value
        if self._remote is not None:
            return self._remote.value
        return b""

    def __getitem__(self, offset: int) -> int:
        if self._local is not None:
            return self._local[offset]
        if self._remote is not None:
            return self._remote[offset]
        return 0

    def __bool__(self) -> bool:
        return self._local is not None or self._remote is not None

    def __repr__(self) -> str:
        return f"Descriptor({self.uuid!r})"

    def read_value(self, size: int) -> bytes:
        """Return up to ``size`` bytes of the value; a peer descriptor is read first.

        A failed read of a peer descriptor gives empty bytes.
        """
        if size < 0:
            raise ValueError("size must not be negative")
        if self._local is not None:
            return self._local.value[:size]
        if self._remote is not None:
            if not self.read():
                return b""
            return self._remote.value[:size]
        return b""

    def read_int(self, size: int = 1, signed: bool = False) -> int:
        """Read the value as a little-endian integer of ``size`` bytes.

        Missing bytes count as zero, so a short or failed read yields a smaller value.
        """
        if size <= 0:
            raise ValueError("size must be positive")
        data = self.read_value(size).ljust(size, b"\x00")
        return int.from_bytes(data, "little", signed=signed)

    def read(self) -> bool:
        """Fetch the value of a peer descriptor; always False for a local one."""
        if self._remote is not None:
            return self._remote.read()
        return False