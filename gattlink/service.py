"""A service handle that fronts either a local or a peer service."""

from __future__ import annotations

from typing import Any

from .characteristic import Characteristic
from .local_service import LocalService
from .remote_service import RemoteService


class Service:
    """A service of the local server or of a peer; empty when it wraps neither."""

    def __init__(self, uuid: str | None = None):
        self._local: LocalService | None = None
        self._remote: RemoteService | None = None
        if uuid is not None:
            self._local = LocalService(uuid)

    @classmethod
    def wrap(cls, attribute: LocalService | RemoteService | None) -> Service:
        """Front an existing local or peer service; ``None`` gives an empty one."""
        service = cls()
        if isinstance(attribute, LocalService):
            service._local = attribute
        elif isinstance(attribute, RemoteService):
            service._remote = attribute
        elif attribute is not None:
            raise TypeError(f"cannot wrap {type(attribute).__name__} as a service")
        return service

    @property
    def local(self) -> LocalService | None:
        return self._local

    @property
    def remote(self) -> RemoteService | None:
        return self._remote

    @property
    def uuid(self) -> str:
        if self._local is not None:
            return self._local.uuid
        if self._remote is not None:
            return self._remote.uuid
        return ""

    @property
    def characteristics(self) -> list:
        if self._local is not None:
            return self._local.characteristics
        return []

    def add_characteristic(self, characteristic: Any) -> None:
        """Add a characteristic to a local service; otherwise ignored."""
        if self._local is not None:
            self._local.add_characteristic(characteristic)

    def __bool__(self) -> bool:
        return self._local is not None or self._remote is not None

    def __repr__(self) -> str:
        return f"Service({self.uuid!r})"

    def characteristic_count(self) -> int:
        """Number of characteristics discovered on a peer service."""
        if self._remote is not None:
            return self._remote.characteristic_count
        return 0

    def has_characteristic(self, uuid: str, index: int = 0) -> bool:
        """Return whether the peer service has an ``index``-th characteristic with ``uuid``."""
        return self.characteristic(uuid, index).remote is not None

    def characteristic(self, key: int | str, index: int = 0) -> Characteristic:
        """Look up a peer characteristic by position, or by UUID and occurrence.

        UUIDs compare without regard to case; a miss gives an empty characteristic.
        """
        if self._remote is None:
            return Characteristic()
        found = self._remote.characteristics
        if isinstance(key, int):
            if 0 <= key < len(found):
                return Characteristic.wrap(found[key])
            return Characteristic()
        wanted = key.lower()
        matches = (c for c in found if c.uuid.lower() == wanted)
        for count, match in enumerate(matches):
            if count == index:
                return Characteristic.wrap(match)
        return Characteristic()