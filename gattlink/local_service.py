"""Services hosted by the local GATT server."""

from __future__ import annotations

from typing import Any

from .constants import AttributeType
from .local import LocalAttribute, LocalCharacteristic


def _local_characteristic(characteristic: Any) -> LocalCharacteristic | None:
    if isinstance(characteristic, LocalCharacteristic):
        return characteristic
    inner = getattr(characteristic, "local", None)
    if isinstance(inner, LocalCharacteristic):
        return inner
    return None


class LocalService(LocalAttribute):
    """A primary service in the local attribute database."""

    attribute_type = AttributeType.SERVICE

    def __init__(self, uuid: str):
        super().__init__(uuid)
        self.start_handle = 0
        self.end_handle = 0
        self.characteristics: list[LocalCharacteristic] = []

    def add_characteristic(self, characteristic: Any) -> None:
        """Add a local characteristic, or the local one an object wraps.

        Anything that does not resolve to a local characteristic is ignored.
        """
        local = _local_characteristic(characteristic)
        if local is not None:
            self.characteristics.append(local)

    def set_handles(self, start: int, end: int) -> None:
        """Record the attribute handle range the service occupies."""
        self.start_handle = start
        self.end_handle = end

    @property
    def characteristic_count(self) -> int:
        return len(self.characteristics)