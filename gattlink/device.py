"""A peer device, as found by scanning or seen as a connected central."""

from __future__ import annotations

from typing import Any, Iterator

from .characteristic import Characteristic
from .service import Service
from .stack import NO_CONNECTION, NO_RSSI, current_stack, format_address

MAX_EIR_DATA = 31 * 2
"""Advertisement plus scan response data kept for one device."""

_EIR_UUID16 = (0x02, 0x03)
_EIR_UUID128 = (0x06, 0x07)
_EIR_NAME = (0x08, 0x09)
_SCAN_RESPONSE_TYPE = 0x04
_DISCOVERED_MASK = 0x18

GENERIC_ACCESS_SERVICE = "1800"
DEVICE_NAME_CHARACTERISTIC = "2a00"
APPEARANCE_SERVICE = "1801"
APPEARANCE_CHARACTERISTIC = "2a01"


def _uuid_to_string(data: bytes) -> str:
    """Format a little-endian UUID as hex, with dashes for the 128-bit form."""
    digits = bytes(reversed(data)).hex()
    if len(data) == 16:
        return "-".join((digits[:8], digits[8:12], digits[12:16], digits[16:20], digits[20:]))
    return digits


class Device:
    """A remote device identified by its address type and 6-byte address."""

    def __init__(self, address_type: int = 0, address: bytes = bytes(6)):
        raw = bytes(address)
        if len(raw) != 6:
            raise ValueError(f"a device address has 6 bytes, got {len(raw)}")
        self.address_type = address_type
        self._address = raw
        self._advertisement_type_mask = 0
        self._eir_data = b""
        self._rssi = NO_RSSI

    @property
    def raw_address(self) -> bytes:
        return self._address

    @property
    def address(self) -> str:
        return format_address(self._address)

    def __repr__(self) -> str:
        return f"Device({self.address_type}, {self.address!r})"

    # -- link -----------------------------------------------------------

    def poll(self, timeout: float | None = None) -> None:
        """Process pending controller events, waiting up to ``timeout`` milliseconds."""
        current_stack().poll(timeout)

    def connected(self) -> bool:
        stack = current_stack()
        stack.poll()
        if not self:
            return False
        return stack.peer_connected(self.address_type, self._address)

    def disconnect(self) -> bool:
        return current_stack().disconnect(self.address_type, self._address)

    def connect(self) -> bool:
        return current_stack().connect(self.address_type, self._address)

    def discover_attributes(self) -> bool:
        return current_stack().discover_attributes(self.address_type, self._address, None)

    def discover_service(self, service_uuid: str) -> bool:
        return current_stack().discover_attributes(self.address_type, self._address, service_uuid)

    def rssi(self) -> int:
        """Live signal strength while connected, else the last advertised one."""
        stack = current_stack()
        handle = stack.connection_handle(self.address_type, self._address)
        if handle != NO_CONNECTION:
            return stack.read_rssi(handle)
        return self._rssi

    # -- identity -------------------------------------------------------

    def __bool__(self) -> bool:
        return self._address != bytes(6)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Device):
            return NotImplemented
        return self.address_type == other.address_type and self._address == other._address

    def __hash__(self) -> int:
        return hash((self.address_type, self._address))

    def has_address(self, address_type: int, address: bytes) -> bool:
        return self.address_type == address_type and self._address == bytes(address)

    # -- advertisement data ---------------------------------------------

    def _eir_records(self) -> Iterator[tuple[int, bytes]]:
        data = self._eir_data
        i = 0
        while i + 1 < len(data):
            length = data[i]
            if length == 0:
                return
            yield data[i + 1], data[i + 2 : i + 1 + length]
            i += 1 + length

    def _advertised_uuids(self) -> Iterator[str]:
        for eir_type, payload in self._eir_records():
            if eir_type in _EIR_UUID16:
                size = 2
            elif eir_type in _EIR_UUID128:
                size = 16
            else:
                continue
            for start in range(0, len(payload), size):
                yield _uuid_to_string(payload[start : start + size])

    def local_name(self) -> str:
        """The shortened or complete local name from the advertisement, or ''."""
        for eir_type, payload in self._eir_records():
            if eir_type in _EIR_NAME:
                return payload.decode("latin-1")
        return ""

    def has_local_name(self) -> bool:
        return len(self.local_name()) > 0

    def advertised_service_uuid_count(self) -> int:
        return sum(1 for _ in self._advertised_uuids())

    def advertised_service_uuid(self, index: int = 0) -> str:
        """The ``index``-th advertised service UUID, or '' if there is none."""
        for position, uuid in enumerate(self._advertised_uuids()):
            if position == index:
                return uuid
        return ""

    def has_advertised_service_uuid(self, index: int = 0) -> bool:
        return len(self.advertised_service_uuid(index)) > 0

    def set_advertisement_data(self, adv_type: int, eir_data: bytes, rssi: int) -> None:
        """Replace the stored data with a fresh advertisement report."""
        self._advertisement_type_mask = (1 << adv_type) & 0xFF
        self._eir_data = bytes(eir_data)[:MAX_EIR_DATA]
        self._rssi = rssi

    def set_scan_response_data(self, eir_data: bytes, rssi: int) -> None:
        """Append a scan response to the stored advertisement data."""
        self._advertisement_type_mask |= 1 << _SCAN_RESPONSE_TYPE
        self._eir_data = (self._eir_data + bytes(eir_data))[:MAX_EIR_DATA]
        self._rssi = rssi

    def discovered(self) -> bool:
        """Whether a scannable advertisement or a scan response has been seen."""
        return (self._advertisement_type_mask & _DISCOVERED_MASK) != 0

    # -- peer attribute database ----------------------------------------

    def _remote(self) -> Any:
        return current_stack().remote_device(self.address_type, self._address)

    def _read_characteristic(self, service_uuid: str, characteristic_uuid: str) -> bytes | None:
        if self._remote() is None:
            return None
        service = self.service(service_uuid)
        if not service:
            return None
        characteristic = service.characteristic(characteristic_uuid)
        if not characteristic:
            return None
        characteristic.read()
        return characteristic.value

    def device_name(self) -> str:
        """The peer's Device Name characteristic, or '' if it has none."""
        value = self._read_characteristic(GENERIC_ACCESS_SERVICE, DEVICE_NAME_CHARACTERISTIC)
        if value is None:
            return ""
        return value.decode("latin-1")

    def appearance(self) -> int:
        """The peer's Appearance characteristic as a 16-bit value, or 0."""
        value = self._read_characteristic(APPEARANCE_SERVICE, APPEARANCE_CHARACTERISTIC)
        if value is None:
            return 0
        return int.from_bytes(value[:2], "little")

    def service_count(self) -> int:
        remote = self._remote()
        return remote.service_count if remote is not None else 0

    def has_service(self, uuid: str, index: int = 0) -> bool:
        return self.service(uuid, index).remote is not None

    def service(self, key: int | str, index: int = 0) -> Service:
        """Look up a peer service by position, or by UUID and occurrence.

        UUIDs compare without regard to case; a miss gives an empty service.
        """
        remote = self._remote()
        if remote is None:
            return Service()
        if isinstance(key, int):
            if 0 <= key < remote.service_count:
                return Service.wrap(remote.services[key])
            return Service()
        wanted = key.lower()
        matches = (s for s in remote.services if s.uuid.lower() == wanted)
        for count, match in enumerate(matches):
            if count == index:
                return Service.wrap(match)
        return Service()

    def _all_characteristics(self) -> list:
        remote = self._remote()
        if remote is None:
            return []
        return [c for s in remote.services for c in s.characteristics]

    def characteristic_count(self) -> int:
        return len(self._all_characteristics())

    def has_characteristic(self, uuid: str, index: int = 0) -> bool:
        return self.characteristic(uuid, index).remote is not None

    def characteristic(self, key: int | str, index: int = 0) -> Characteristic:
        """Look up a peer characteristic across all services.

        By position counts through every service in order; by UUID picks the
        ``index``-th case-insensitive match. A miss gives an empty characteristic.
        """
        found = self._all_characteristics()
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