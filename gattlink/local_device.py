"""The local Bluetooth device: controller setup, advertising, scanning and GATT server."""

from __future__ import annotations

from typing import Any, Callable, TextIO

from .constants import DeviceEvent
from .local_service import LocalService
from .stack import NO_CONNECTION, NO_RSSI, current_stack, format_address

EVENT_MASK_ALL = 0x3FFFFFFFFFFFFFFF


def _local_service(service: Any) -> LocalService | None:
    if isinstance(service, LocalService):
        return service
    inner = getattr(service, "local", None)
    if isinstance(inner, LocalService):
        return inner
    return None


class LocalDevice:
    """Front for the controller and host stack of this device."""

    def begin(self) -> bool:
        """Bring up the controller; on any failure shut it down and return False."""
        stack = current_stack()
        if not stack.begin():
            self.end()
            return False
        if not stack.reset():
            self.end()
            return False
        if stack.read_local_version() is None:
            self.end()
            return False
        if not stack.set_event_mask(EVENT_MASK_ALL):
            self.end()
            return False
        if stack.read_le_buffer_size() is None:
            self.end()
            return False
        return True

    def end(self) -> None:
        current_stack().end()

    def poll(self, timeout: float | None = None) -> None:
        """Process pending controller events, waiting up to ``timeout`` milliseconds."""
        current_stack().poll(timeout)

    def connected(self) -> bool:
        stack = current_stack()
        stack.poll()
        return stack.connected()

    def disconnect(self) -> bool:
        return current_stack().disconnect()

    def address(self) -> str:
        return format_address(current_stack().address)

    def rssi(self) -> int:
        """Signal strength of the connected central, or 127 without one."""
        stack = current_stack()
        link = stack.central()
        if link is None:
            return NO_RSSI
        handle = stack.connection_handle(*link)
        if handle == NO_CONNECTION:
            return NO_RSSI
        return stack.read_rssi(handle)

    def set_advertised_service_uuid(self, uuid: str) -> None:
        current_stack().advertised_service_uuid = uuid

    def set_advertised_service(self, service: Any) -> None:
        self.set_advertised_service_uuid(service.uuid)

    def set_manufacturer_data(self, data: bytes, company_id: int | None = None) -> None:
        """Set the manufacturer-specific advertising data, with an optional company id."""
        stack = current_stack()
        stack.manufacturer_data = bytes(data)
        stack.company_id = company_id

    def set_local_name(self, name: str) -> None:
        current_stack().local_name = name

    def set_device_name(self, name: str) -> None:
        current_stack().device_name = name

    def set_appearance(self, appearance: int) -> None:
        current_stack().appearance = appearance

    def add_service(self, service: Any) -> None:
        """Add a local service to the attribute database; others are ignored."""
        local = _local_service(service)
        if local is not None:
            current_stack().add_service(local)

    def advertise(self) -> bool:
        return current_stack().advertise()

    def stop_advertise(self) -> None:
        current_stack().stop_advertise()

    def scan(self, with_duplicates: bool = False) -> bool:
        return current_stack().scan(with_duplicates)

    def scan_for_name(self, name: str, with_duplicates: bool = False) -> bool:
        return current_stack().scan(with_duplicates, ("name", name))

    def scan_for_uuid(self, uuid: str, with_duplicates: bool = False) -> bool:
        return current_stack().scan(with_duplicates, ("uuid", uuid))

    def scan_for_address(self, address: str, with_duplicates: bool = False) -> bool:
        return current_stack().scan(with_duplicates, ("address", address))

    def stop_scan(self) -> None:
        current_stack().stop_scan()

    def central(self) -> Any:
        """Return the connected central as a device, or None without one."""
        from .device import Device

        stack = current_stack()
        stack.poll()
        link = stack.central()
        if link is None:
            return None
        address_type, address = link
        return Device(address_type, address)

    def available(self) -> Any:
        """Return the next device found by scanning, or None."""
        stack = current_stack()
        stack.poll()
        return stack.available()

    def set_event_handler(self, event: int, handler: Callable | None) -> None:
        current_stack().set_event_handler(DeviceEvent(event), handler)

    def set_advertising_interval(self, interval: int) -> None:
        current_stack().advertising_interval = interval

    def set_connection_interval(self, minimum: int, maximum: int) -> None:
        current_stack().connection_interval = (minimum, maximum)

    def set_connectable(self, connectable: bool) -> None:
        current_stack().connectable = connectable

    def set_timeout(self, timeout: float) -> None:
        current_stack().timeout = timeout

    def debug(self, stream: TextIO) -> None:
        current_stack().debug_stream = stream

    def no_debug(self) -> None:
        current_stack().debug_stream = None