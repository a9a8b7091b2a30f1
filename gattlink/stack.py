"""The host stack that attributes and devices talk through.

A :class:`Stack` keeps the host-side state (advertising settings, links,
the attribute database of connected peers) and records every PDU it would
put on the air, so the object model can run without a radio.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, TextIO

DEFAULT_MTU = 23
NO_CONNECTION = 0xFFFF
NO_RSSI = 127

_ATT_ERROR_RSP = 0x01
_ATT_READ_REQ = 0x0A
_ATT_READ_RSP = 0x0B
_ATT_WRITE_RSP = 0x13
_ATT_ERROR_ATTRIBUTE_NOT_FOUND = 0x0A


class HCITransport(ABC):
    """Byte channel to a Bluetooth controller."""

    @abstractmethod
    def begin(self) -> bool:
        """Open the channel; return whether it is ready."""

    @abstractmethod
    def end(self) -> None:
        """Close the channel."""

    @abstractmethod
    def wait(self, timeout: float) -> None:
        """Block until data arrives or ``timeout`` milliseconds pass."""

    @abstractmethod
    def available(self) -> int:
        """Return the number of bytes ready to read."""

    @abstractmethod
    def peek(self) -> int:
        """Return the next byte without consuming it, or -1."""

    @abstractmethod
    def read(self) -> int:
        """Consume and return the next byte, or -1."""

    @abstractmethod
    def write(self, data: bytes) -> int:
        """Send ``data``; return the number of bytes written."""


class PacketKind(Enum):
    WRITE_REQUEST = "write_request"
    WRITE_COMMAND = "write_command"
    NOTIFICATION = "notification"
    INDICATION = "indication"


@dataclass(frozen=True)
class Packet:
    """A PDU the stack sent; ``connection_handle`` is None for all links."""

    kind: PacketKind
    connection_handle: int | None
    handle: int
    value: bytes


@dataclass(frozen=True)
class LocalVersion:
    hci_version: int = 0
    hci_revision: int = 0
    lmp_version: int = 0
    manufacturer: int = 0
    lmp_subversion: int = 0


def format_address(address: bytes) -> str:
    """Format a little-endian 6-byte device address as ``xx:xx:xx:xx:xx:xx``."""
    raw = bytes(address)
    if len(raw) != 6:
        raise ValueError(f"a device address has 6 bytes, got {len(raw)}")
    return ":".join(f"{b:02x}" for b in reversed(raw))


@dataclass
class Stack:
    """Host-side state of the Bluetooth stack."""

    transport: HCITransport | None = None
    address: bytes = bytes(6)
    local_name: str | None = None
    device_name: str | None = None
    appearance: int = 0
    advertised_service_uuid: str | None = None
    manufacturer_data: bytes | None = None
    company_id: int | None = None
    service_data: tuple[str | None, bytes] | None = None
    advertising_interval: int | None = None
    connection_interval: tuple[int, int] | None = None
    connectable: bool = True
    timeout: float | None = None
    debug_stream: TextIO | None = None
    event_mask: int = 0
    running: bool = False
    advertising: bool = False
    scanning: bool = False
    scan_filter: tuple[str, str] | None = None
    scan_duplicates: bool = False
    services: list = field(default_factory=list)
    event_handlers: dict[Any, Callable] = field(default_factory=dict)
    connections: dict[int, tuple[int, bytes]] = field(default_factory=dict)
    remote_devices: dict[tuple[int, bytes], Any] = field(default_factory=dict)
    peer_attributes: dict[tuple[int, int], bytes] = field(default_factory=dict)
    mtus: dict[int, int] = field(default_factory=dict)
    discovered: deque = field(default_factory=deque)
    outgoing: list[Packet] = field(default_factory=list)

    # -- controller -----------------------------------------------------

    def begin(self) -> bool:
        self.running = bool(self.transport.begin()) if self.transport else True
        return self.running

    def end(self) -> None:
        if self.transport is not None and self.running:
            self.transport.end()
        self.running = False
        self.advertising = False
        self.scanning = False

    def reset(self) -> bool:
        if self.running:
            self.connections.clear()
            self.advertising = False
            self.scanning = False
        return self.running

    def read_local_version(self) -> LocalVersion | None:
        return LocalVersion() if self.running else None

    def set_event_mask(self, mask: int) -> bool:
        if not self.running:
            return False
        self.event_mask = mask
        return True

    def read_le_buffer_size(self) -> tuple[int, int] | None:
        return (DEFAULT_MTU + 4, 1) if self.running else None

    def poll(self, timeout: float | None = None) -> None:
        if self.transport is not None and self.running and timeout:
            self.transport.wait(timeout)

    def read_rssi(self, connection_handle: int) -> int:
        return NO_RSSI

    # -- links ----------------------------------------------------------

    def connected(self) -> bool:
        return bool(self.connections)

    def link_connected(self, connection_handle: int) -> bool:
        return connection_handle in self.connections

    def connection_handle(self, address_type: int, address: bytes) -> int:
        peer = (address_type, bytes(address))
        for handle, link in self.connections.items():
            if link == peer:
                return handle
        return NO_CONNECTION

    def peer_connected(self, address_type: int, address: bytes) -> bool:
        return self.connection_handle(address_type, address) != NO_CONNECTION

    def connect(self, address_type: int, address: bytes) -> bool:
        return self.peer_connected(address_type, address)

    def disconnect(self, address_type: int | None = None, address: bytes | None = None) -> bool:
        """Drop the link to one peer, or every link when no peer is given."""
        if address_type is None or address is None:
            had_links = bool(self.connections)
            self.connections.clear()
            return had_links
        handle = self.connection_handle(address_type, address)
        if handle == NO_CONNECTION:
            return False
        del self.connections[handle]
        return True

    def central(self) -> tuple[int, bytes] | None:
        return next(iter(self.connections.values()), None)

    def mtu(self, connection_handle: int) -> int:
        return self.mtus.get(connection_handle, DEFAULT_MTU)

    def remote_device(self, address_type: int, address: bytes) -> Any:
        return self.remote_devices.get((address_type, bytes(address)))

    def discover_attributes(self, address_type: int, address: bytes, service_uuid: str | None = None) -> bool:
        return self.peer_connected(address_type, address) and (
            self.remote_device(address_type, address) is not None
        )

    # -- ATT client -----------------------------------------------------

    def write_request(self, connection_handle: int, handle: int, value: bytes) -> bytes:
        """Write to a peer attribute; return the response PDU, empty without a link."""
        if not self.link_connected(connection_handle):
            return b""
        data = bytes(value)
        self.outgoing.append(Packet(PacketKind.WRITE_REQUEST, connection_handle, handle, data))
        self.peer_attributes[(connection_handle, handle)] = data
        return bytes([_ATT_WRITE_RSP])

    def write_command(self, connection_handle: int, handle: int, value: bytes) -> None:
        if not self.link_connected(connection_handle):
            return
        data = bytes(value)
        self.outgoing.append(Packet(PacketKind.WRITE_COMMAND, connection_handle, handle, data))
        self.peer_attributes[(connection_handle, handle)] = data

    def read_request(self, connection_handle: int, handle: int) -> bytes:
        """Read a peer attribute; return the response PDU, empty without a link."""
        if not self.link_connected(connection_handle):
            return b""
        stored = self.peer_attributes.get((connection_handle, handle))
        if stored is None:
            return bytes([_ATT_ERROR_RSP, _ATT_READ_REQ]) + handle.to_bytes(2, "little") + bytes(
                [_ATT_ERROR_ATTRIBUTE_NOT_FOUND]
            )
        return bytes([_ATT_READ_RSP]) + stored[: self.mtu(connection_handle) - 1]

    # -- ATT server -----------------------------------------------------

    def notify(self, handle: int, value: bytes) -> bool:
        if not self.connections:
            return False
        self.outgoing.append(Packet(PacketKind.NOTIFICATION, None, handle, bytes(value)))
        return True

    def indicate(self, handle: int, value: bytes) -> bool:
        if not self.connections:
            return False
        self.outgoing.append(Packet(PacketKind.INDICATION, None, handle, bytes(value)))
        return True

    def set_event_handler(self, event: Any, handler: Callable) -> None:
        self.event_handlers[event] = handler

    # -- GATT / GAP -----------------------------------------------------

    def add_service(self, service: Any) -> None:
        self.services.append(service)

    def service_uuid_for_characteristic(self, characteristic: Any) -> str | None:
        for service in self.services:
            if any(c is characteristic for c in getattr(service, "characteristics", ())):
                return service.uuid
        return None

    def set_advertised_service_data(self, service_uuid: str | None, data: bytes) -> None:
        self.service_data = (service_uuid, bytes(data))

    def advertise(self) -> bool:
        self.advertising = True
        return True

    def stop_advertise(self) -> None:
        self.advertising = False

    def scan(self, with_duplicates: bool = False, scan_filter: tuple[str, str] | None = None) -> bool:
        self.scanning = True
        self.scan_duplicates = with_duplicates
        self.scan_filter = scan_filter
        self.discovered.clear()
        return True

    def stop_scan(self) -> None:
        self.scanning = False
        self.scan_filter = None

    def available(self) -> Any:
        return self.discovered.popleft() if self.discovered else None


_current = Stack()


def use_stack(stack: Stack) -> Stack:
    """Make ``stack`` the current stack and return the one it replaces."""
    global _current
    previous, _current = _current, stack
    return previous


def current_stack() -> Stack:
    return _current