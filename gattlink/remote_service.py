"""Services and devices discovered on a connected peer."""

from __future__ import annotations

from .remote import RemoteAttribute, RemoteCharacteristic


class RemoteService(RemoteAttribute):
    """A primary service of a peer, with the characteristics found in it."""

    def __init__(self, uuid: str, start_handle: int, end_handle: int):
        super().__init__(uuid)
        self.start_handle = start_handle
        self.end_handle = end_handle
        self.characteristics: list[RemoteCharacteristic] = []

    @property
    def characteristic_count(self) -> int:
        return len(self.characteristics)

    def add_characteristic(self, characteristic: RemoteCharacteristic) -> None:
        """Append a discovered characteristic, keeping discovery order."""
        self.characteristics.append(characteristic)


class RemoteDevice:
    """The attribute database discovered on one peer."""

    def __init__(self):
        self.services: list[RemoteService] = []

    @property
    def service_count(self) -> int:
        return len(self.services)

    def add_service(self, service: RemoteService) -> None:
        """Append a discovered service, keeping discovery order."""
        self.services.append(service)

    def clear_services(self) -> None:
        """Forget every discovered service."""
        self.services.clear()

    def __repr__(self) -> str:
        return f"RemoteDevice(services={[s.uuid for s in self.services]!r})"