"""Bluetooth Low Energy GATT services, characteristics, descriptors and devices over a host stack."""

__version__ = "0.1.0"

__all__ = [
    "characteristic",
    "constants",
    "descriptor",
    "device",
    "local",
    "local_device",
    "local_service",
    "remote",
    "remote_service",
    "service",
    "stack",
]