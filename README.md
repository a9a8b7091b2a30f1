# gattlink

`gattlink` models a Bluetooth Low Energy device the way GATT sees it:
services that hold characteristics, characteristics that hold
descriptors, and devices that advertise, scan and connect.

It covers both sides of a link:

- **Local (server) side** – build services and characteristics, keep
  their values, handle subscriptions (a Client Characteristic
  Configuration descriptor, UUID `2902`, is added automatically to
  characteristics with the notify or indicate property) and call event
  handlers when a peer reads, writes or subscribes.
- **Peer (client) side** – walk the services, characteristics and
  descriptors discovered on a connected peer, read and write their
  values, and subscribe to notifications and indications.

Every operation that would reach the controller goes through a
`gattlink.stack.Stack`. The stack keeps host-side state (advertising
settings, open links, the discovered attribute databases of peers, the
values held by peer attributes) and records each PDU it sends in
`Stack.outgoing`, so the whole object model runs and can be tested
without a radio.

## Installation

```
pip install gattlink
```

Python 3.10 or newer is required. There are no runtime dependencies.

## Modules

| Module | Contents |
| --- | --- |
| `gattlink.constants` | `Property`, `CharacteristicEvent`, `DeviceEvent`, `AttributeType`, `MAX_VALUE_SIZE` |
| `gattlink.stack` | `HCITransport`, `Stack`, `Packet`, `PacketKind`, `use_stack`, `current_stack`, `format_address` |
| `gattlink.service` | `Service` |
| `gattlink.characteristic` | `Characteristic` |
| `gattlink.descriptor` | `Descriptor` |
| `gattlink.device` | `Device`, a peer seen while scanning or connected |
| `gattlink.local_device` | `LocalDevice`: begin, advertise, scan, poll, add services |
| `gattlink.local`, `gattlink.local_service` | `LocalAttribute`, `LocalDescriptor`, `LocalCharacteristic`, `LocalService` |
| `gattlink.remote`, `gattlink.remote_service` | `RemoteAttribute`, `RemoteDescriptor`, `RemoteCharacteristic`, `RemoteService`, `RemoteDevice` |

`Service`, `Characteristic` and `Descriptor` are handles: each fronts
either a local attribute or a peer attribute, and one that fronts
neither is false in a boolean context, so a failed lookup can be tested
with a plain `if`.

## A local service

```python
from gattlink.characteristic import Characteristic
from gattlink.constants import CharacteristicEvent, Property
from gattlink.local_device import LocalDevice
from gattlink.service import Service

battery = Service("180f")
level = Characteristic("2a19", Property.READ | Property.NOTIFY, 1, fixed_length=True)
battery.add_characteristic(level)
level.write_int(87)          # level.value == b"\x57"

def on_write(device, characteristic):
    print(device.address, characteristic.value)

level.set_event_handler(CharacteristicEvent.WRITTEN, on_write)

ble = LocalDevice()
ble.begin()
ble.set_local_name("Sensor")
ble.set_advertised_service(battery)
ble.add_service(battery)
ble.advertise()
```

`Characteristic.with_value(uuid, properties, value)` creates a
characteristic sized to an initial value. Values longer than a
characteristic's size are cut to fit, and no local value is larger than
512 bytes. `write_int()` and `read_int()` store and read little-endian
integers of a given size, signed or unsigned.

When a peer has subscribed, `write_value()` sends an indication (if the
characteristic has the indicate property and indications were enabled)
or a notification instead of only storing the value. A characteristic
on which `broadcast()` succeeded (it needs the broadcast property) puts
its value in the advertised service data.

## Working with a peer

`Device` objects carry the advertising data received from a peer:
`local_name()`, `advertised_service_uuid()` and
`advertised_service_uuid_count()` decode it, and `rssi()` gives the
signal strength. Once the peer's attribute database is known to the
stack, `service()`, `characteristic()` and their `has_…` and `…_count`
companions look attributes up by position or by UUID (compared without
regard to case, with an optional occurrence index).

```python
from gattlink.constants import Property
from gattlink.device import Device
from gattlink.remote import RemoteCharacteristic
from gattlink.remote_service import RemoteDevice, RemoteService
from gattlink.stack import Stack, use_stack

stack = Stack()
use_stack(stack)

address = bytes([0x01, 0x02, 0x03, 0x04, 0x05, 0x06])   # made up
stack.connections[0x0040] = (0, address)

database = RemoteDevice()
service = RemoteService("180f", 1, 5)
service.add_characteristic(
    RemoteCharacteristic("2a19", 0x0040, 2, Property.READ | Property.NOTIFY, 3)
)
database.add_service(service)
stack.remote_devices[(0, address)] = database
stack.peer_attributes[(0x0040, 3)] = b"\x57"

peer = Device(0, address)
peer.address                      # "06:05:04:03:02:01"
level = peer.characteristic("2A19")
level.read()                      # True; level.value == b"\x57"
level.subscribe()                 # writes 0x0001 to the configuration descriptor
```

A `Characteristic` for a peer supports `read()`, `write_value()`,
`subscribe()` and `unsubscribe()`; `can_read()`, `can_write()` and
`can_subscribe()` report what its properties allow. Values written to a
peer are cut to the link MTU less the 3-byte ATT header.

## What the package does not do

- It contains no controller driver. `HCITransport` only describes the
  byte channel a stack would use; `Stack` keeps state and records the
  PDUs it would send, but does not encode HCI packets or decode events
  from a controller.
- It does not discover a peer's attribute database over the air: the
  services, characteristics and descriptors of a peer are whatever has
  been placed in `Stack.remote_devices`.
- It offers no characteristic classes bound to a fixed type such as a
  string or a float; use `write_value()` with bytes or text, or
  `write_int()` and `read_int()` for integers.
- It has no command-line program.

## Tests

```
pip install gattlink[test]
pytest
```