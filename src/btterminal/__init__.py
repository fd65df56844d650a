"""

Bluetooth Terminal

- Conduit: abstraction of a bi-directional channel. Combines 2 streams for reading and writing.
  Sockets, serial ports and child processes are all exposed as conduits.
- Connector: opens a conduit to an endpoint, such as an RFCOMM channel on a remote device,
  and fires events when connected and disconnected.
- DeviceDiscovery / Pairing: the platform Bluetooth stack, driven through bluetoothctl.
- DeviceCatalog - the named devices found by the last discovery pass.
- Session - the selected device and the connection to it.
- CommandInterpreter - parses input lines and runs them against the catalog and the session.

Connectors can be wrapped: CloseOnErrorConnector wraps the transport connector and disconnects
it as soon as reading or writing its streams fails, so the session sees the device as
merely selected again.

"""

__version__ = "0.0.1"
