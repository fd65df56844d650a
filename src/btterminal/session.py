"""
The terminal session: which device is selected and whether a connection to it is open.

The state is derived rather than stored. A session is IDLE until a device is selected, CONNECTED
while it holds a connector that reports itself connected, and SELECTED otherwise. A connector whose
transport has failed is released as soon as the session notices, so a line writer is only ever
held while the session is CONNECTED.
"""

import codecs
import logging
import subprocess
from collections import namedtuple
from enum import Enum

from btterminal.bluetooth.base import Device, DiscoveryError, Pairing
from btterminal.catalog import DeviceCatalog
from btterminal.conduit.lines import LineWriter
from btterminal.connector.base import CloseOnErrorConnector, ConnectionNotConnectedError, ConnectorError
from btterminal.errors import DeviceNotFoundError, EmptyMessageError, NoDeviceSelectedError
from btterminal.support.events import EventSource

logger = logging.getLogger(__name__)


class SessionState(Enum):
    IDLE = 'idle'
    SELECTED = 'selected'
    CONNECTED = 'connected'


SessionStatus = namedtuple('SessionStatus', ['device_name', 'connected'])


class Session:
    """
    :param catalog: resolves device names and refreshes device information
    :param pairing: pairs with devices that are not yet authenticated
    :param connector_factory: a callable that creates an unconnected Connector for a Device
    :param encoding: the text encoding used for messages
    Raises LookupError for an unknown encoding.
    """

    def __init__(self, catalog: DeviceCatalog, pairing: Pairing, connector_factory, encoding='ascii'):
        codecs.lookup(encoding)
        self.catalog = catalog
        self.pairing = pairing
        self.connector_factory = connector_factory
        self.encoding = encoding
        self.listeners = EventSource()
        self._selected = None
        self._connector = None
        self._writer = None

    @property
    def selected_device(self) -> Device:
        return self._selected

    @property
    def state(self) -> SessionState:
        if self._selected is None:
            return SessionState.IDLE
        if self._connector is not None and self._connector.connected:
            return SessionState.CONNECTED
        return SessionState.SELECTED

    def status(self) -> SessionStatus:
        device = self._selected
        return SessionStatus(device.name if device else None, self.state is SessionState.CONNECTED)

    def _require_device(self):
        if self._selected is None:
            raise NoDeviceSelectedError()
        return self._selected

    def _release(self):
        connector, self._connector, self._writer = self._connector, None, None
        if connector is None:
            return
        try:
            connector.disconnect()
        except (OSError, ValueError) as e:
            # the transport is closed even when flushing its last bytes fails
            logger.warning("error closing connection to %s: %s" % (connector.endpoint, e))
        finally:
            connector.events -= self.listeners.fire

    def select(self, name) -> Device:
        device = self.catalog.find_by_name(name)
        if device is None:
            raise DeviceNotFoundError(name)
        previous = self._selected
        if previous is not None and previous.address != device.address and self._connector is not None:
            logger.info("closing connection to %s before selecting %s" % (previous.address, device.address))
            self._release()
        self._selected = device
        logger.info("selected %s (%s)" % (device.name, device.address))
        return device

    def connect(self, pin=None) -> bool:
        """
        Pairs with the selected device if needed and opens a connection to its serial port service.
        :return: True if a new connection was opened, False if already connected.
        Raises ConnectorError (or PairingError) when pairing or connection fails, leaving the session SELECTED.
        """
        device = self._require_device()
        if self.state is SessionState.CONNECTED:
            return False
        self._release()

        try:
            if not device.authenticated:
                self.pairing.pair(device.address, pin)
            device = self.catalog.discovery.refresh(device)
            self._selected = device
            connector = CloseOnErrorConnector(self.connector_factory(device))
            connector.events += self.listeners.fire
            self._connector = connector
            connector.connect()
            self._writer = LineWriter(connector.conduit.output, self.encoding)
        except ConnectorError:
            self._release()
            raise
        except (OSError, subprocess.SubprocessError, DiscoveryError) as e:
            self._release()
            raise ConnectorError("Unable to connect to %s: %s" % (device.address, e)) from e
        logger.info("connected to %s" % device.address)
        return True

    def send(self, message):
        """
        Writes the message as one line followed by a blank line, flushed immediately.
        """
        device = self._require_device()
        if not message or not message.strip():
            raise EmptyMessageError()
        if self.state is not SessionState.CONNECTED:
            self._release()
            raise ConnectionNotConnectedError()
        try:
            self._writer.write_lines(message, "")
        except (OSError, ValueError) as e:
            self._release()
            raise ConnectorError("Unable to send to %s: %s" % (device.address, e)) from e
        logger.debug("sent %d characters to %s" % (len(message), device.address))

    def dispose(self):
        self._release()
