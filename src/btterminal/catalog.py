import logging

from btterminal.bluetooth.base import Device, DeviceDiscovery
from btterminal.support.events import EventSource

logger = logging.getLogger(__name__)


class DeviceDiscoveredEvent:
    """ A device was admitted to the catalog. """
    def __init__(self, catalog, device: Device):
        self.catalog = catalog
        self.device = device


class DeviceCatalog:
    """
    The devices discovered during this run, in the order they were found.

    The catalog is populated by the first discovery pass and then left unchanged until refresh()
    is called. Devices without a display name are never admitted.
    """

    def __init__(self, discovery: DeviceDiscovery):
        self.discovery = discovery
        self.listeners = EventSource()
        self._devices = []

    def __len__(self):
        return len(self._devices)

    def __iter__(self):
        return iter(tuple(self._devices))

    def _is_allowed(self, device: Device):
        return bool(device.name and device.name.strip())

    def attached(self, device: Device):
        logger.info("available device: %s (%s)" % (device.name, device.address))

    def discover(self):
        """
        Performs a discovery pass, unless the catalog already holds devices.
        Blocks until the discovery provider finishes scanning.
        """
        if self._devices:
            return

        for device in self.discovery.scan():
            if not self._is_allowed(device):
                logger.debug("ignoring unnamed device %s" % device.address)
                continue
            self._devices.append(device)
            self.attached(device)
            self.listeners.fire(DeviceDiscoveredEvent(self, device))

    def refresh(self):
        """ Forgets all devices and discovers again. """
        self._devices = []
        self.discover()

    def names(self):
        return [d.name for d in self._devices]

    def find_by_name(self, name):
        """
        :return: the first device with exactly the given display name, or None.
        """
        return next((d for d in self._devices if d.name == name), None)
