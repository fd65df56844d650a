from abc import abstractmethod

from btterminal.connector.base import ConnectorError
from btterminal.support.mixins import CommonEqualityMixin


class PairingError(ConnectorError):
    """ The device could not be paired. """


class Device(CommonEqualityMixin):
    """
    A remote device reported by discovery.
    :param address: the Bluetooth device address, e.g. '00:11:22:33:44:55'
    :param name: the display name, which may be blank
    :param authenticated: True if the device is already paired with this host
    """
    def __init__(self, address, name, authenticated=False):
        self.address = address
        self.name = name
        self.authenticated = authenticated


class DeviceDiscovery:
    """ Scans for nearby devices. """

    @abstractmethod
    def scan(self):
        """
        Performs one discovery pass.
        :return: a lazy, finite iterable of Device, in the order the devices were found.
        """
        raise NotImplementedError

    def refresh(self, device: Device) -> Device:
        """
        Fetches up-to-date information for a previously discovered device.
        """
        return device


class Pairing:
    """ Pairs this host with a remote device. """

    @abstractmethod
    def pair(self, address, pin=None):
        """
        Pairs with the device, blocking until pairing completes.
        :param pin: the PIN to offer if the device asks for one
        Raises PairingError if pairing fails.
        """
        raise NotImplementedError


class DiscoveryError(Exception):
    """ The platform stack could not perform a discovery pass. """
