import logging
import socket

from btterminal.conduit.base import Conduit
from btterminal.conduit.socket_conduit import SocketConduit
from btterminal.connector.base import AbstractConnector, ConnectorError
from btterminal.support.mixins import CommonEqualityMixin

logger = logging.getLogger(__name__)

# Serial Port Profile service class
SERIAL_PORT_SERVICE = "00001101-0000-1000-8000-00805f9b34fb"


class RfcommEndpoint(CommonEqualityMixin):
    """
    Describes the serial-port service of a remote device.
    """
    def __init__(self, address, channel=1, service=SERIAL_PORT_SERVICE):
        self.address = address
        self.channel = channel
        self.service = service

    def key(self):
        """
        >>> RfcommEndpoint('00:11:22:33:44:55', 3).key()
        '00:11:22:33:44:55:3'
        """
        return "%s:%d" % (self.address, self.channel)

    def __str__(self):
        return self.key()


class RfcommSocketConnector(AbstractConnector):
    """
    A connector that communicates data via an RFCOMM stream socket.
    """
    def __init__(self, endpoint: RfcommEndpoint, timeout=None):
        """
        :param endpoint the remote device and channel to connect to.
        :param timeout seconds allowed for the connection to be established, None to block.
        """
        super().__init__()
        self._endpoint = endpoint
        self._timeout = timeout

    @property
    def endpoint(self):
        return self._endpoint

    def _create_socket(self):
        return socket.socket(socket.AF_BLUETOOTH, socket.SOCK_STREAM, socket.BTPROTO_RFCOMM)

    def _connect(self) -> Conduit:
        sock = None
        try:
            sock = self._create_socket()
            sock.settimeout(self._timeout)
            sock.connect((self._endpoint.address, self._endpoint.channel))
            sock.settimeout(None)
            logger.info("opened rfcomm socket to %s" % self._endpoint.key())
            return SocketConduit(sock)
        except (OSError, AttributeError) as e:
            # AttributeError: the platform's socket module has no Bluetooth support
            logger.warning("error opening rfcomm socket to %s: %s" % (self._endpoint.key(), e))
            if sock is not None:
                sock.close()
            raise ConnectorError("Unable to connect to %s: %s" % (self._endpoint.address, e)) from e

    def _disconnect(self):
        logger.info("closing rfcomm socket to %s" % self._endpoint.key())

    def _try_available(self):
        return hasattr(socket, 'AF_BLUETOOTH')


def rfcomm_socket_connector_factory(channel=1, timeout=None):
    """
    Creates a factory that builds an unconnected socket connector for a device.
    """
    def create_connector(device):
        return RfcommSocketConnector(RfcommEndpoint(device.address, channel), timeout)

    return create_connector
