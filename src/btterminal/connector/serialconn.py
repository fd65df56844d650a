import logging

from serial import Serial, SerialException

from btterminal.conduit.base import Conduit
from btterminal.conduit.serial_conduit import SerialConduit, rfcomm_ports
from btterminal.connector.base import AbstractConnector, ConnectorError

logger = logging.getLogger(__name__)


class RfcommSerialConnector(AbstractConnector):
    """
    Connects through an RFCOMM tty that has been bound to the remote device, e.g. with
    `rfcomm bind 0 <address>`. The port is only available while the tty exists.
    :param serial: a closed Serial with its port set
    """

    def __init__(self, serial: Serial):
        if serial.is_open:
            raise ValueError("serial port %s is already open" % serial.port)
        super().__init__()
        self._serial = serial

    @property
    def endpoint(self):
        return self._serial.port

    def _connect(self) -> Conduit:
        port = self._serial.port
        try:
            self._serial.open()
        except SerialException as e:
            logger.warning("unable to open %s: %s" % (port, e))
            raise ConnectorError("Unable to open %s: %s" % (port, e)) from e
        logger.info("opened %s" % port)
        return SerialConduit(self._serial)

    def _disconnect(self):
        logger.info("closing %s" % self._serial.port)

    def _try_available(self):
        return self._serial.port in rfcomm_ports()


def rfcomm_serial_connector_factory(port, baudrate=9600):
    """
    The tty binding determines the remote address, so every device gets a connector for the same port.
    """
    def create_connector(device):
        ser = Serial(baudrate=baudrate)
        ser.port = port
        return RfcommSerialConnector(ser)

    return create_connector
