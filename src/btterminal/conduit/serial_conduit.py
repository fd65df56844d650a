"""
A conduit over a serial tty, such as an RFCOMM channel bound to /dev/rfcommN with `rfcomm bind`.
"""

from serial import Serial
from serial.tools import list_ports

from btterminal.conduit.base import StreamConduit


class SerialConduit(StreamConduit):
    """ The pyserial port is used directly as both the input and output stream. """

    def __init__(self, ser: Serial):
        super().__init__(ser)

    @property
    def open(self) -> bool:
        return self.input.is_open

    def close(self):
        self.input.close()


def rfcomm_ports():
    """
    Lists the device names of the RFCOMM ttys present on this host.
    """
    return [port.device for port in list_ports.comports() if 'rfcomm' in port.device]
