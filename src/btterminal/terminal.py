"""
The interactive terminal: reads command lines, dispatches them and prints the results.
"""

import logging
import sys

from btterminal import __version__, settings
from btterminal.bluetooth.base import DiscoveryError
from btterminal.bluetooth.bluetoothctl import BluetoothctlDiscovery, BluetoothctlPairing
from btterminal.catalog import DeviceCatalog
from btterminal.connector.base import ConnectorConnectedEvent
from btterminal.connector.rfcommconn import rfcomm_socket_connector_factory
from btterminal.connector.serialconn import rfcomm_serial_connector_factory
from btterminal.errors import EndOfInputError
from btterminal.interpreter import CommandInterpreter
from btterminal.session import Session

logger = logging.getLogger(__name__)

CLEAR_SCREEN = "\x1b[2J\x1b[H"


class TerminalLoop:
    def __init__(self, catalog: DeviceCatalog, session: Session, interpreter: CommandInterpreter,
                 input=None, output=None):
        self.catalog = catalog
        self.session = session
        self.interpreter = interpreter
        self.input = input if input is not None else sys.stdin
        self.output = output if output is not None else sys.stdout

    def write(self, text):
        self.output.write(text + "\n")

    def start(self):
        if self.output.isatty():
            self.output.write(CLEAR_SCREEN)
        self.write("Bluetooth terminal %s" % __version__)
        self.write("Write 'help' or 'h' to see available commands")
        self.write("Discovering devices!")
        self.output.flush()
        try:
            self.catalog.discover()
        except DiscoveryError as e:
            logger.error("initial discovery failed: %s" % e)
            self.write(str(e))
        self.write("Done!")

    def read_line(self):
        self.output.write(self.interpreter.prompt())
        self.output.flush()
        line = self.input.readline()
        if not line:
            raise EndOfInputError("Invalid input")
        return line.rstrip("\r\n")

    def run(self):
        """
        Runs the terminal until the quit command. Raises EndOfInputError when the input is closed first.
        The session is disposed in either case.
        """
        try:
            self.start()
            while self.interpreter.execute(self.read_line()):
                pass
            self.write("See ya soon, bye :)")
        finally:
            self.session.dispose()
            self.output.flush()


def configure_logging(level=None, log_file=None):
    """
    Sends log records to the log file, or to stderr so they stay apart from the terminal output.
    """
    level = level or settings.log_level
    log_file = log_file if log_file is not None else settings.log_file
    handler = logging.FileHandler(log_file) if log_file else logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(level)
    return handler


def log_connector_event(event):
    state = "connected to" if isinstance(event, ConnectorConnectedEvent) else "disconnected from"
    logger.info("%s %s" % (state, event.connector.endpoint))


def build_connector_factory():
    if settings.transport == 'serial':
        return rfcomm_serial_connector_factory(settings.serial_port, settings.serial_baudrate)
    return rfcomm_socket_connector_factory(settings.rfcomm_channel, settings.connect_timeout or None)


def build_terminal(input=None, output=None) -> TerminalLoop:
    catalog = DeviceCatalog(BluetoothctlDiscovery(settings.bluetoothctl, settings.scan_duration))
    pairing = BluetoothctlPairing(settings.bluetoothctl, settings.pair_timeout)
    session = Session(catalog, pairing, build_connector_factory(), settings.encoding)
    session.listeners += log_connector_event
    interpreter = CommandInterpreter(catalog, session, output)
    return TerminalLoop(catalog, session, interpreter, input, output)


def main():
    settings.configure()
    configure_logging()
    terminal = build_terminal()
    try:
        terminal.run()
    except EndOfInputError as e:
        logger.error("terminal stopped: %s" % e)
        return 1
    return 0


if __name__ == '__main__':  # pragma: no cover
    sys.exit(main())
