"""
Parses terminal input lines and dispatches them to the device catalog and session.
"""

import logging
import sys
from collections import namedtuple

from btterminal.bluetooth.base import DiscoveryError
from btterminal.catalog import DeviceCatalog
from btterminal.connector.base import ConnectorError
from btterminal.errors import ArgumentMissingError, TerminalError
from btterminal.session import Session

logger = logging.getLogger(__name__)

HELP = (
    "'help' or 'h' shows available commands",
    "'list' or 'l' lists available devices",
    "'refresh' or 'r' refresh available devices",
    "'select' or 's' [DEVICE_NAME] selects a device",
    "'connect' or 'c' [PIN?] connect to a selected device with an optional Bluetooth pin",
    "'msg' [MESSAGE] sends a message to selected device",
    "'quit' or 'q' quits the terminal",
)

Command = namedtuple('Command', ['name', 'args'])


def parse_line(line) -> Command:
    """
    Splits a line on single spaces into the command name and its arguments.
    There is no quoting, so consecutive spaces produce empty arguments.

    >>> parse_line("msg hello  world")
    Command(name='msg', args=['hello', '', 'world'])
    """
    tokens = line.split(" ")
    return Command(tokens[0], tokens[1:])


class CommandInterpreter:
    """
    Executes commands against a catalog and a session, writing results to the output stream.
    """

    def __init__(self, catalog: DeviceCatalog, session: Session, output=None):
        self.catalog = catalog
        self.session = session
        self.output = output if output is not None else sys.stdout
        self.commands = {}
        for names, handler in (
                (("help", "h"), self.help),
                (("list", "l"), self.list),
                (("refresh", "r"), self.refresh),
                (("select", "s"), self.select),
                (("connect", "c"), self.connect),
                (("msg",), self.msg),
                (("quit", "q"), self.quit)):
            for name in names:
                self.commands[name] = handler

    def write(self, text):
        self.output.write(text + "\n")

    def prompt(self):
        """
        >> when idle, (name)>> when a device is selected, $(name)>> when connected.
        """
        status = self.session.status()
        if status.device_name is None:
            return ">> "
        return "%s(%s)>> " % ("$" if status.connected else "", status.device_name)

    def execute(self, line) -> bool:
        """
        Runs one line of input.
        :return: False when the terminal should quit, True otherwise.
        """
        command = parse_line(line)
        handler = self.commands.get(command.name)
        if handler is None:
            if command.name:
                logger.debug("ignoring unknown command %r" % command.name)
            return True
        try:
            return handler(command.args) is not False
        except TerminalError as e:
            self.write(str(e))
        except (ConnectorError, DiscoveryError) as e:
            logger.warning("%s failed: %s" % (command.name, e))
            self.write(str(e))
        return True

    def help(self, args):
        for line in HELP:
            self.write(line)

    def list(self, args):
        names = self.catalog.names()
        if not names:
            self.write("No devices")
        for name in names:
            self.write(name)

    def refresh(self, args):
        self.catalog.refresh()
        self.write("Devices refreshed!")

    def select(self, args):
        # names may contain spaces
        name = " ".join(args).strip()
        if not name:
            raise ArgumentMissingError("DEVICE_NAME")
        self.session.select(name)

    def connect(self, args):
        pin = args[0] if args and args[0] else None
        if self.session.connect(pin):
            self.write("Connected")
        else:
            self.write("Already connected")

    def msg(self, args):
        self.session.send(" ".join(args))

    def quit(self, args):
        return False
