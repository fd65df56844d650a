"""
User-facing error conditions raised by the catalog, session and interpreter.
The interpreter renders each of these as a single line and carries on.
"""


class TerminalError(Exception):
    """ base class for errors caused by the user's input. """


class DeviceNotFoundError(TerminalError):
    def __init__(self, name):
        super().__init__("Selected device not found")
        self.name = name


class NoDeviceSelectedError(TerminalError):
    def __init__(self):
        super().__init__("No device selected")


class EmptyMessageError(TerminalError):
    def __init__(self):
        super().__init__("Message is empty!")


class ArgumentMissingError(TerminalError):
    def __init__(self, argument):
        super().__init__("Argument missing: %s" % argument)
        self.argument = argument


class EndOfInputError(Exception):
    """ The input stream was closed while the terminal was waiting for a command. """
