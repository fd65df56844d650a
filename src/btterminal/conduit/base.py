from abc import abstractmethod
from io import IOBase

from btterminal.support.proxy import make_exception_notify_proxy


class Conduit:
    """
    A two-way byte channel to a peer, such as an RFCOMM socket, a serial tty or a child process.
    Bytes arriving from the peer are read from input; bytes written to output are sent to the peer.
    """

    @property
    @abstractmethod
    def target(self):
        """ the object that owns the streams, e.g. the socket or the Popen instance """
        raise NotImplementedError

    @property
    @abstractmethod
    def input(self) -> IOBase:
        raise NotImplementedError

    @property
    @abstractmethod
    def output(self) -> IOBase:
        raise NotImplementedError

    @property
    @abstractmethod
    def open(self) -> bool:
        """ True while both streams can be used. """
        raise NotImplementedError

    @abstractmethod
    def close(self):
        raise NotImplementedError


class StreamConduit(Conduit):
    """
    A conduit over existing file-like objects. When only one stream is given, it is used
    for both directions.
    """

    def __init__(self, input=None, output=None):
        self._input = self._output = None
        self.set_streams(input, output)

    def set_streams(self, input, output=None):
        self._input = input
        self._output = output if output is not None else input

    @property
    def target(self):
        return self._input

    @property
    def input(self) -> IOBase:
        return self._input

    @property
    def output(self) -> IOBase:
        return self._output

    @property
    def open(self):
        return not self._output.closed

    def close(self):
        try:
            self._output.close()
        finally:
            self._input.close()


class StreamErrorReportingConduit(Conduit):
    """
    Wraps another conduit so that any exception raised by a stream method is passed to the handler
    before it propagates to the caller. The wrapped streams are created on first use.
    """

    def __init__(self, decorate: Conduit, handler):
        self.decorate = decorate
        self.handler = handler
        self._input = None
        self._output = None

    @property
    def target(self):
        return self.decorate.target

    @property
    def input(self) -> IOBase:
        if self._input is None:
            self._input = make_exception_notify_proxy(self.decorate.input, self.handler)
        return self._input

    @property
    def output(self) -> IOBase:
        if self._output is None:
            self._output = make_exception_notify_proxy(self.decorate.output, self.handler)
        return self._output

    @property
    def open(self) -> bool:
        return self.decorate.open

    def close(self):
        self.decorate.close()
