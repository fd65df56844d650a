"""
Connectors open and close conduits to remote endpoints and announce each change on their events.
"""

import logging
from abc import abstractmethod

from btterminal.conduit.base import Conduit, StreamErrorReportingConduit
from btterminal.support.events import EventSource

logger = logging.getLogger(__name__)


class ConnectorError(Exception):
    """ A connection could not be opened, or failed while in use. """


class ConnectionNotConnectedError(ConnectorError):
    """ The operation needs an open connection. """

    def __init__(self, *args):
        super().__init__(*(args or ("Not connected",)))


class ConnectionNotAvailableError(ConnectorError):
    """ The endpoint cannot be reached from this host. """


class ConnectorEvent:
    def __init__(self, connector):
        self.connector = connector


class ConnectorConnectedEvent(ConnectorEvent):
    pass


class ConnectorDisconnectedEvent(ConnectorEvent):
    pass


class Connector():
    """
    Reaches a single endpoint. While connected, the conduit gives access to the endpoint's streams.
    ConnectorConnectedEvent and ConnectorDisconnectedEvent are posted to events.
    """

    def __init__(self):
        self.events = EventSource()

    @property
    @abstractmethod
    def endpoint(self):
        raise NotImplementedError

    @property
    @abstractmethod
    def connected(self) -> bool:
        raise NotImplementedError

    @property
    @abstractmethod
    def available(self) -> bool:
        """ True when the endpoint can be connected to. """
        raise NotImplementedError

    @property
    @abstractmethod
    def conduit(self) -> Conduit:
        """ The open conduit. Raises ConnectionNotConnectedError when not connected. """
        raise NotImplementedError

    @abstractmethod
    def connect(self):
        """
        Opens the conduit, doing nothing if already connected.
        Raises ConnectorError when the endpoint cannot be reached.
        """
        raise NotImplementedError

    @abstractmethod
    def disconnect(self):
        """ Closes the conduit, doing nothing if not connected. """
        raise NotImplementedError


class AbstractConnector(Connector):
    """
    Implements the connect/disconnect cycle. Subclasses provide the transport through
    _connect, _disconnect and _try_available.
    """

    def __init__(self):
        super().__init__()
        self._conduit = None

    @property
    def connected(self):
        return self._conduit is not None and self._connected()

    @property
    def available(self):
        return not self.connected and self._try_available()

    @property
    def conduit(self) -> Conduit:
        if not self.connected:
            raise ConnectionNotConnectedError
        return self._conduit

    def connect(self):
        if self.connected:
            return
        if not self.available:
            raise ConnectionNotAvailableError("%s is not available" % (self.endpoint,))
        self._conduit = self._connect()
        self.events.fire(ConnectorConnectedEvent(self))

    def disconnect(self):
        conduit, self._conduit = self._conduit, None
        if conduit is None:
            return
        try:
            self._disconnect()
        finally:
            try:
                conduit.close()
            finally:
                self.events.fire(ConnectorDisconnectedEvent(self))

    def _connected(self):
        return self._conduit.open

    @abstractmethod
    def _connect(self) -> Conduit:
        """ Opens the transport and returns its conduit, raising ConnectorError on failure. """
        raise NotImplementedError

    @abstractmethod
    def _try_available(self):
        """ Called only while disconnected. """
        raise NotImplementedError

    @abstractmethod
    def _disconnect(self):
        """ Called before the conduit is closed. """
        raise NotImplementedError


class DelegateConnector(Connector):
    """
    Forwards to another connector and posts to the same events.
    """

    def __init__(self, delegate: Connector):
        super().__init__()
        self.delegate = delegate
        self.events = delegate.events

    @property
    def endpoint(self):
        return self.delegate.endpoint

    @property
    def connected(self) -> bool:
        return self.delegate.connected

    @property
    def available(self) -> bool:
        return self.delegate.available

    @property
    def conduit(self) -> Conduit:
        return self.delegate.conduit

    def connect(self):
        self.delegate.connect()

    def disconnect(self):
        self.delegate.disconnect()


class CloseOnErrorConnector(DelegateConnector):
    """
    Disconnects as soon as reading from or writing to the conduit raises an exception.
    The exception still reaches the caller.
    """

    def __init__(self, delegate: Connector):
        super().__init__(delegate)
        self._conduit = None

    @property
    def connected(self):
        return self._conduit is not None and self.delegate.connected

    @property
    def conduit(self):
        if self._conduit is None:
            raise ConnectionNotConnectedError
        return self._conduit

    def connect(self):
        if self._conduit is not None:
            return
        self.delegate.connect()
        self._conduit = StreamErrorReportingConduit(self.delegate.conduit, self.on_stream_exception)

    def disconnect(self):
        self._conduit = None
        self.delegate.disconnect()

    def on_stream_exception(self, e):
        logger.warning("closing %s after stream error: %s" % (self.endpoint, e))
        try:
            self.disconnect()
        except (OSError, ValueError) as close_error:
            # the original stream error is raised to the caller
            logger.warning("error closing %s: %s" % (self.endpoint, close_error))
