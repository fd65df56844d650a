import socket

from btterminal.conduit.base import StreamConduit


class SocketConduit(StreamConduit):
    """
    Reads and writes a connected stream socket, such as an RFCOMM socket, through buffered binary files.
    """

    def __init__(self, sock: socket.socket):
        super().__init__(sock.makefile('rb'), sock.makefile('wb'))
        self.sock = sock

    @property
    def target(self):
        return self.sock

    @property
    def open(self) -> bool:
        # a closed socket reports -1
        return self.sock.fileno() >= 0

    def close(self):
        # closing the writer flushes it, which fails when the peer has gone
        try:
            super().close()
        finally:
            try:
                self.sock.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass    # the peer may already have closed the socket
            finally:
                self.sock.close()
