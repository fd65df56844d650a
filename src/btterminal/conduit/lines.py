"""
Line-oriented text access to a conduit's byte streams.
"""

CRLF = "\r\n"


class LineWriter:
    """
    Writes text lines to a byte stream. Each call to write_lines() is encoded, written and flushed as a unit,
    so nothing is left buffered between calls.
    """

    def __init__(self, output, encoding='ascii', terminator=CRLF):
        """
        :param output: a binary file-like object with write() and flush()
        :param encoding: characters that cannot be encoded are replaced with '?'
        :param terminator: appended to every line written
        """
        self.output = output
        self.encoding = encoding
        self.terminator = terminator

    def encode(self, *lines) -> bytes:
        """
        >>> LineWriter(None).encode("hello world", "")
        b'hello world\\r\\n\\r\\n'
        """
        text = "".join(line + self.terminator for line in lines)
        return text.encode(self.encoding, errors='replace')

    def write_lines(self, *lines):
        self.output.write(self.encode(*lines))
        self.output.flush()


def read_lines(input, encoding='utf-8'):
    """
    Generates decoded lines from a binary file-like object until end of stream.
    Line endings are stripped.
    """
    for raw in iter(input.readline, b''):
        yield raw.decode(encoding, errors='replace').rstrip("\r\n")
