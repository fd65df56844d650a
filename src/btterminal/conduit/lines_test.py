import unittest
from io import BytesIO
from unittest.mock import Mock, call

from hamcrest import assert_that, is_

from btterminal.conduit.lines import LineWriter, read_lines


class LineWriterTest(unittest.TestCase):

    def test_message_followed_by_blank_line(self):
        output = BytesIO()
        sut = LineWriter(output)
        sut.write_lines("hello world", "")
        assert_that(output.getvalue(), is_(b"hello world\r\n\r\n"))

    def test_each_write_is_flushed(self):
        output = Mock()
        sut = LineWriter(output)
        sut.write_lines("a")
        sut.write_lines("b")
        output.assert_has_calls([call.write(b"a\r\n"), call.flush(), call.write(b"b\r\n"), call.flush()])

    def test_non_ascii_replaced(self):
        sut = LineWriter(None)
        assert_that(sut.encode("café"), is_(b"caf?\r\n"))

    def test_custom_terminator_and_encoding(self):
        sut = LineWriter(None, encoding='utf-8', terminator="\n")
        assert_that(sut.encode("café"), is_("café\n".encode('utf-8')))


class ReadLinesTest(unittest.TestCase):

    def test_strips_line_endings(self):
        input = BytesIO(b"one\r\ntwo\nthree")
        assert_that(list(read_lines(input)), is_(["one", "two", "three"]))

    def test_empty_stream(self):
        assert_that(list(read_lines(BytesIO())), is_([]))


if __name__ == '__main__':  # pragma: no cover
    unittest.main()
