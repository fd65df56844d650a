import unittest
from io import BytesIO, StringIO
from unittest.mock import Mock

from hamcrest import assert_that, is_

from btterminal.bluetooth.base import Device, DeviceDiscovery, DiscoveryError, PairingError
from btterminal.catalog import DeviceCatalog
from btterminal.conduit.base import StreamConduit
from btterminal.connector.base import AbstractConnector
from btterminal.interpreter import CommandInterpreter, Command, parse_line, HELP
from btterminal.session import Session


class ListDiscovery(DeviceDiscovery):
    def __init__(self, *passes):
        self.passes = list(passes)
        self.scans = 0

    def scan(self):
        self.scans += 1
        return iter(self.passes.pop(0) if self.passes else [])


class MemoryConnector(AbstractConnector):
    def __init__(self, stream):
        super().__init__()
        self.stream = stream

    @property
    def endpoint(self):
        return "memory"

    def _connect(self):
        return StreamConduit(self.stream)

    def _try_available(self):
        return True

    def _disconnect(self):
        pass


class ParseLineTest(unittest.TestCase):

    def test_command_only(self):
        assert_that(parse_line("list"), is_(Command("list", [])))

    def test_arguments(self):
        assert_that(parse_line("connect 1234"), is_(Command("connect", ["1234"])))

    def test_single_space_separator(self):
        assert_that(parse_line("msg a  b"), is_(Command("msg", ["a", "", "b"])))

    def test_empty_line(self):
        assert_that(parse_line(""), is_(Command("", [])))


class CommandInterpreterTest(unittest.TestCase):

    def setUp(self):
        self.stream = BytesIO()
        self.discovery = ListDiscovery([Device("00:00:00:00:00:0A", "DeviceA", False),
                                        Device("00:00:00:00:00:0B", "DeviceB", True),
                                        Device("00:00:00:00:00:0C", "My Phone", True)])
        self.catalog = DeviceCatalog(self.discovery)
        self.catalog.discover()
        self.pairing = Mock()
        self.session = Session(self.catalog, self.pairing, lambda device: MemoryConnector(self.stream))
        self.output = StringIO()
        self.sut = CommandInterpreter(self.catalog, self.session, self.output)

    def run_line(self, line):
        self.output.seek(0)
        self.output.truncate()
        result = self.sut.execute(line)
        return result, self.output.getvalue()

    def test_help(self):
        for line in ("help", "h"):
            result, out = self.run_line(line)
            assert_that(result, is_(True))
            assert_that(out, is_("\n".join(HELP) + "\n"))

    def test_list(self):
        for line in ("list", "l"):
            assert_that(self.run_line(line), is_((True, "DeviceA\nDeviceB\nMy Phone\n")))

    def test_list_empty(self):
        catalog = DeviceCatalog(ListDiscovery([]))
        catalog.discover()
        sut = CommandInterpreter(catalog, self.session, self.output)
        sut.execute("list")
        assert_that(self.output.getvalue(), is_("No devices\n"))

    def test_refresh(self):
        self.discovery.passes.append([])
        assert_that(self.run_line("r"), is_((True, "Devices refreshed!\n")))
        assert_that(self.discovery.scans, is_(2))
        assert_that(self.run_line("list"), is_((True, "No devices\n")))

    def test_refresh_failure_reported(self):
        self.discovery.scan = Mock(side_effect=DiscoveryError("Unable to run bluetoothctl"))
        assert_that(self.run_line("refresh"), is_((True, "Unable to run bluetoothctl\n")))

    def test_select(self):
        assert_that(self.run_line("s DeviceB"), is_((True, "")))
        assert_that(self.sut.prompt(), is_("(DeviceB)>> "))

    def test_select_name_with_spaces(self):
        self.run_line("select My Phone")
        assert_that(self.session.selected_device.name, is_("My Phone"))

    def test_select_ignores_trailing_space(self):
        assert_that(self.run_line("s DeviceB "), is_((True, "")))
        assert_that(self.session.selected_device.name, is_("DeviceB"))

    def test_select_only_spaces(self):
        assert_that(self.run_line("select  "), is_((True, "Argument missing: DEVICE_NAME\n")))

    def test_select_unknown(self):
        assert_that(self.run_line("select X"), is_((True, "Selected device not found\n")))
        assert_that(self.session.selected_device, is_(None))

    def test_select_missing_argument(self):
        assert_that(self.run_line("select"), is_((True, "Argument missing: DEVICE_NAME\n")))
        assert_that(self.session.selected_device, is_(None))

    def test_connect_without_selection(self):
        assert_that(self.run_line("connect"), is_((True, "No device selected\n")))
        self.pairing.pair.assert_not_called()

    def test_connect_pin_is_first_argument(self):
        self.run_line("select DeviceA")
        assert_that(self.run_line("c 0000"), is_((True, "Connected\n")))
        self.pairing.pair.assert_called_once_with("00:00:00:00:00:0A", "0000")
        assert_that(self.sut.prompt(), is_("$(DeviceA)>> "))

    def test_connect_without_pin(self):
        self.run_line("select DeviceA")
        self.run_line("connect")
        self.pairing.pair.assert_called_once_with("00:00:00:00:00:0A", None)

    def test_connect_twice(self):
        self.run_line("select DeviceB")
        self.run_line("connect")
        assert_that(self.run_line("connect"), is_((True, "Already connected\n")))

    def test_connect_failure_reported(self):
        self.pairing.pair.side_effect = PairingError("Pairing with 00:00:00:00:00:0A failed")
        self.run_line("select DeviceA")
        assert_that(self.run_line("connect"), is_((True, "Pairing with 00:00:00:00:00:0A failed\n")))
        assert_that(self.sut.prompt(), is_("(DeviceA)>> "))

    def test_msg_without_selection(self):
        assert_that(self.run_line("msg hello"), is_((True, "No device selected\n")))

    def test_msg_empty(self):
        self.run_line("select DeviceB")
        self.run_line("connect")
        assert_that(self.run_line("msg"), is_((True, "Message is empty!\n")))
        assert_that(self.run_line("msg   "), is_((True, "Message is empty!\n")))
        assert_that(self.stream.getvalue(), is_(b""))

    def test_msg_not_connected(self):
        self.run_line("select DeviceB")
        assert_that(self.run_line("msg hello"), is_((True, "Not connected\n")))

    def test_end_to_end(self):
        self.run_line("select DeviceB")
        assert_that(self.run_line("connect"), is_((True, "Connected\n")))
        self.pairing.pair.assert_not_called()
        assert_that(self.run_line("msg hello world"), is_((True, "")))
        assert_that(self.stream.getvalue(), is_(b"hello world\r\n\r\n"))

    def test_unknown_command_ignored(self):
        assert_that(self.run_line("foo"), is_((True, "")))
        assert_that(self.run_line(""), is_((True, "")))
        assert_that(self.run_line("HELP"), is_((True, "")))

    def test_quit(self):
        assert_that(self.run_line("quit"), is_((False, "")))
        assert_that(self.run_line("q"), is_((False, "")))

    def test_prompt_idle(self):
        assert_that(self.sut.prompt(), is_(">> "))


if __name__ == '__main__':  # pragma: no cover
    unittest.main()
