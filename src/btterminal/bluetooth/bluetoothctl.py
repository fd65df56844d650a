"""
BlueZ implementations of discovery and pairing, driving the `bluetoothctl` command line tool.

Each operation runs bluetoothctl as a child process through a ProcessConduit and parses its
console output. Output lines carry ANSI colour codes and readline markers, which are stripped
before parsing.
"""

import codecs
import logging
import os
import re
import select
import time

from btterminal.bluetooth.base import Device, DeviceDiscovery, DiscoveryError, Pairing, PairingError
from btterminal.conduit.lines import read_lines
from btterminal.conduit.process_conduit import ProcessConduit

logger = logging.getLogger(__name__)

_control_sequences = re.compile(r'\x1b\[[0-9;]*[A-Za-z]|[\x01\x02]')
_new_device = re.compile(r'\[NEW\] Device ((?:[0-9A-Fa-f]{2}:){5}[0-9A-Fa-f]{2}) ?(.*)$')
_info_field = re.compile(r'^\s+([A-Za-z0-9 ]+): (.*)$')

PIN_PROMPTS = ("Enter PIN code", "Enter passkey")
CONFIRM_PROMPTS = ("Confirm passkey", "Authorize service", "Request confirmation")
PAIRED = ("Pairing successful", "AlreadyExists")
FAILED = ("Failed to pair", "not available")


def strip_control(line):
    """
    >>> strip_control('[\\x1b[0;92mNEW\\x1b[0m] Device 00:11:22:33:44:55 Phone')
    '[NEW] Device 00:11:22:33:44:55 Phone'
    """
    return _control_sequences.sub('', line)


def placeholder_name(address):
    """ the name BlueZ reports for a device that has not announced one. """
    return address.replace(':', '-')


def parse_device_line(line):
    """
    Parses a device announcement from `scan on` output.
    :return: the tuple (address, name) or None if the line does not announce a new device.
    The name is blank when the device has not announced one.
    """
    match = _new_device.search(strip_control(line))
    if not match:
        return None
    address, name = match.group(1), match.group(2).strip()
    if name.upper() == placeholder_name(address).upper():
        name = ''
    return address, name


def parse_info(lines):
    """
    Parses the `info <address>` output into a dictionary of field name to value.
    Repeated fields, such as UUID, keep their first value.
    """
    info = {}
    for line in lines:
        match = _info_field.match(strip_control(line))
        if match:
            info.setdefault(match.group(1).strip(), match.group(2).strip())
    return info


def read_output(stream, deadline, clock=time.monotonic):
    """
    Generates decoded output lines from a pipe until the deadline passes or the stream ends.
    A trailing partial line is also generated when it is an interactive prompt, since prompts
    are not newline terminated.
    """
    fd = stream.fileno()
    decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')
    pending = ''
    while True:
        remaining = deadline - clock()
        if remaining <= 0:
            return
        ready, _, _ = select.select([fd], [], [], remaining)
        if not ready:
            return
        chunk = os.read(fd, 1024)
        if not chunk:
            pending += decoder.decode(b'', final=True)
            if pending:
                yield strip_control(pending)
            return
        pending += decoder.decode(chunk)
        *lines, pending = re.split(r'\r?\n', pending)
        for line in lines:
            yield strip_control(line)
        if any(prompt in pending for prompt in PIN_PROMPTS + CONFIRM_PROMPTS):
            yield strip_control(pending)
            pending = ''


class BluetoothctlDiscovery(DeviceDiscovery):
    """
    Discovers devices with `bluetoothctl --timeout <duration> scan on`.
    Devices are generated as they are announced, so callers see each device while the scan continues.
    """

    def __init__(self, bluetoothctl='bluetoothctl', scan_duration=8):
        self.bluetoothctl = bluetoothctl
        self.scan_duration = scan_duration

    def _run(self, *args):
        try:
            return ProcessConduit(self.bluetoothctl, *args)
        except (OSError, ValueError) as e:
            raise DiscoveryError("Unable to run %s: %s" % (self.bluetoothctl, e)) from e

    def scan(self):
        logger.info("scanning for %s seconds" % self.scan_duration)
        conduit = self._run('--timeout', str(self.scan_duration), 'scan', 'on')
        seen = set()
        try:
            for line in read_lines(conduit.input):
                announced = parse_device_line(line)
                if announced is None or announced[0] in seen:
                    continue
                address, name = announced
                seen.add(address)
                yield Device(address, name, self._is_paired(address))
        finally:
            conduit.close()

    def info(self, address):
        conduit = self._run('info', address)
        try:
            return parse_info(read_lines(conduit.input))
        finally:
            conduit.close()

    def _is_paired(self, address):
        return self.info(address).get('Paired') == 'yes'

    def refresh(self, device: Device) -> Device:
        info = self.info(device.address)
        if not info:
            logger.warning("no information available for %s" % device.address)
            return device
        return Device(device.address, info.get('Name', device.name), info.get('Paired') == 'yes')


class BluetoothctlPairing(Pairing):
    """
    Pairs using an interactive bluetoothctl session with a keyboard agent, answering PIN and
    confirmation requests.
    """

    def __init__(self, bluetoothctl='bluetoothctl', timeout=30):
        self.bluetoothctl = bluetoothctl
        self.timeout = timeout

    @staticmethod
    def _send(conduit, *commands):
        for command in commands:
            conduit.output.write((command + "\n").encode('utf-8'))
        conduit.output.flush()

    def _read_output(self, conduit):
        return read_output(conduit.input, time.monotonic() + self.timeout)

    def pair(self, address, pin=None):
        logger.info("pairing with %s" % address)
        try:
            conduit = ProcessConduit(self.bluetoothctl)
        except (OSError, ValueError) as e:
            raise PairingError("Unable to run %s: %s" % (self.bluetoothctl, e)) from e
        try:
            self._send(conduit, "agent KeyboardOnly", "default-agent", "pair %s" % address)
            self._await_pairing(conduit, address, pin)
            logger.info("paired with %s" % address)
        except OSError as e:
            raise PairingError("Pairing with %s failed: %s" % (address, e)) from e
        finally:
            self._quit(conduit)

    def _await_pairing(self, conduit, address, pin):
        for line in self._read_output(conduit):
            logger.debug("bluetoothctl: %s" % line)
            if any(prompt in line for prompt in PIN_PROMPTS):
                if not pin:
                    raise PairingError("%s requires a PIN" % address)
                self._send(conduit, pin)
            elif any(prompt in line for prompt in CONFIRM_PROMPTS):
                self._send(conduit, "yes")
            elif any(marker in line for marker in PAIRED):
                return
            elif any(marker in line for marker in FAILED):
                raise PairingError("Pairing with %s failed: %s" % (address, line.strip()))
        raise PairingError("Pairing with %s did not complete" % address)

    def _quit(self, conduit):
        try:
            if conduit.open:
                self._send(conduit, "quit")
        except OSError:
            pass    # the process already exited
        finally:
            conduit.close()
