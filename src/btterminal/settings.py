"""
Runtime settings for the terminal. The values here are the defaults; configure() replaces them
with the values from the btterminal configuration files, section [btterminal] [[settings]].
"""

import codecs
import sys

from configobj.validate import VdtValueError

from btterminal.config.config import configure_module

# 'socket' connects with an RFCOMM socket, 'serial' opens a bound /dev/rfcommN port
transport = 'socket'
rfcomm_channel = 1
connect_timeout = 10.0

serial_port = ''
serial_baudrate = 9600

bluetoothctl = 'bluetoothctl'
scan_duration = 8
pair_timeout = 30.0

encoding = 'ascii'

log_level = 'WARNING'
log_file = ''


def check_encoding(value):
    """
    Schema check for a text encoding name known to the codecs registry.
    """
    try:
        codecs.lookup(value)
    except LookupError:
        raise VdtValueError(value)
    return value


def configure(user_config=True):
    return configure_module(sys.modules[__name__], config_name='btterminal', user_config=user_config,
                            checks={'encoding': check_encoding})
