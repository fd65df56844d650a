"""
Contracts for the platform Bluetooth stack and the BlueZ implementations of them.
"""
