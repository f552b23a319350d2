"""
Device transports

This module handles the link to the headband: BLE via bleak, and a synthetic
device for running without hardware.
"""

from .transport import Transport, DataCallback
from .ble import BleakTransport
from .fake import FakeMuseTransport

__all__ = ['Transport', 'DataCallback', 'BleakTransport', 'FakeMuseTransport']
