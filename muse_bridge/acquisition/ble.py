"""
Bluetooth LE transport for the Muse headband

This module wraps bleak: scanning for an advertising Muse, connecting,
checking the GATT layout, subscribing to EEG characteristics and writing
command frames to the control characteristic.
"""

import asyncio
import logging
from typing import Optional, Set

from bleak import BleakClient, BleakScanner
from bleak.backends.device import BLEDevice
from bleak.backends.scanner import AdvertisementData
from bleak.exc import BleakError

from ..core.config import (CONTROL_UUID, DEVICE_NAME_HINT, EEG_CHANNEL_UUIDS,
                           MUSE_SERVICE_UUID, N_CHANNELS, SCAN_TIMEOUT_SEC)
from ..core.errors import DiscoveryError, SubscriptionError, TransportWriteError
from .transport import DataCallback


class BleakTransport:
    """
    Muse link over BLE

    The device is picked either by address or by the first advertisement
    whose local name contains the name hint.
    """

    def __init__(self, address: Optional[str] = None, name_hint: str = DEVICE_NAME_HINT,
                 scan_timeout: float = SCAN_TIMEOUT_SEC):
        self.address = address
        self.name_hint = name_hint.lower()
        self.scan_timeout = scan_timeout
        self.model_name = ""
        self.client: Optional[BleakClient] = None
        self._eeg_uuids: Set[str] = set()
        self._disconnected = asyncio.Event()

    async def connect(self) -> None:
        """
        Discover the headband, connect and verify its characteristics

        Raises:
            DiscoveryError: No device, no Muse service or no control characteristic
        """
        device = await self._find_device()
        logging.info(f"Connecting -> {self.model_name}...")

        self.client = BleakClient(device, disconnected_callback=self._on_disconnect)
        try:
            await self.client.connect()
        except (BleakError, asyncio.TimeoutError) as e:
            raise DiscoveryError(f"Could not connect to {device.address}: {e}") from e

        logging.info(f"Connected -> {self.model_name}")
        self._check_services()

    async def _find_device(self) -> BLEDevice:
        if self.address:
            logging.info(f"Looking for {self.address}...")
            device = await BleakScanner.find_device_by_address(self.address, timeout=self.scan_timeout)
            if device is not None:
                self.model_name = device.name or self.address
        else:
            logging.info("Scanning for Muse...")

            def matches(device: BLEDevice, adv: AdvertisementData) -> bool:
                name = adv.local_name or device.name or ""
                if self.name_hint not in name.lower():
                    return False
                self.model_name = name
                return True

            device = await BleakScanner.find_device_by_filter(matches, timeout=self.scan_timeout)

        if device is None:
            raise DiscoveryError(f"No Muse found within {self.scan_timeout}s")
        return device

    def _check_services(self) -> None:
        service = self.client.services.get_service(MUSE_SERVICE_UUID)
        if service is None:
            raise DiscoveryError("Service discovery failed: Muse service not found")

        if service.get_characteristic(CONTROL_UUID) is None:
            raise DiscoveryError("Char discovery failed: control characteristic not found")

        self._eeg_uuids = {uuid for uuid in EEG_CHANNEL_UUIDS
                           if service.get_characteristic(uuid) is not None}
        if not self._eeg_uuids:
            raise DiscoveryError("Char discovery failed: no EEG characteristics found")
        logging.debug(f"Found {len(self._eeg_uuids)}/{N_CHANNELS} EEG characteristics")

    async def subscribe(self, channel: int, callback: DataCallback) -> None:
        uuid = EEG_CHANNEL_UUIDS[channel]
        if uuid not in self._eeg_uuids:
            raise SubscriptionError(channel, "characteristic not found")

        try:
            await self.client.start_notify(uuid, lambda _sender, data: callback(channel, bytes(data)))
        except BleakError as e:
            raise SubscriptionError(channel, str(e)) from e

    async def write(self, frame: bytes, without_response: bool = True) -> None:
        if self.client is None or not self.client.is_connected:
            raise TransportWriteError("Control channel unavailable")
        try:
            await self.client.write_gatt_char(CONTROL_UUID, frame, response=not without_response)
        except (BleakError, OSError) as e:
            raise TransportWriteError(f"Write rejected: {e}") from e

    async def wait_disconnected(self) -> None:
        await self._disconnected.wait()

    async def disconnect(self) -> None:
        """Clean disconnect from the headband"""
        if self.client is None:
            return
        try:
            if self.client.is_connected:
                await self.client.disconnect()
                logging.info("Muse disconnected")
        except BleakError as e:
            logging.error(f"Disconnect error: {e}")
        finally:
            self._disconnected.set()

    def _on_disconnect(self, _client: BleakClient) -> None:
        logging.warning(f"Link to {self.model_name} lost")
        self._disconnected.set()
