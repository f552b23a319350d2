"""
Muse device finder utility

This module scans for advertising BLE peripherals and lists those that look
like Muse headbands, with the address to pass to `muse-bridge --address`.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Tuple

from bleak import BleakScanner
from bleak.exc import BleakError

from ..core.config import DEVICE_NAME_HINT, SCAN_TIMEOUT_SEC


async def scan_for_muse(timeout: float = SCAN_TIMEOUT_SEC,
                        name_hint: str = DEVICE_NAME_HINT) -> List[Tuple[str, str, int]]:
    """
    Scan for Muse headbands

    Args:
        timeout: Scan duration in seconds
        name_hint: Substring the advertised name must contain (case-insensitive)

    Returns:
        List[Tuple[str, str, int]]: (address, name, rssi), strongest signal first
    """
    try:
        found = await BleakScanner.discover(timeout=timeout, return_adv=True)
    except BleakError as e:
        logging.error(f"BLE scan failed: {e}")
        return []

    devices = []
    for device, adv in found.values():
        name = adv.local_name or device.name or ""
        if name_hint.lower() in name.lower():
            devices.append((device.address, name, adv.rssi))
    return sorted(devices, key=lambda d: d[2], reverse=True)


def print_devices(devices: List[Tuple[str, str, int]]) -> None:
    if not devices:
        print("No Muse headbands found. Is the headband on and not paired elsewhere?")
        return

    print("Muse headbands:")
    print("-" * 50)
    for address, name, rssi in devices:
        print(f"{name:20} {address:20} RSSI {rssi:4d} dBm")


def main() -> int:
    """Command line interface for the device finder"""
    parser = argparse.ArgumentParser(description="Find nearby Muse headbands")
    parser.add_argument("--timeout", type=float, default=SCAN_TIMEOUT_SEC,
                        help=f"Scan duration in seconds (default: {SCAN_TIMEOUT_SEC})")
    parser.add_argument("--name", default=DEVICE_NAME_HINT,
                        help=f"Advertised name substring (default: {DEVICE_NAME_HINT})")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format='%(levelname)s - %(message)s')

    devices = asyncio.run(scan_for_muse(args.timeout, args.name))
    print_devices(devices)
    return 0 if devices else 1


if __name__ == "__main__":
    sys.exit(main())
