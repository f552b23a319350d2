"""
Main CLI entry point for Muse Bridge

This module provides the command-line interface and the main session loop
for the Muse recorder.
"""

import argparse
import asyncio
import logging
import signal
import sys

from ..core.config import (DEVICE_NAME_HINT, KEEPALIVE_PERIOD_SEC, OUTPUT_DIR,
                           RECORD_WINDOW_SEC, SCAN_TIMEOUT_SEC)
from ..core.data_types import EventKind, UserEvent
from ..core.errors import DiscoveryError, TransportWriteError
from ..acquisition.ble import BleakTransport
from ..acquisition.fake import FakeMuseTransport
from ..recording.recorder import Recorder
from ..session.orchestrator import MuseSession
from .keyboard import CONTROLS, KeyboardReader


async def _watch_disconnect(transport, events: "asyncio.Queue[UserEvent]") -> None:
    await transport.wait_disconnected()
    events.put_nowait(UserEvent(EventKind.DISCONNECTED))


def _install_signal_handlers(events: "asyncio.Queue[UserEvent]") -> None:
    """Graceful shutdown: SIGINT/SIGTERM become a quit event"""
    loop = asyncio.get_running_loop()

    def request_quit() -> None:
        logging.info("Shutdown signal received")
        events.put_nowait(UserEvent(EventKind.QUIT))

    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, request_quit)
        except NotImplementedError:
            # Windows event loops have no add_signal_handler
            signal.signal(signum, lambda *_: loop.call_soon_threadsafe(request_quit))


def build_transport(args: argparse.Namespace):
    """Synthetic device with --fake, BLE otherwise"""
    if args.fake:
        logging.info("Using synthetic Muse device")
        return FakeMuseTransport()
    return BleakTransport(address=args.address, name_hint=args.name,
                          scan_timeout=args.scan_timeout)


async def run_session(args: argparse.Namespace, transport=None) -> int:
    """
    Connect, handshake and serve user events until quit or disconnect

    Args:
        args: Parsed command line
        transport: Already built transport; chosen from args when None

    Returns:
        int: Process exit status
    """
    if transport is None:
        transport = build_transport(args)

    recorder = Recorder(output_dir=args.output_dir, window_sec=args.record_window)
    session = MuseSession(transport, recorder, keepalive_period=args.keepalive_period)
    events: "asyncio.Queue[UserEvent]" = asyncio.Queue()
    _install_signal_handlers(events)
    watcher = None

    try:
        await transport.connect()
        await session.start()
        watcher = asyncio.create_task(_watch_disconnect(transport, events))

        print(CONTROLS)
        with KeyboardReader(events):
            while await session.handle_event(await events.get()):
                pass
        return 0

    except DiscoveryError as e:
        logging.error(f"Discovery failed: {e}")
        return 1
    except TransportWriteError as e:
        logging.error(f"Handshake failed: {e}")
        return 1
    finally:
        if watcher is not None:
            watcher.cancel()
        await session.close()
        await transport.disconnect()


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser"""
    parser = argparse.ArgumentParser(
        description="Muse Bridge - Muse EEG streaming and timed CSV recording",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Connect to the first Muse found and record with the R key
  python -m muse_bridge

  # Connect to a known headband and write recordings to data/
  python -m muse_bridge --address 00:55:DA:B0:12:34 --output-dir data

  # Test without hardware
  python -m muse_bridge --fake
        """
    )

    # Device options
    parser.add_argument("--fake", action="store_true",
                        help="Use a synthetic Muse device for testing")
    parser.add_argument("--address",
                        help="BLE address of the headband (default: scan by name)")
    parser.add_argument("--name", default=DEVICE_NAME_HINT,
                        help=f"Advertised name substring to match (default: {DEVICE_NAME_HINT})")
    parser.add_argument("--scan-timeout", type=float, default=SCAN_TIMEOUT_SEC,
                        help=f"BLE scan timeout in seconds (default: {SCAN_TIMEOUT_SEC})")
    parser.add_argument("--keepalive-period", type=float, default=KEEPALIVE_PERIOD_SEC,
                        help=f"Seconds between keepalive commands (default: {KEEPALIVE_PERIOD_SEC})")

    # Recording options
    parser.add_argument("--output-dir", default=OUTPUT_DIR,
                        help=f"Directory for CSV recordings (default: {OUTPUT_DIR})")
    parser.add_argument("--record-window", type=float, default=RECORD_WINDOW_SEC,
                        help=f"Recording duration in seconds (default: {RECORD_WINDOW_SEC})")

    # Logging
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable verbose logging")

    return parser


def main(argv=None) -> int:
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Setup logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    print("=" * 60)
    print("Muse Bridge - EEG Recorder")
    print("=" * 60)

    try:
        return asyncio.run(run_session(args))
    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        return 0
    except Exception as e:
        logging.error(f"Unexpected error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
