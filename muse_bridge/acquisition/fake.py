"""
Synthetic Muse device

Stands in for the BLE transport when no headband is available. Commands are
decoded like the device would, and once the stream is started every
subscribed channel receives random EEG payloads at a fixed rate.
"""

import asyncio
import logging
from typing import Dict, List, Optional

import numpy as np

from ..core.config import FAKE_MODEL_NAME, FAKE_PACKET_RATE_HZ, N_CHANNELS
from ..core.errors import SubscriptionError, TransportWriteError
from ..protocol.codec import decode_frame
from .transport import DataCallback


FAKE_PAYLOAD_WORDS = 9             # 20-byte notifications like the real device


class FakeMuseTransport:
    """
    In-process Muse simulator

    Keeps every command it received in `received` for inspection.
    """

    def __init__(self, model_name: str = FAKE_MODEL_NAME, packet_rate: float = FAKE_PACKET_RATE_HZ,
                 seed: Optional[int] = None):
        self.model_name = model_name
        self.packet_rate = packet_rate
        self.received: List[str] = []
        self.is_connected = False
        self._callbacks: Dict[int, DataCallback] = {}
        self._rng = np.random.default_rng(seed)
        self._sequence = 0
        self._stream_task: Optional[asyncio.Task] = None
        self._disconnected = asyncio.Event()

    async def connect(self) -> None:
        self.is_connected = True
        logging.info(f"Connected -> {self.model_name} (synthetic)")

    async def subscribe(self, channel: int, callback: DataCallback) -> None:
        if not 0 <= channel < N_CHANNELS:
            raise SubscriptionError(channel, "no such channel")
        self._callbacks[channel] = callback

    async def write(self, frame: bytes, without_response: bool = True) -> None:
        if not self.is_connected:
            raise TransportWriteError("Control channel unavailable")

        command = decode_frame(frame)
        self.received.append(command)

        if command == "d":
            self._start_stream()
        elif command == "h":
            await self._stop_stream()
        await asyncio.sleep(0)

    def make_payload(self) -> bytes:
        """Two-byte big-endian sequence number followed by int16 LE samples"""
        header = (self._sequence & 0xFFFF).to_bytes(2, "big")
        self._sequence += 1
        samples = np.clip(self._rng.normal(0.0, 300.0, FAKE_PAYLOAD_WORDS), -32768, 32767)
        return header + samples.astype("<i2").tobytes()

    def _start_stream(self) -> None:
        if self._stream_task is None or self._stream_task.done():
            self._stream_task = asyncio.create_task(self._stream(), name="fake-muse-stream")

    async def _stop_stream(self) -> None:
        if self._stream_task is None:
            return
        self._stream_task.cancel()
        try:
            await self._stream_task
        except asyncio.CancelledError:
            pass
        self._stream_task = None

    async def _stream(self) -> None:
        interval = 1.0 / self.packet_rate
        while True:
            for channel, callback in sorted(self._callbacks.items()):
                callback(channel, self.make_payload())
            await asyncio.sleep(interval)

    async def wait_disconnected(self) -> None:
        await self._disconnected.wait()

    async def disconnect(self) -> None:
        await self._stop_stream()
        self.is_connected = False
        self._disconnected.set()
        logging.info("Synthetic Muse disconnected")
