"""
Muse session orchestration

This module owns a device session from channel subscription to teardown:
the timed handshake that brings the headband into streaming, the per-channel
data handler, the keepalive and diagnostics tasks, and dispatch of user
events.
"""

import asyncio
import logging
from typing import Callable, List, Optional

from ..core.config import (IDENTITY_SETTLE_SEC, KEEPALIVE_PERIOD_SEC, DIAGNOSTIC_PERIOD_SEC,
                           N_CHANNELS, PRESET_A, PRESET_B, PRESET_B_MODEL_SUBSTRING,
                           SETTLE_DELAY_SEC)
from ..core.data_types import EventKind, SampleRecord, SessionState, UserEvent
from ..core.errors import SubscriptionError, TransportWriteError
from ..acquisition.transport import Transport
from ..protocol.codec import encode_command
from ..protocol.demux import demux_samples
from ..recording.recorder import Recorder, epoch_millis
from .scheduler import KeepaliveScheduler, PacketCounter, Sleep


def select_preset(model_name: str) -> str:
    """Muse S models get preset B, everything else preset A"""
    if PRESET_B_MODEL_SUBSTRING in model_name.lower():
        return PRESET_B
    return PRESET_A


class MuseSession:
    """
    One streaming session with a connected headband

    The transport must already be connected. start() subscribes the EEG
    channels, runs the handshake and starts the background tasks; close()
    cancels them and closes any open recording.
    """

    def __init__(self, transport: Transport, recorder: Optional[Recorder] = None,
                 settle_delay: float = SETTLE_DELAY_SEC,
                 identity_settle: float = IDENTITY_SETTLE_SEC,
                 keepalive_period: float = KEEPALIVE_PERIOD_SEC,
                 diagnostic_period: float = DIAGNOSTIC_PERIOD_SEC,
                 sleep: Sleep = asyncio.sleep,
                 clock: Callable[[], int] = epoch_millis):
        self.transport = transport
        self.recorder = recorder if recorder is not None else Recorder()
        self.state = SessionState()
        self.settle_delay = settle_delay
        self.identity_settle = identity_settle
        self.subscribed: List[int] = []
        self.streaming = False

        self._sleep = sleep
        self._clock = clock
        self.keepalive = KeepaliveScheduler(self.send, keepalive_period, sleep)
        self.diagnostics = PacketCounter(self.state, diagnostic_period, sleep)

    async def send(self, command: str) -> None:
        """Frame and write one command; TransportWriteError propagates"""
        await self.transport.write(encode_command(command), without_response=True)
        logging.info(f">> Sent '{command}'")

    async def subscribe_channels(self) -> List[int]:
        """
        Register the data handler on every EEG channel

        A channel that fails to subscribe is logged and skipped; it simply
        never delivers data.
        """
        for channel in range(N_CHANNELS):
            try:
                await self.transport.subscribe(channel, self.on_data)
            except SubscriptionError as e:
                logging.error(f"Error subscribing {e}")
                continue
            self.subscribed.append(channel)
            logging.info(f"Subscribed EEG {channel}")
        return self.subscribed

    async def run_handshake(self, model_name: str) -> str:
        """
        Bring the device into streaming: h, v, i, preset, s, d

        Each command waits for the previous write and its settle delay. A
        failed write raises TransportWriteError and the remaining steps are
        not attempted.

        Returns:
            str: The preset command that was sent
        """
        await self.send("h")
        await self._sleep(self.settle_delay)
        await self.send("v")
        await self._sleep(self.settle_delay)
        await self.send("i")
        await self._sleep(self.identity_settle)

        preset = select_preset(model_name)
        self.state.preset = preset
        logging.info(f"Using preset {preset}")
        await self.send(preset)
        await self._sleep(self.settle_delay)

        await self.send("s")
        await self._sleep(self.settle_delay)
        await self.send("d")
        return preset

    async def start(self) -> None:
        await self.subscribe_channels()
        await self.run_handshake(self.transport.model_name)

        self.streaming = True
        logging.info("*** STREAMING ON ***")
        self.keepalive.start()
        self.diagnostics.start()

    def on_data(self, channel: int, payload: bytes) -> None:
        """Data-arrival handler, called once per notification on `channel`"""
        self.state.count_packet()
        samples = demux_samples(channel, payload)
        if not self.recorder.is_recording:
            return

        record = SampleRecord(
            timestamp=self._clock(),
            electrode=channel,
            samples=samples,
            intuitive=int(self.state.intuitive),
        )
        self.recorder.append(record)

    def mark_intuitive(self) -> None:
        self.state.mark_intuitive()
        logging.info(">> Intuitive marked")

    def toggle_recording(self) -> bool:
        return self.recorder.toggle()

    async def handle_event(self, event: UserEvent) -> bool:
        """
        Apply one user or link event

        Returns:
            bool: False once the session should end
        """
        if event.kind is EventKind.MARK_INTUITIVE:
            self.mark_intuitive()
        elif event.kind is EventKind.TOGGLE_RECORDING:
            self.toggle_recording()
        elif event.kind is EventKind.SEND_COMMAND:
            try:
                await self.send(event.command)
            except TransportWriteError as e:
                logging.error(f"Failed to send '{event.command}': {e}")
        elif event.kind is EventKind.DISCONNECTED:
            logging.warning("Device disconnected, ending session")
            return False
        elif event.kind is EventKind.QUIT:
            logging.info("Quit requested")
            return False
        return True

    async def close(self) -> None:
        """Cancel background tasks and close any open recording"""
        try:
            await asyncio.gather(self.keepalive.stop(), self.diagnostics.stop())
        finally:
            self.recorder.stop()
            self.streaming = False
        logging.info("Session closed")
