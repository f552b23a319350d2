"""
Repeating session tasks

Keepalive emission and the packet diagnostics both run as periodic asyncio
tasks owned by the session and cancelled together on teardown.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ..core.config import DIAGNOSTIC_PERIOD_SEC, KEEPALIVE_COMMAND, KEEPALIVE_PERIOD_SEC
from ..core.data_types import SessionState
from ..core.errors import TransportWriteError


Sleep = Callable[[float], Awaitable[None]]


class PeriodicTask:
    """Run tick() every `period` seconds until stopped; the first tick waits one period"""

    name = "periodic"

    def __init__(self, period: float, sleep: Sleep = asyncio.sleep):
        self.period = period
        self._sleep = sleep
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            logging.debug(f"{self.name} task already running")
            return
        self._task = asyncio.create_task(self._run(), name=self.name)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logging.error(f"{self.name} task had failed: {e}")
        finally:
            self._task = None

    async def _run(self) -> None:
        while True:
            await self._sleep(self.period)
            try:
                await self.tick()
            except Exception as e:
                logging.exception(f"{self.name} tick failed, continuing next period: {e}")

    async def tick(self) -> None:
        raise NotImplementedError


class KeepaliveScheduler(PeriodicTask):
    """
    Send the liveness command at a fixed period

    Fire-and-forget: a failed write is logged and retried at the next period.
    """

    name = "keepalive"

    def __init__(self, send: Callable[[str], Awaitable[None]],
                 period: float = KEEPALIVE_PERIOD_SEC, sleep: Sleep = asyncio.sleep):
        super().__init__(period, sleep)
        self._send = send

    async def tick(self) -> None:
        try:
            await self._send(KEEPALIVE_COMMAND)
        except TransportWriteError as e:
            logging.warning(f"Keepalive failed, retrying in {self.period}s: {e}")


class PacketCounter(PeriodicTask):
    """Log and reset the received packet count"""

    name = "diagnostics"

    def __init__(self, state: SessionState, period: float = DIAGNOSTIC_PERIOD_SEC,
                 sleep: Sleep = asyncio.sleep):
        super().__init__(period, sleep)
        self._state = state

    async def tick(self) -> None:
        logging.info(f"DEBUG: {self._state.drain_packet_count()} packets")
