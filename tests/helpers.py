"""
Test doubles shared across the Muse Bridge test modules.
"""

import asyncio

from muse_bridge.core.errors import SubscriptionError, TransportWriteError
from muse_bridge.protocol.codec import decode_frame


class ScriptedTransport:
    """Transport double that records every command and never touches BLE"""

    def __init__(self, model_name="MuseS", log=None, fail_on=None, fail_subscribe=(),
                 error=TransportWriteError, connect_error=None, disconnect_after=None):
        self.model_name = model_name
        self.log = log if log is not None else []
        self.fail_on = fail_on
        self.fail_subscribe = set(fail_subscribe)
        self.error = error
        self.connect_error = connect_error
        self.disconnect_after = disconnect_after  # None: the link never drops
        self.callbacks = {}
        self.write_flags = []
        self.disconnected = False

    @property
    def commands(self):
        return [value for kind, value in self.log if kind == "write"]

    async def connect(self):
        if self.connect_error is not None:
            raise self.connect_error

    async def subscribe(self, channel, callback):
        if channel in self.fail_subscribe:
            raise SubscriptionError(channel, "rejected")
        self.callbacks[channel] = callback

    async def write(self, frame, without_response=True):
        command = decode_frame(frame)
        if command == self.fail_on:
            raise self.error(f"write of '{command}' rejected")
        self.write_flags.append(without_response)
        self.log.append(("write", command))

    async def wait_disconnected(self):
        if self.disconnect_after is None:
            await asyncio.Event().wait()
        await asyncio.sleep(self.disconnect_after)

    async def disconnect(self):
        self.disconnected = True
