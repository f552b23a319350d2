"""
Transport interface

The session talks to the headband only through this interface: one control
channel accepting command frames and five EEG channels delivering payloads
through per-channel callbacks.
"""

from typing import Callable, Protocol

DataCallback = Callable[[int, bytes], None]


class Transport(Protocol):
    """What the session needs from a connected device link"""

    model_name: str

    async def connect(self) -> None:
        """Find and connect to the device; raises DiscoveryError on failure"""
        ...

    async def subscribe(self, channel: int, callback: DataCallback) -> None:
        """Register callback(channel, payload); raises SubscriptionError on failure"""
        ...

    async def write(self, frame: bytes, without_response: bool = True) -> None:
        """Write a frame to the control channel; raises TransportWriteError on failure"""
        ...

    async def wait_disconnected(self) -> None:
        """Return once the link is gone"""
        ...

    async def disconnect(self) -> None:
        ...
