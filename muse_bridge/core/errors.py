"""
Exception classes for Muse Bridge

All custom exceptions inherit from MuseBridgeError so callers can catch
session failures without swallowing unrelated errors.
"""


class MuseBridgeError(Exception):
    """Base class for Muse Bridge specific errors."""

    pass


class DiscoveryError(MuseBridgeError):
    """Device, service or characteristics could not be found."""

    pass


class TransportWriteError(MuseBridgeError, IOError):
    """Control channel unavailable or a command write was rejected."""

    pass


class SubscriptionError(MuseBridgeError):
    """A data channel could not be subscribed."""

    def __init__(self, channel: int, message: str):
        super().__init__(f"EEG channel {channel}: {message}")
        self.channel = channel


class FrameError(MuseBridgeError, ValueError):
    """A byte string is not a valid command frame."""

    pass
