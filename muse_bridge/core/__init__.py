"""
Core data types, configuration and errors for Muse Bridge

This module contains the fundamental data classes used throughout the system.
"""

from .data_types import SampleRecord, SessionState, EventKind, UserEvent
from .errors import (MuseBridgeError, DiscoveryError, TransportWriteError,
                     SubscriptionError, FrameError)

__all__ = [
    'SampleRecord', 'SessionState', 'EventKind', 'UserEvent',
    'MuseBridgeError', 'DiscoveryError', 'TransportWriteError',
    'SubscriptionError', 'FrameError',
]
