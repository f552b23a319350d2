"""
Device session

This module sequences the handshake and runs the keepalive and diagnostics
tasks for a connected headband.
"""

from .orchestrator import MuseSession, select_preset
from .scheduler import PeriodicTask, KeepaliveScheduler, PacketCounter

__all__ = ['MuseSession', 'select_preset', 'PeriodicTask', 'KeepaliveScheduler', 'PacketCounter']
