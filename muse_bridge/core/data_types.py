"""
Core data types for Muse Bridge

This module defines the fundamental data structures used throughout the system
for representing recorded samples and session state.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class SampleRecord:
    """One persisted row: samples decoded from a single channel packet"""
    timestamp: int               # Capture time, epoch milliseconds
    electrode: int               # Channel index 0-4
    samples: Tuple[int, ...]     # Up to 5 signed 16-bit values
    intuitive: int = 0           # Intuitive marker, 0 or 1

    def to_row(self) -> List[str]:
        """Fields in CSV column order; missing trailing samples shorten the row"""
        return [str(self.timestamp), str(self.electrode),
                *(str(s) for s in self.samples), str(self.intuitive)]


@dataclass
class SessionState:
    """Mutable per-session state owned by the orchestrator"""
    preset: Optional[str] = None
    intuitive: bool = False
    packet_count: int = 0

    def mark_intuitive(self) -> None:
        # Sticky: nothing clears the marker once set
        self.intuitive = True

    def count_packet(self) -> None:
        self.packet_count += 1

    def drain_packet_count(self) -> int:
        """Return the packets seen since the last drain and reset the counter"""
        count, self.packet_count = self.packet_count, 0
        return count


class EventKind(Enum):
    """Discrete user or link events consumed by the session"""
    MARK_INTUITIVE = "mark_intuitive"
    TOGGLE_RECORDING = "toggle_recording"
    SEND_COMMAND = "send_command"
    QUIT = "quit"
    DISCONNECTED = "disconnected"


@dataclass(frozen=True)
class UserEvent:
    """Container for one input event"""
    kind: EventKind
    command: Optional[str] = None  # Only for SEND_COMMAND
