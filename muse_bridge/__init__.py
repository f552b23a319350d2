"""
Muse Bridge - Muse EEG headband streaming and recording

A modular Python package that drives a Muse headband over Bluetooth LE:
command framing, the streaming handshake, keepalive, per-channel sample
decoding and timed CSV recording.

Python: 3.10+
"""

__version__ = "1.0.0"

# Main package imports for easy access
from .core.data_types import SampleRecord, SessionState, EventKind, UserEvent
from .protocol.codec import encode_command, decode_frame
from .protocol.demux import demux_samples
from .recording.recorder import Recorder, CsvSink
from .session.orchestrator import MuseSession, select_preset
from .acquisition.ble import BleakTransport
from .acquisition.fake import FakeMuseTransport

__all__ = [
    'SampleRecord', 'SessionState', 'EventKind', 'UserEvent',
    'encode_command', 'decode_frame', 'demux_samples',
    'Recorder', 'CsvSink',
    'MuseSession', 'select_preset',
    'BleakTransport', 'FakeMuseTransport'
]
