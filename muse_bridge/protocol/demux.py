"""
Per-channel EEG payload demultiplexing

Each notification on an EEG characteristic carries a 2-byte device sequence
field followed by little-endian signed 16-bit samples.
"""

from typing import Tuple

import numpy as np

from ..core.config import N_CHANNELS, PAYLOAD_HEADER_BYTES, SAMPLES_PER_PACKET

_INT16_LE = np.dtype("<i2")


def demux_samples(channel: int, payload: bytes) -> Tuple[int, ...]:
    """
    Extract up to five samples from one channel payload

    Args:
        channel: Channel index the payload arrived on (0-4)
        payload: Raw notification bytes

    Returns:
        Tuple[int, ...]: Decoded samples, fewer than five if the payload is short
    """
    if not 0 <= channel < N_CHANNELS:
        raise ValueError(f"Channel index must be 0-{N_CHANNELS - 1}, got {channel}")

    available = max(len(payload) - PAYLOAD_HEADER_BYTES, 0) // _INT16_LE.itemsize
    count = min(available, SAMPLES_PER_PACKET)
    if count == 0:
        return ()

    samples = np.frombuffer(payload, dtype=_INT16_LE, count=count,
                            offset=PAYLOAD_HEADER_BYTES)
    return tuple(int(s) for s in samples)
