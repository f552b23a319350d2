"""
Muse wire protocol

This module handles command framing and EEG payload decoding.
"""

from .codec import encode_command, decode_frame
from .demux import demux_samples

__all__ = ['encode_command', 'decode_frame', 'demux_samples']
