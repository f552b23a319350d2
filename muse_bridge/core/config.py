"""
Configuration constants for Muse Bridge

This module contains all configuration parameters that users may need to customize
for their specific headband and recording setup.
"""

from typing import Tuple

# ============================================================================
# DEVICE CONFIGURATION - BLE identifiers of the Muse headband
# ============================================================================

DEVICE_NAME_HINT = "muse"          # Advertised name must contain this (case-insensitive)
SCAN_TIMEOUT_SEC = 10.0            # BLE scan duration before giving up

MUSE_SERVICE_UUID = "0000fe8d-0000-1000-8000-00805f9b34fb"
CONTROL_UUID = "273e0001-4c4d-454d-96be-f03bac821358"

# Channel index -> characteristic UUID, in fixed electrode order
EEG_CHANNEL_UUIDS: Tuple[str, ...] = (
    "273e0003-4c4d-454d-96be-f03bac821358",
    "273e0004-4c4d-454d-96be-f03bac821358",
    "273e0005-4c4d-454d-96be-f03bac821358",
    "273e0006-4c4d-454d-96be-f03bac821358",
    "273e0007-4c4d-454d-96be-f03bac821358",
)
N_CHANNELS = len(EEG_CHANNEL_UUIDS)

# ============================================================================
# PROTOCOL CONFIGURATION
# ============================================================================

# Settle delays after each handshake command (seconds)
SETTLE_DELAY_SEC = 0.05
IDENTITY_SETTLE_SEC = 0.2         # Longer: identity response decides the preset

PRESET_A = "p20"                  # Default channel layout
PRESET_B = "p21"                  # Muse S layout
PRESET_B_MODEL_SUBSTRING = "muses"

KEEPALIVE_COMMAND = "k"
KEEPALIVE_PERIOD_SEC = 9.0        # Device drops the link without a liveness command

SAMPLES_PER_PACKET = 5
PAYLOAD_HEADER_BYTES = 2          # Device sequence field preceding the samples

# ============================================================================
# RECORDING CONFIGURATION
# ============================================================================

RECORD_WINDOW_SEC = 10.0
OUTPUT_DIR = "."
FILENAME_PREFIX = "muse_data_"
CSV_HEADER = ("timestamp", "electrode", "s1", "s2", "s3", "s4", "s5", "intuitive")

# Diagnostics
DIAGNOSTIC_PERIOD_SEC = 2.0       # Packet counter is logged and reset this often

# Fake device
FAKE_MODEL_NAME = "MuseS-Fake"
FAKE_PACKET_RATE_HZ = 21.0        # Packets per channel per second (12 samples @ 256 Hz)
