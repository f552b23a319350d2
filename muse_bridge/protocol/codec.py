"""
Command framing for the Muse control characteristic

A command token travels as one length byte, the ASCII marker 'X', the token
bytes and a trailing newline. The length byte is always 1 + len(token) and is
computed from the payload, never stored.
"""

from ..core.errors import FrameError

FRAME_MARKER = b"X"
FRAME_TERMINATOR = b"\n"
MAX_COMMAND_LENGTH = 0xFF - 1


def encode_command(command: str) -> bytes:
    """
    Encode a command token into a length-prefixed frame

    Args:
        command: ASCII token such as "h", "k" or "p21"

    Returns:
        bytes: Frame ready to be written to the control characteristic
    """
    payload = FRAME_MARKER + command.encode("ascii") + FRAME_TERMINATOR
    length = len(payload) - 1
    if not command or length > 0xFF:
        raise ValueError(f"Command length must be 1-{MAX_COMMAND_LENGTH}, got {len(command)}")
    return bytes([length]) + payload


def decode_frame(frame: bytes) -> str:
    """
    Decode a frame produced by encode_command back into its command token

    Raises:
        FrameError: If the prefix, marker or terminator do not match
    """
    if len(frame) < 4:
        raise FrameError(f"Frame too short: {frame!r}")
    if frame[1:2] != FRAME_MARKER or frame[-1:] != FRAME_TERMINATOR:
        raise FrameError(f"Missing marker or terminator: {frame!r}")
    if frame[0] != len(frame) - 2:
        raise FrameError(f"Length prefix {frame[0]} does not match payload in {frame!r}")
    try:
        return frame[2:-1].decode("ascii")
    except UnicodeDecodeError as e:
        raise FrameError(f"Non-ASCII command in {frame!r}") from e
