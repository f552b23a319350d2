"""
Tests for command framing.
"""
import pytest

from muse_bridge.core.errors import FrameError
from muse_bridge.protocol.codec import decode_frame, encode_command


class TestEncodeCommand:
    """Frame layout of encoded commands."""

    def test_single_letter(self):
        assert encode_command("h") == b"\x02Xh\n"

    def test_preset(self):
        assert encode_command("p21") == b"\x04Xp21\n"

    @pytest.mark.parametrize("command", ["k", "p20", "a" * 253])
    def test_length_prefix_counts_marker_and_command(self, command):
        frame = encode_command(command)
        assert frame[0] == len(command) + 1
        assert len(frame) == len(command) + 3
        assert frame[1:2] == b"X"
        assert frame.endswith(b"\n")

    def test_empty_command_rejected(self):
        with pytest.raises(ValueError):
            encode_command("")

    def test_overlong_command_rejected(self):
        with pytest.raises(ValueError):
            encode_command("a" * 255)

    def test_non_ascii_rejected(self):
        with pytest.raises(ValueError):
            encode_command("é")


class TestDecodeFrame:
    """Decoding frames back into command tokens."""

    @pytest.mark.parametrize("command", ["h", "v", "i", "p21", "s", "d", "k", "x" * 253])
    def test_round_trip(self, command):
        assert decode_frame(encode_command(command)) == command

    def test_wrong_prefix(self):
        with pytest.raises(FrameError):
            decode_frame(b"\x05Xh\n")

    def test_missing_marker(self):
        with pytest.raises(FrameError):
            decode_frame(b"\x02Yh\n")

    def test_missing_terminator(self):
        with pytest.raises(FrameError):
            decode_frame(b"\x02Xhh")

    def test_too_short(self):
        with pytest.raises(FrameError):
            decode_frame(b"\x01X\n")

    def test_frame_error_is_value_error(self):
        with pytest.raises(ValueError):
            decode_frame(b"")
