"""
Tests for the recording state machine and CSV sink.
"""
import asyncio
import os

import pytest

from muse_bridge.core.data_types import SampleRecord
from muse_bridge.recording.recorder import CsvSink, Recorder


def read_lines(path):
    with open(path, encoding="utf-8") as fh:
        return fh.read().splitlines()


class TestCsvSink:
    """Header and row serialisation."""

    def test_header_written_on_open(self, tmp_path):
        sink = CsvSink(str(tmp_path / "out.csv"))
        sink.close()
        assert read_lines(sink.path) == ["timestamp,electrode,s1,s2,s3,s4,s5,intuitive"]

    def test_short_rows(self, tmp_path):
        sink = CsvSink(str(tmp_path / "out.csv"))
        sink.write_record(SampleRecord(1700000000000, 2, (1, -2, 3, -4, 5), 0))
        sink.write_record(SampleRecord(1700000000001, 4, (9,), 1))
        sink.close()
        assert read_lines(sink.path)[1:] == [
            "1700000000000,2,1,-2,3,-4,5,0",
            "1700000000001,4,9,1",
        ]

    def test_close_twice(self, tmp_path):
        sink = CsvSink(str(tmp_path / "out.csv"))
        sink.close()
        sink.close()
        assert sink.closed


class TestRecorder:
    """Idle/Recording transitions."""

    def test_starts_idle(self, tmp_path):
        recorder = Recorder(output_dir=str(tmp_path))
        assert not recorder.is_recording
        assert recorder.sink is None

    def test_stop_while_idle_is_noop(self, tmp_path, spy_sinks):
        recorder = Recorder(output_dir=str(tmp_path), sink_factory=spy_sinks)
        assert recorder.stop() is False
        assert spy_sinks.created == []

    def test_start_opens_named_sink(self, tmp_path, spy_sinks):
        async def scenario():
            recorder = Recorder(output_dir=str(tmp_path), sink_factory=spy_sinks,
                                clock=lambda: 1712345678901)
            path = recorder.start()
            assert recorder.is_recording
            assert recorder.sink is spy_sinks.created[0]
            recorder.stop()
            return path

        path = asyncio.run(scenario())
        assert os.path.basename(path) == "muse_data_1712345678901.csv"
        assert os.path.dirname(path) == str(tmp_path)

    def test_duplicate_start_is_noop(self, tmp_path):
        async def scenario():
            recorder = Recorder(output_dir=str(tmp_path), clock=lambda: 42)
            first = recorder.start()
            second = recorder.start()
            recorder.stop()
            return first, second

        first, second = asyncio.run(scenario())
        assert second is None
        assert os.listdir(tmp_path) == ["muse_data_42.csv"]
        assert read_lines(first) == ["timestamp,electrode,s1,s2,s3,s4,s5,intuitive"]

    def test_same_millisecond_gets_a_new_file(self, tmp_path):
        record = SampleRecord(42, 0, (1, 2, 3, 4, 5))

        async def scenario():
            recorder = Recorder(output_dir=str(tmp_path), clock=lambda: 42)
            first = recorder.start()
            recorder.append(record)
            recorder.stop()
            second = recorder.start()
            recorder.stop()
            return first, second

        first, second = asyncio.run(scenario())
        assert sorted(os.listdir(tmp_path)) == ["muse_data_42.csv", "muse_data_43.csv"]
        assert read_lines(first)[1:] == ["42,0,1,2,3,4,5,0"]
        assert os.path.basename(second) == "muse_data_43.csv"
        assert len(read_lines(second)) == 1

    def test_sink_present_iff_recording(self, tmp_path, spy_sinks):
        async def scenario():
            recorder = Recorder(output_dir=str(tmp_path), sink_factory=spy_sinks)
            states = []
            for _ in range(3):
                recorder.toggle()
                states.append((recorder.is_recording, recorder.sink is not None))
            recorder.stop()
            return states

        assert asyncio.run(scenario()) == [(True, True), (False, False), (True, True)]

    def test_window_elapses_once(self, tmp_path, spy_sinks):
        async def scenario():
            recorder = Recorder(output_dir=str(tmp_path), window_sec=0.05, sink_factory=spy_sinks)
            recorder.start()
            await asyncio.sleep(0.2)
            assert not recorder.is_recording
            assert recorder.stop() is False

        asyncio.run(scenario())
        assert len(spy_sinks.created) == 1
        assert spy_sinks.created[0].close_calls == 1

    def test_manual_stop_then_timer_closes_once(self, tmp_path, spy_sinks):
        async def scenario():
            recorder = Recorder(output_dir=str(tmp_path), window_sec=0.05, sink_factory=spy_sinks)
            recorder.start()
            recorder.toggle()
            await asyncio.sleep(0.2)
            assert not recorder.is_recording

        asyncio.run(scenario())
        assert spy_sinks.created[0].close_calls == 1

    def test_stale_timer_does_not_end_next_window(self, tmp_path, spy_sinks):
        async def scenario():
            recorder = Recorder(output_dir=str(tmp_path), window_sec=0.4, sink_factory=spy_sinks)
            recorder.start()
            recorder.stop()
            await asyncio.sleep(0.2)
            recorder.start()
            await asyncio.sleep(0.3)
            still_recording = recorder.is_recording
            recorder.stop()
            return still_recording

        assert asyncio.run(scenario()) is True
        assert [s.close_calls for s in spy_sinks.created] == [1, 1]

    def test_append_goes_to_current_sink(self, tmp_path, spy_sinks):
        first = SampleRecord(1, 0, (1, 2, 3, 4, 5))
        second = SampleRecord(2, 1, (6, 7, 8, 9, 10))

        async def scenario():
            recorder = Recorder(output_dir=str(tmp_path), sink_factory=spy_sinks)
            recorder.start()
            assert recorder.append(first)
            recorder.stop()
            assert recorder.append(second) is False
            recorder.start()
            assert recorder.append(second)
            recorder.stop()

        asyncio.run(scenario())
        assert spy_sinks.created[0].records == [first]
        assert spy_sinks.created[1].records == [second]

    def test_start_requires_event_loop(self, tmp_path, spy_sinks):
        recorder = Recorder(output_dir=str(tmp_path), sink_factory=spy_sinks)
        with pytest.raises(RuntimeError):
            recorder.start()
        assert not recorder.is_recording
        assert spy_sinks.created == []
