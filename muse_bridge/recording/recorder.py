"""
Timed CSV recording

This module implements the Idle/Recording state machine. A recording window
opens a fresh CSV file, accepts sample records while active, and closes itself
after a fixed duration unless stopped earlier.
"""

import asyncio
import csv
import logging
import os
import time
from typing import Callable, Optional

from ..core.config import CSV_HEADER, FILENAME_PREFIX, OUTPUT_DIR, RECORD_WINDOW_SEC
from ..core.data_types import SampleRecord


def epoch_millis() -> int:
    """Current wall-clock time in epoch milliseconds"""
    return int(time.time() * 1000)


class CsvSink:
    """
    Append-only CSV file for one recording window

    The header row is written on open; each record becomes one row.
    """

    def __init__(self, path: str):
        self.path = path
        self._file = open(path, "x", newline="", encoding="utf-8")
        self._writer = csv.writer(self._file, lineterminator="\n")
        self._writer.writerow(CSV_HEADER)

    @property
    def closed(self) -> bool:
        return self._file.closed

    def write_record(self, record: SampleRecord) -> None:
        self._writer.writerow(record.to_row())

    def close(self) -> None:
        if not self._file.closed:
            self._file.flush()
            self._file.close()


class Recorder:
    """
    Recording state machine

    States are Idle and Recording. A sink exists if and only if the recorder
    is Recording; start and stop are no-ops when already in the target state.
    start() must be called from a running event loop, which owns the timer
    that ends the window.
    """

    def __init__(self, output_dir: str = OUTPUT_DIR, window_sec: float = RECORD_WINDOW_SEC,
                 sink_factory: Callable[[str], CsvSink] = CsvSink,
                 clock: Callable[[], int] = epoch_millis):
        self.output_dir = output_dir
        self.window_sec = window_sec
        self._sink_factory = sink_factory
        self._clock = clock
        self._sink: Optional[CsvSink] = None
        self._auto_stop: Optional[asyncio.TimerHandle] = None

    @property
    def is_recording(self) -> bool:
        return self._sink is not None

    @property
    def sink(self) -> Optional[CsvSink]:
        """Currently open sink, None while Idle"""
        return self._sink

    def start(self) -> Optional[str]:
        """
        Idle -> Recording

        Returns:
            Optional[str]: Path of the new recording, None if already recording
        """
        if self._sink is not None:
            logging.debug("Recording already active, ignoring start")
            return None

        os.makedirs(self.output_dir, exist_ok=True)
        filename = self._next_filename()
        loop = asyncio.get_running_loop()

        self._sink = self._sink_factory(filename)
        self._auto_stop = loop.call_later(self.window_sec, self._on_window_elapsed)
        logging.info(f">> Recording -> {filename}")
        return filename

    def _next_filename(self) -> str:
        """One file per window: bump the millisecond stamp while the name is taken"""
        stamp = self._clock()
        filename = os.path.join(self.output_dir, f"{FILENAME_PREFIX}{stamp}.csv")
        while os.path.exists(filename):
            stamp += 1
            filename = os.path.join(self.output_dir, f"{FILENAME_PREFIX}{stamp}.csv")
        return filename

    def stop(self) -> bool:
        """
        Recording -> Idle

        Returns:
            bool: True if a recording was closed, False if already idle
        """
        if self._sink is None:
            return False

        if self._auto_stop is not None:
            self._auto_stop.cancel()
            self._auto_stop = None

        sink, self._sink = self._sink, None
        sink.close()
        logging.info(f">> Saved -> {sink.path}")
        return True

    def toggle(self) -> bool:
        """Flip between Idle and Recording; returns True if now recording"""
        if self.is_recording:
            self.stop()
        else:
            self.start()
        return self.is_recording

    def append(self, record: SampleRecord) -> bool:
        """Write a record to the open sink; returns False while Idle"""
        if self._sink is None:
            return False
        self._sink.write_record(record)
        return True

    def _on_window_elapsed(self) -> None:
        self._auto_stop = None
        logging.debug(f"Recording window of {self.window_sec}s elapsed")
        self.stop()
