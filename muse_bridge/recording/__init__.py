"""
Sample recording

This module handles timed capture windows written to CSV files.
"""

from .recorder import Recorder, CsvSink, epoch_millis

__all__ = ['Recorder', 'CsvSink', 'epoch_millis']
