"""
Utility functions and helpers

This module contains helper tools for the Muse Bridge system.
"""

from .device_finder import scan_for_muse, print_devices

__all__ = ['scan_for_muse', 'print_devices']
