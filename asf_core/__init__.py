# asf_core/__init__.py
"""
ASS frame sampler core.

Parses Advanced SubStation Alpha scripts into a time-indexed model and
resolves the visual state of each dialogue at arbitrary playback times.
"""

__version__ = "0.3.0"
