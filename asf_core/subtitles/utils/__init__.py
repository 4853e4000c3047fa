# asf_core/subtitles/utils/__init__.py
"""Shared utilities for subtitle processing."""

from .codec import (
    alpha_to_ass_byte,
    apply_alpha_to_color,
    color_to_ass_hex,
    format_ass_time,
    interpolate_color,
    parse_alpha,
    parse_color,
    parse_float,
    parse_int,
    parse_time,
    round_to_centiseconds,
)

__all__ = [
    "alpha_to_ass_byte",
    "apply_alpha_to_color",
    "color_to_ass_hex",
    "format_ass_time",
    "interpolate_color",
    "parse_alpha",
    "parse_color",
    "parse_float",
    "parse_int",
    "parse_time",
    "round_to_centiseconds",
]
