# asf_core/subtitles/__init__.py
"""
ASS parsing and frame sampling.

This package provides:
- AssSubtitle: parsed script (script info, style table, dialogues)
- parse_ass_text / parse_ass_file / load_subtitle: entry points
- Override tag and \\t transition parsing
- Frame sampling and playback-time queries
"""

from .data import (
    RGBA,
    AssStyle,
    AssSubtitle,
    ColorOverrides,
    DialogueEvent,
    FadeEffect,
    FrameCache,
    FrameSample,
    MoveEffect,
    OverrideTag,
    Positioning,
    TextSegment,
    Transition,
)
from .frames import (
    DEFAULT_FRAME_RATE,
    clear_frame_cache,
    generate_frame_data,
    get_frame_data_at_time,
    precompute_frames,
)
from .loader import load_subtitle
from .overrides import (
    extract_colors,
    extract_fade,
    extract_move,
    extract_positioning,
    parse_override_tags,
    strip_override_blocks,
)
from .parsers.ass_parser import parse_ass_file, parse_ass_text
from .query import get_active_dialogues, get_active_with_styles
from .transitions import extract_transitions
from .utils.codec import (
    apply_alpha_to_color,
    color_to_ass_hex,
    format_ass_time,
    interpolate_color,
    parse_color,
    parse_time,
)

__all__ = [
    # Data containers
    'AssSubtitle',
    'AssStyle',
    'DialogueEvent',
    'OverrideTag',
    'TextSegment',
    'Transition',
    'FrameSample',
    'FrameCache',
    'RGBA',
    'Positioning',
    'ColorOverrides',
    'FadeEffect',
    'MoveEffect',
    # Parsing
    'parse_ass_text',
    'parse_ass_file',
    'load_subtitle',
    'parse_override_tags',
    'strip_override_blocks',
    'extract_transitions',
    'extract_positioning',
    'extract_colors',
    'extract_fade',
    'extract_move',
    # Codec
    'parse_time',
    'format_ass_time',
    'parse_color',
    'color_to_ass_hex',
    'interpolate_color',
    'apply_alpha_to_color',
    # Sampling and queries
    'DEFAULT_FRAME_RATE',
    'generate_frame_data',
    'get_frame_data_at_time',
    'precompute_frames',
    'clear_frame_cache',
    'get_active_dialogues',
    'get_active_with_styles',
]
