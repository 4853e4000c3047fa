# asf_core/subtitles/parsers/ass_parser.py
# -*- coding: utf-8 -*-
"""
ASS/SSA script parser.

Single pass over the script text:
- A '[Name]' line switches the current section
- Blank lines and ';' comments are skipped
- Every other line goes to the handler of the current section
  ([Script Info], [V4+ Styles] / [V4 Styles], [Events]); lines in unknown
  sections are ignored

Malformed input never raises. Rows whose field count does not fit their
Format: line are dropped, unparseable scalars fall back to defaults, and
dialogues without timing or visible text are left out.
"""
from __future__ import annotations

import codecs
import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ...models.enums import ScriptSection
from ..data import AssStyle, AssSubtitle, DialogueEvent
from ..overrides import parse_override_tags, strip_override_blocks
from ..transitions import extract_transitions
from ..utils.codec import parse_color, parse_float, parse_int, parse_time

logger = logging.getLogger(__name__)

# Encodings to try when auto-detecting
ENCODINGS_TO_TRY = [
    'utf-8-sig',  # UTF-8 with BOM
    'utf-8',
    'utf-16',
    'utf-16-le',
    'utf-16-be',
    'shift_jis',
    'gbk',
    'big5',
    'cp1252',     # Windows Western European
    'latin1',
]

DEFAULT_EVENTS_FORMAT = [
    'Layer', 'Start', 'End', 'Style', 'Name',
    'MarginL', 'MarginR', 'MarginV', 'Effect', 'Text',
]


# =============================================================================
# Field decoders
# =============================================================================


def _decode_fontsize(value: str) -> float:
    size = parse_float(value, 20.0)
    return size if size > 0 else 20.0


def _decode_alignment(value: str) -> int:
    alignment = parse_int(value, 2)
    return alignment if 1 <= alignment <= 9 else 2


def _either_bool(value: str) -> bool:
    return value in ('1', '-1')


def _strict_bool(value: str) -> bool:
    return value == '1'


# Lowercased Format: field name -> (AssStyle attribute, decoder)
_STYLE_FIELDS: dict[str, tuple[str, Callable[[str], Any]]] = {
    'name': ('name', str),
    'fontname': ('fontname', str),
    'fontsize': ('fontsize', _decode_fontsize),
    'primarycolour': ('primary_color', parse_color),
    'secondarycolour': ('secondary_color', parse_color),
    'outlinecolour': ('outline_color', parse_color),
    'backcolour': ('back_color', parse_color),
    'bold': ('bold', _either_bool),
    'italic': ('italic', _either_bool),
    'underline': ('underline', _strict_bool),
    'strikeout': ('strike_out', _strict_bool),
    'scalex': ('scale_x', lambda v: parse_float(v, 100.0)),
    'scaley': ('scale_y', lambda v: parse_float(v, 100.0)),
    'spacing': ('spacing', lambda v: parse_float(v, 0.0)),
    'angle': ('angle', lambda v: parse_float(v, 0.0)),
    'borderstyle': ('border_style', lambda v: parse_int(v, 1)),
    'outline': ('outline', lambda v: parse_float(v, 0.0)),
    'shadow': ('shadow', lambda v: parse_float(v, 0.0)),
    'alignment': ('alignment', _decode_alignment),
    'marginl': ('margin_l', lambda v: parse_int(v, 0)),
    'marginr': ('margin_r', lambda v: parse_int(v, 0)),
    'marginv': ('margin_v', lambda v: parse_int(v, 0)),
    'encoding': ('encoding', lambda v: parse_int(v, 1)),
}


def _field_key(field_name: str) -> str:
    """Normalise a Format: field name ('PrimaryColor' == 'primarycolour')."""
    key = field_name.strip().lower()
    if key.endswith('color'):
        key = key[:-len('color')] + 'colour'
    return key


def _strip_prefix(line: str) -> str:
    """Everything after the first ':' of a 'Key: value' line."""
    return line.split(':', 1)[1]


# =============================================================================
# Section handlers
# =============================================================================


@dataclass
class _ScanState:
    """Format lines seen so far; the only state carried between lines."""

    style_format: list[str] | None = None
    events_format: list[str] | None = None


def _parse_script_info(line: str, data: AssSubtitle, state: _ScanState) -> None:
    """Parse one [Script Info] 'Key: value' line."""
    if ':' not in line:
        return
    key, value = line.split(':', 1)
    data.script_info[key.strip()] = value.strip()


def _parse_style_line(line: str, data: AssSubtitle, state: _ScanState) -> None:
    """Parse one [V4+ Styles] line (Format: or Style:)."""
    lower = line.lower()

    if lower.startswith('format:'):
        state.style_format = [f.strip() for f in _strip_prefix(line).split(',')]
        return

    if not lower.startswith('style:'):
        return

    if state.style_format is None:
        logger.debug("Dropping style row before any Format: line")
        return

    style = build_style(state.style_format, _strip_prefix(line).split(','))
    if style is not None:
        data.styles[style.name] = style


def _parse_event_line(line: str, data: AssSubtitle, state: _ScanState) -> None:
    """Parse one [Events] line (Format: or Dialogue:)."""
    lower = line.lower()

    if lower.startswith('format:'):
        state.events_format = [f.strip() for f in _strip_prefix(line).split(',')]
        return

    if not lower.startswith('dialogue:'):
        return

    format_fields = state.events_format or DEFAULT_EVENTS_FORMAT
    dialogue = build_dialogue(format_fields, _strip_prefix(line).split(','))
    if dialogue is not None:
        data.dialogues.append(dialogue)


_SECTION_HANDLERS: dict[ScriptSection, Callable[[str, AssSubtitle, _ScanState], None]] = {
    ScriptSection.SCRIPT_INFO: _parse_script_info,
    ScriptSection.STYLES: _parse_style_line,
    ScriptSection.EVENTS: _parse_event_line,
}


# =============================================================================
# Row builders
# =============================================================================


def build_style(format_fields: list[str], values: list[str]) -> AssStyle | None:
    """
    Build a style from Format: field names and Style: values.

    Args:
        format_fields: Field names from the Format line
        values: Comma-split values from the Style line

    Returns:
        AssStyle, or None when the value count differs from the format length
        or the Name field is missing/empty.
    """
    if len(values) != len(format_fields):
        logger.debug(
            "Dropping style row: %d values for %d format fields",
            len(values), len(format_fields),
        )
        return None

    kwargs: dict[str, Any] = {}
    for field_name, raw in zip(format_fields, values):
        field_decoder = _STYLE_FIELDS.get(_field_key(field_name))
        if field_decoder is None:
            continue  # Unknown field
        attr, decode = field_decoder
        kwargs[attr] = decode(raw.strip())

    if not kwargs.get('name'):
        logger.debug("Dropping style row without a name")
        return None

    return AssStyle(**kwargs)


def build_dialogue(format_fields: list[str], values: list[str]) -> DialogueEvent | None:
    """
    Build a dialogue from Format: field names and Dialogue: values.

    The Text field swallows every remaining comma-split token, since free
    text may contain commas.

    Returns:
        DialogueEvent, or None when there are fewer values than format fields,
        Start/End are missing, end < start, or the plain text is empty.
    """
    if len(values) < len(format_fields):
        logger.debug(
            "Dropping dialogue row: %d values for %d format fields",
            len(values), len(format_fields),
        )
        return None

    kwargs: dict[str, Any] = {}
    start: float | None = None
    end: float | None = None
    original_text: str | None = None

    for i, field_name in enumerate(format_fields):
        key = field_name.strip().lower()
        if key == 'text':
            original_text = ','.join(values[i:]).strip()
            continue

        value = values[i].strip()
        if key == 'start':
            start = parse_time(value)
        elif key == 'end':
            end = parse_time(value)
        elif key == 'layer':
            kwargs['layer'] = parse_int(value, 0)
        elif key == 'style':
            kwargs['style'] = value
        elif key == 'name':
            kwargs['name'] = value
        elif key == 'marginl':
            kwargs['margin_l'] = parse_int(value, 0)
        elif key == 'marginr':
            kwargs['margin_r'] = parse_int(value, 0)
        elif key == 'marginv':
            kwargs['margin_v'] = parse_int(value, 0)
        elif key == 'effect':
            kwargs['effect'] = value

    if start is None or end is None or original_text is None:
        logger.debug("Dropping dialogue row without Start/End/Text")
        return None
    if end < start:
        logger.debug("Dropping dialogue row ending before it starts (%s < %s)", end, start)
        return None

    text = strip_override_blocks(original_text)
    if not text:
        return None

    return DialogueEvent(
        start=start,
        end=end,
        text=text,
        original_text=original_text,
        segments=parse_override_tags(original_text),
        transitions=extract_transitions(original_text),
        **kwargs,
    )


# =============================================================================
# Entry points
# =============================================================================


def parse_ass_text(content: str) -> AssSubtitle:
    """
    Parse ASS script text.

    Args:
        content: Full script text

    Returns:
        AssSubtitle; possibly partial, never an exception for bad input.
    """
    data = AssSubtitle()
    state = _ScanState()
    current_section: ScriptSection | None = None

    # Only \n separates lines; \r from CRLF is removed by strip()
    for raw_line in content.split('\n'):
        line = raw_line.strip()

        # Check for section header
        if len(line) >= 2 and line.startswith('[') and line.endswith(']'):
            current_section = ScriptSection.from_header(line[1:-1])
            continue

        if not line or line.startswith(';'):
            continue

        handler = _SECTION_HANDLERS.get(current_section) if current_section else None
        if handler is not None:
            handler(line, data, state)

    return data


def detect_encoding(path: Path) -> tuple[str, bool]:
    """
    Detect file encoding.

    Args:
        path: Path to file

    Returns:
        Tuple of (encoding_name, has_bom)
    """
    # Check for BOM first
    with open(path, 'rb') as f:
        raw = f.read(4)

    if raw.startswith(codecs.BOM_UTF8):
        return ('utf-8-sig', True)
    elif raw.startswith(codecs.BOM_UTF32_LE):
        return ('utf-32', True)
    elif raw.startswith(codecs.BOM_UTF32_BE):
        return ('utf-32', True)
    elif raw.startswith(codecs.BOM_UTF16_LE):
        return ('utf-16', True)
    elif raw.startswith(codecs.BOM_UTF16_BE):
        return ('utf-16', True)

    # Try each encoding
    for encoding in ENCODINGS_TO_TRY:
        try:
            with open(path, 'r', encoding=encoding) as f:
                f.read()
            return (encoding, False)
        except (UnicodeDecodeError, UnicodeError, LookupError):
            continue

    # Default to UTF-8
    return ('utf-8', False)


def parse_ass_file(path: Path | str, encoding: str | None = None) -> AssSubtitle:
    """
    Read and parse an ASS/SSA file.

    Args:
        path: Path to ASS/SSA file
        encoding: Force an encoding instead of auto-detecting

    Returns:
        Parsed AssSubtitle

    Raises:
        OSError: If the file cannot be read
    """
    path = Path(path)
    if encoding is None:
        encoding, _has_bom = detect_encoding(path)

    with open(path, 'r', encoding=encoding, errors='replace') as f:
        content = f.read()

    data = parse_ass_text(content)
    logger.info(
        "Parsed %s (%s): %d styles, %d dialogues",
        path.name, encoding, len(data.styles), len(data.dialogues),
    )
    return data
