# asf_core/subtitles/utils/codec.py
"""
Timestamp and color conversions for ASS text.

Formats:
- Time: H:MM:SS.cc (single digit hour, centiseconds) <-> float seconds
- Color: &HAABBGGRR or &HBBGGRR <-> RGBA (alpha inverted: ASS 00 = opaque)
- Alpha: &HAA& <-> opacity in [0, 1]

Every decoder here is best-effort: malformed input falls back to a default
and nothing raises.
"""

from __future__ import annotations

import math
import re

from ..data import RGBA, WHITE

_COLOR_RE = re.compile(r'^&H([0-9A-Fa-f]{8}|[0-9A-Fa-f]{6})&?$', re.IGNORECASE)
_ALPHA_RE = re.compile(r'^&H([0-9A-Fa-f]{1,2})&?$', re.IGNORECASE)


# =============================================================================
# Scalars
# =============================================================================


def parse_int(text: str | None, default: int = 0) -> int:
    """Parse an integer field, returning default when it is not one."""
    if text is None:
        return default
    try:
        return int(text.strip())
    except ValueError:
        pass
    # "12.0" style values show up in hand-edited files
    try:
        return int(float(text.strip()))
    except (ValueError, OverflowError):
        return default


def parse_float(text: str | None, default: float = 0.0) -> float:
    """Parse a float field, returning default when it is not one (or NaN)."""
    if text is None:
        return default
    try:
        value = float(text.strip())
    except ValueError:
        return default
    if math.isnan(value) or math.isinf(value):
        return default
    return value


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# =============================================================================
# Time
# =============================================================================


def parse_time(time_str: str) -> float:
    """
    Parse ASS timestamp to float seconds.

    Format: H:MM:SS.cc

    Args:
        time_str: ASS timestamp string (e.g., "0:01:23.45")

    Returns:
        Time in seconds. A shape other than three colon-separated fields
        yields 0; each unparseable field counts as 0.
    """
    parts = (time_str or "").strip().split(":")
    if len(parts) != 3:
        return 0.0

    hours = parse_int(parts[0], 0)
    minutes = parse_int(parts[1], 0)
    seconds = parse_float(parts[2], 0.0)
    return hours * 3600 + minutes * 60 + seconds


def round_to_centiseconds(seconds: float, rounding: str = "floor") -> int:
    """
    Round seconds to centiseconds based on rounding mode.

    Args:
        seconds: Time in float seconds
        rounding: Rounding mode - "floor" (default), "round", or "ceil"

    Returns:
        Time in integer centiseconds
    """
    mode = (rounding or "floor").lower()
    # Absorb binary noise such as 1.23 * 100 == 122.99999999999999
    value = round(seconds * 100.0, 6)

    if mode == "ceil":
        return int(math.ceil(value))
    if mode == "round":
        return _round_half_up(value)
    return int(math.floor(value))


def format_ass_time(seconds: float, rounding: str = "floor") -> str:
    """
    Format float seconds to ASS timestamp.

    Args:
        seconds: Time in float seconds
        rounding: Rounding mode - "floor" (default), "round", or "ceil"

    Returns:
        ASS timestamp string (H:MM:SS.cc)
    """
    total_cs = round_to_centiseconds(seconds, rounding)

    # Ensure non-negative
    total_cs = max(total_cs, 0)

    cs = total_cs % 100
    total_seconds = total_cs // 100
    secs = total_seconds % 60
    total_minutes = total_seconds // 60
    minutes = total_minutes % 60
    hours = total_minutes // 60

    return f"{hours}:{minutes:02d}:{secs:02d}.{cs:02d}"


# =============================================================================
# Color
# =============================================================================


def parse_color(color_str: str) -> RGBA:
    """
    Parse an ASS color to RGBA.

    Accepts &HAABBGGRR or &HBBGGRR, with or without the trailing '&'.
    An omitted alpha byte means 00 (opaque).

    Args:
        color_str: ASS color string

    Returns:
        RGBA with a = (255 - AA) / 255. Any other shape yields opaque white.
    """
    match = _COLOR_RE.match((color_str or "").strip())
    if not match:
        return WHITE

    digits = match.group(1)
    if len(digits) == 6:
        digits = "00" + digits

    aa = int(digits[0:2], 16)
    bb = int(digits[2:4], 16)
    gg = int(digits[4:6], 16)
    rr = int(digits[6:8], 16)
    return RGBA(rr, gg, bb, (255 - aa) / 255)


def parse_alpha(alpha_str: str) -> float:
    """
    Parse an ASS alpha payload (&HAA&) to opacity.

    Returns:
        (255 - AA) / 255; malformed input yields 1.0 (opaque).
    """
    match = _ALPHA_RE.match((alpha_str or "").strip())
    if not match:
        return 1.0
    return (255 - int(match.group(1), 16)) / 255


def alpha_to_ass_byte(alpha: float) -> int:
    """Opacity in [0, 1] -> ASS alpha byte (00 = opaque)."""
    alpha = max(0.0, min(1.0, alpha))
    return _round_half_up(255 - alpha * 255)


def color_to_ass_hex(color: RGBA) -> str:
    """
    Format RGBA as &HAABBGGRR.

    parse_color(color_to_ass_hex(c)) == c for colors reachable through the
    8-digit path.
    """
    aa = alpha_to_ass_byte(color.a)
    return f"&H{aa:02X}{color.b:02X}{color.g:02X}{color.r:02X}"


def interpolate_color(a: RGBA, b: RGBA, t: float) -> RGBA:
    """
    Component-wise linear interpolation.

    r, g, b are rounded to the nearest integer; alpha stays fractional.
    The caller keeps t within [0, 1].
    """
    return RGBA(
        _round_half_up(a.r + (b.r - a.r) * t),
        _round_half_up(a.g + (b.g - a.g) * t),
        _round_half_up(a.b + (b.b - a.b) * t),
        a.a + (b.a - a.a) * t,
    )


def apply_alpha_to_color(color: RGBA, alpha: float) -> RGBA:
    """Scale a color's opacity by alpha (clamped to [0, 1])."""
    alpha = max(0.0, min(1.0, alpha))
    return color.with_alpha(color.a * alpha)
