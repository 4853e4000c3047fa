# asf_core/subtitles/data.py
"""
Data model for parsed ASS scripts.

This module provides the structures produced by the parser and consumed by
the frame sampler and the rendering layer:
- AssSubtitle: aggregate root (script info, style table, dialogue list)
- AssStyle / DialogueEvent: one record per Style:/Dialogue: row
- OverrideTag / TextSegment / Transition: derived from dialogue text
- FrameSample: resolved visual state at one instant

All dialogue times are stored as FLOAT SECONDS. Transition offsets and frame
timestamps are MILLISECONDS relative to the dialogue start.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from ..models.enums import OverrideType

# =============================================================================
# Colors
# =============================================================================


@dataclass(frozen=True)
class RGBA:
    """
    Resolved color.

    r, g, b are 0-255 integers. a is opacity in [0, 1] (1 = fully opaque),
    i.e. already inverted from the ASS convention where 00 means opaque.
    """

    r: int = 255
    g: int = 255
    b: int = 255
    a: float = 1.0

    def with_alpha(self, a: float) -> RGBA:
        return RGBA(self.r, self.g, self.b, a)

    def to_hex(self) -> str:
        """#RRGGBBAA with alpha scaled to 0-255."""
        alpha = int(round(max(0.0, min(1.0, self.a)) * 255))
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}{alpha:02X}"

    def to_css(self) -> str:
        return f"rgba({self.r}, {self.g}, {self.b}, {round(self.a, 4)})"

    def to_dict(self) -> dict[str, Any]:
        return {"r": self.r, "g": self.g, "b": self.b, "a": self.a}


WHITE = RGBA(255, 255, 255, 1.0)
RED = RGBA(255, 0, 0, 1.0)
BLACK = RGBA(0, 0, 0, 1.0)


# =============================================================================
# Style Definition
# =============================================================================


@dataclass
class AssStyle:
    """
    ASS V4+ style definition.

    Colors are resolved RGBA values; boolean flags are already decoded
    following the ASS convention (-1 or 1 for Bold/Italic).
    """

    name: str
    fontname: str = "Arial"
    fontsize: float = 20.0
    primary_color: RGBA = WHITE
    secondary_color: RGBA = RED
    outline_color: RGBA = BLACK
    back_color: RGBA = BLACK
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strike_out: bool = False
    scale_x: float = 100.0
    scale_y: float = 100.0
    spacing: float = 0.0
    angle: float = 0.0
    border_style: int = 1  # 1 = outline + shadow, 3 = opaque box
    outline: float = 0.0
    shadow: float = 0.0
    alignment: int = 2  # Numpad style: 1-9
    margin_l: int = 0
    margin_r: int = 0
    margin_v: int = 0
    encoding: int = 1

    @classmethod
    def default(cls) -> AssStyle:
        """Create default style."""
        return cls(name="Default")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "fontname": self.fontname,
            "fontsize": self.fontsize,
            "primary_color": self.primary_color.to_hex(),
            "secondary_color": self.secondary_color.to_hex(),
            "outline_color": self.outline_color.to_hex(),
            "back_color": self.back_color.to_hex(),
            "bold": self.bold,
            "italic": self.italic,
            "underline": self.underline,
            "strike_out": self.strike_out,
            "scale_x": self.scale_x,
            "scale_y": self.scale_y,
            "spacing": self.spacing,
            "angle": self.angle,
            "border_style": self.border_style,
            "outline": self.outline,
            "shadow": self.shadow,
            "alignment": self.alignment,
            "margin_l": self.margin_l,
            "margin_r": self.margin_r,
            "margin_v": self.margin_v,
            "encoding": self.encoding,
        }


# =============================================================================
# Override Tags, Segments, Transitions
# =============================================================================


@dataclass(frozen=True)
class OverrideTag:
    """One inline override found in a {...} block."""

    type: OverrideType
    value: str  # Raw payload, e.g. "&H00FF00&" or "40"
    offset: int  # Character offset of the enclosing block

    @property
    def decoded(self) -> RGBA | float:
        """
        Typed payload.

        Returns:
            RGBA for color tags, opacity (0-1) for alpha tags, float otherwise
        """
        from .utils.codec import parse_alpha, parse_color, parse_float

        if self.type.is_color:
            return parse_color(self.value)
        if self.type.is_alpha:
            return parse_alpha(self.value)
        return parse_float(self.value, 0.0)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "value": self.value, "offset": self.offset}


@dataclass
class TextSegment:
    """
    Contiguous run of plain text.

    overrides is a snapshot of every tag seen on the line before this run,
    in order. Same-type tags are not deduplicated; the last one wins.
    """

    text: str
    start: int
    end: int
    overrides: list[OverrideTag] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "start": self.start,
            "end": self.end,
            "overrides": [tag.to_dict() for tag in self.overrides],
        }


@dataclass
class Transition:
    """A \\t(start,end,tags) directive. Offsets in ms from dialogue start."""

    start_ms: float
    end_ms: float
    targets: dict[OverrideType, str] = field(default_factory=dict)

    def is_started(self, time_ms: float) -> bool:
        return time_ms >= self.start_ms

    def progress(self, time_ms: float) -> float:
        """
        Linear progress at time_ms, clamped to [0, 1].

        A zero-width window jumps straight to 1 at its start.
        """
        if time_ms < self.start_ms:
            return 0.0
        width = self.end_ms - self.start_ms
        if width <= 0:
            return 1.0
        return min(1.0, (time_ms - self.start_ms) / width)

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_ms": self.start_ms,
            "end_ms": self.end_ms,
            "targets": {k.value: v for k, v in self.targets.items()},
        }


# =============================================================================
# Frame Samples
# =============================================================================


@dataclass
class FrameSample:
    """Resolved visual state of a dialogue at time_ms (relative to its start)."""

    time_ms: float
    primary_color: RGBA
    secondary_color: RGBA
    outline_color: RGBA
    back_color: RGBA
    alpha: float  # 0 = fully transparent, 1 = fully opaque
    font_size: float
    rotation: float  # Degrees
    scale_x: float = 100.0
    scale_y: float = 100.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "time_ms": self.time_ms,
            "primary_color": self.primary_color.to_hex(),
            "secondary_color": self.secondary_color.to_hex(),
            "outline_color": self.outline_color.to_hex(),
            "back_color": self.back_color.to_hex(),
            "alpha": self.alpha,
            "font_size": self.font_size,
            "rotation": self.rotation,
            "scale_x": self.scale_x,
            "scale_y": self.scale_y,
        }


@dataclass
class FrameCache:
    """Sampled frames for one dialogue plus their timestamps as an array."""

    frame_rate: float
    samples: list[FrameSample]
    timestamps: np.ndarray

    def __len__(self) -> int:
        return len(self.samples)


# =============================================================================
# Dialogue Event
# =============================================================================


@dataclass
class DialogueEvent:
    """
    One Dialogue: row.

    style is a name reference; it is resolved against AssSubtitle.styles by
    the consumer and may be missing from the table.
    """

    start: float  # Seconds
    end: float  # Seconds
    text: str  # Plain text, all {...} blocks removed
    original_text: str = ""  # Text with override blocks
    layer: int = 0
    style: str = "Default"
    name: str = ""  # Actor
    margin_l: int = 0
    margin_r: int = 0
    margin_v: int = 0
    effect: str = ""
    segments: list[TextSegment] = field(default_factory=list)
    transitions: list[Transition] = field(default_factory=list)

    # Lazily filled by the frame sampler; last writer wins
    frame_cache: FrameCache | None = field(default=None, repr=False, compare=False)

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        return self.end - self.start

    @property
    def duration_ms(self) -> float:
        return (self.end - self.start) * 1000.0

    def is_active_at(self, time_s: float) -> bool:
        """Closed interval [start, end]."""
        return self.start <= time_s <= self.end

    def to_dict(self) -> dict[str, Any]:
        return {
            "layer": self.layer,
            "start": self.start,
            "end": self.end,
            "style": self.style,
            "name": self.name,
            "margin_l": self.margin_l,
            "margin_r": self.margin_r,
            "margin_v": self.margin_v,
            "effect": self.effect,
            "text": self.text,
            "original_text": self.original_text,
            "segments": [s.to_dict() for s in self.segments],
            "transitions": [t.to_dict() for t in self.transitions],
        }


# =============================================================================
# Single-shot extractor results
# =============================================================================


@dataclass
class Positioning:
    x: float | None = None
    y: float | None = None
    alignment: int | None = None

    @property
    def has_position(self) -> bool:
        return self.x is not None and self.y is not None


@dataclass
class ColorOverrides:
    primary: RGBA | None = None
    outline: RGBA | None = None


@dataclass
class FadeEffect:
    fade_in_ms: int
    fade_out_ms: int


@dataclass
class MoveEffect:
    x1: float
    y1: float
    x2: float
    y2: float
    t1_ms: int | None = None  # None = dialogue start
    t2_ms: int | None = None  # None = dialogue end


# =============================================================================
# Aggregate Root
# =============================================================================


@dataclass
class AssSubtitle:
    """
    Parsed ASS script.

    Built once by the parser; read-only afterwards except for the per-dialogue
    frame caches.
    """

    script_info: dict[str, str] = field(default_factory=dict)
    styles: dict[str, AssStyle] = field(default_factory=dict)
    dialogues: list[DialogueEvent] = field(default_factory=list)

    def get_style(self, name: str) -> AssStyle | None:
        return self.styles.get(name)

    def style_for(self, dialogue: DialogueEvent) -> AssStyle | None:
        """Resolve a dialogue's style reference; None when unresolved."""
        return self.get_style(dialogue.style)

    @property
    def play_res(self) -> tuple[int, int] | None:
        """Reference resolution from Script Info, if both keys are valid."""
        try:
            return (
                int(self.script_info["PlayResX"]),
                int(self.script_info["PlayResY"]),
            )
        except (KeyError, ValueError):
            return None

    def get_timing_range(self) -> tuple[float, float]:
        """(first start, last end) in seconds; (0, 0) when empty."""
        if not self.dialogues:
            return (0.0, 0.0)
        return (
            min(d.start for d in self.dialogues),
            max(d.end for d in self.dialogues),
        )

    def get_style_counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for dialogue in self.dialogues:
            counts[dialogue.style] = counts.get(dialogue.style, 0) + 1
        return counts

    def to_dict(self) -> dict[str, Any]:
        return {
            "script_info": dict(self.script_info),
            "styles": {name: s.to_dict() for name, s in self.styles.items()},
            "dialogues": [d.to_dict() for d in self.dialogues],
        }
