# asf_core/subtitles/frames.py
# -*- coding: utf-8 -*-
"""
Frame sampling for dialogue events.

For one dialogue the sampler walks timestamps 0, step, 2*step, ... duration
(ms, relative to the dialogue start, step = 1000 / frame_rate) and records
the resolved visual state at each:

1. Start from the style defaults (alpha 1, rotation = style angle)
2. Apply the first text segment's overrides in order (starting state)
3. Layer every transition that has started, in list order, each blending
   from the value left by the previous one toward its own target

The result is cached on the dialogue (FrameCache). Point lookups pick the
nearest cached sample; there is no interpolation between samples, so the
lookup precision is bounded by the frame rate.

Thread-safety: sampling is pure. Each dialogue owns its cache slot and the
write is a single attribute assignment, so concurrent callers may at worst
compute the same frames twice.
"""
from __future__ import annotations

import dataclasses
import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import numpy as np

from ..models.enums import OverrideType
from .data import RGBA, AssStyle, AssSubtitle, DialogueEvent, FrameCache, FrameSample
from .utils.codec import interpolate_color, parse_alpha, parse_color, parse_float

logger = logging.getLogger(__name__)

DEFAULT_FRAME_RATE = 30.0

_COLOR_ATTRS = ('primary_color', 'secondary_color', 'outline_color', 'back_color')

_COLOR_ATTR_BY_TYPE = {
    OverrideType.PRIMARY_COLOR: 'primary_color',
    OverrideType.SECONDARY_COLOR: 'secondary_color',
    OverrideType.OUTLINE_COLOR: 'outline_color',
    OverrideType.BACK_COLOR: 'back_color',
}

_NUMERIC_ATTR_BY_TYPE = {
    OverrideType.FONT_SIZE: 'font_size',
    OverrideType.ROTATION: 'rotation',
    OverrideType.SCALE_X: 'scale_x',
    OverrideType.SCALE_Y: 'scale_y',
}

# Attributes touched by each alpha tag
_ALPHA_ATTRS_BY_TYPE = {
    OverrideType.ALPHA: ('alpha',) + _COLOR_ATTRS,
    OverrideType.PRIMARY_ALPHA: ('alpha', 'primary_color'),
    OverrideType.SECONDARY_ALPHA: ('secondary_color',),
    OverrideType.OUTLINE_ALPHA: ('outline_color',),
    OverrideType.BACK_ALPHA: ('back_color',),
}


# =============================================================================
# Visual state
# =============================================================================


@dataclass
class VisualState:
    """Mutable working state while resolving one frame."""

    primary_color: RGBA
    secondary_color: RGBA
    outline_color: RGBA
    back_color: RGBA
    alpha: float
    font_size: float
    rotation: float
    scale_x: float
    scale_y: float

    @classmethod
    def from_style(cls, style: AssStyle) -> VisualState:
        return cls(
            primary_color=style.primary_color,
            secondary_color=style.secondary_color,
            outline_color=style.outline_color,
            back_color=style.back_color,
            alpha=1.0,
            font_size=style.fontsize,
            rotation=style.angle,
            scale_x=style.scale_x,
            scale_y=style.scale_y,
        )

    def copy(self) -> VisualState:
        return dataclasses.replace(self)

    def to_sample(self, time_ms: float) -> FrameSample:
        return FrameSample(
            time_ms=time_ms,
            primary_color=self.primary_color,
            secondary_color=self.secondary_color,
            outline_color=self.outline_color,
            back_color=self.back_color,
            alpha=self.alpha,
            font_size=self.font_size,
            rotation=self.rotation,
            scale_x=self.scale_x,
            scale_y=self.scale_y,
        )


def affected_attributes(tag_type: OverrideType) -> tuple[str, ...]:
    if tag_type in _COLOR_ATTR_BY_TYPE:
        return (_COLOR_ATTR_BY_TYPE[tag_type],)
    if tag_type in _ALPHA_ATTRS_BY_TYPE:
        return _ALPHA_ATTRS_BY_TYPE[tag_type]
    return (_NUMERIC_ATTR_BY_TYPE[tag_type],)


def apply_override(state: VisualState, tag_type: OverrideType, value: str) -> None:
    """
    Apply one override tag to state in place.

    A 6-digit color keeps the channel's current alpha; an 8-digit one
    carries its own.
    """
    if tag_type in _COLOR_ATTR_BY_TYPE:
        attr = _COLOR_ATTR_BY_TYPE[tag_type]
        color = parse_color(value)
        if len(value.strip().strip('&')) == 7:  # "H" + BBGGRR
            color = color.with_alpha(getattr(state, attr).a)
        setattr(state, attr, color)
        return

    if tag_type in _ALPHA_ATTRS_BY_TYPE:
        alpha = parse_alpha(value)
        for attr in _ALPHA_ATTRS_BY_TYPE[tag_type]:
            if attr == 'alpha':
                state.alpha = alpha
            else:
                setattr(state, attr, getattr(state, attr).with_alpha(alpha))
        return

    attr = _NUMERIC_ATTR_BY_TYPE[tag_type]
    setattr(state, attr, parse_float(value, getattr(state, attr)))


def blend_override(
    state: VisualState, tag_type: OverrideType, value: str, progress: float
) -> None:
    """
    Move state toward the tag's target by progress (0-1), in place.

    progress 0 leaves state untouched; progress 1 lands exactly on target.
    """
    if progress <= 0.0:
        return

    target = state.copy()
    apply_override(target, tag_type, value)

    if progress >= 1.0:
        for attr in affected_attributes(tag_type):
            setattr(state, attr, getattr(target, attr))
        return

    for attr in affected_attributes(tag_type):
        current = getattr(state, attr)
        goal = getattr(target, attr)
        if isinstance(current, RGBA):
            setattr(state, attr, interpolate_color(current, goal, progress))
        else:
            setattr(state, attr, current + (goal - current) * progress)


def initial_state(dialogue: DialogueEvent, style: AssStyle | None) -> VisualState:
    """Style defaults plus the first segment's overrides."""
    state = VisualState.from_style(style or AssStyle.default())
    if dialogue.segments:
        for tag in dialogue.segments[0].overrides:
            apply_override(state, tag.type, tag.value)
    return state


# =============================================================================
# Sampling
# =============================================================================


def _normalise_frame_rate(frame_rate: float | None) -> float:
    if frame_rate is None or not math.isfinite(frame_rate) or frame_rate <= 0:
        return DEFAULT_FRAME_RATE
    return float(frame_rate)


def frame_timestamps(duration_ms: float, frame_rate: float) -> np.ndarray:
    """
    Sample times 0 .. duration_ms (inclusive), ascending.

    Grid points are i * 1000 / frame_rate; when the grid misses duration_ms a
    final point is added at exactly duration_ms.
    """
    duration_ms = max(0.0, duration_ms)
    count = int(math.floor(duration_ms * frame_rate / 1000.0 + 1e-9))
    timestamps = np.arange(count + 1, dtype=np.float64) * 1000.0 / frame_rate
    if duration_ms - timestamps[-1] > 1e-6:
        timestamps = np.append(timestamps, duration_ms)
    return timestamps


def build_frame_cache(
    dialogue: DialogueEvent, style: AssStyle | None, frame_rate: float | None = None
) -> FrameCache:
    """Sample a dialogue without touching its cache slot."""
    rate = _normalise_frame_rate(frame_rate)
    base = initial_state(dialogue, style)
    timestamps = frame_timestamps(dialogue.duration_ms, rate)

    samples: list[FrameSample] = []
    for t in timestamps:
        time_ms = float(t)
        state = base.copy()
        for transition in dialogue.transitions:
            if not transition.is_started(time_ms):
                continue
            progress = transition.progress(time_ms)
            for tag_type, value in transition.targets.items():
                blend_override(state, tag_type, value, progress)
        samples.append(state.to_sample(time_ms))

    return FrameCache(frame_rate=rate, samples=samples, timestamps=timestamps)


def generate_frame_data(
    dialogue: DialogueEvent,
    style: AssStyle | None,
    frame_rate: float = DEFAULT_FRAME_RATE,
) -> list[FrameSample]:
    """
    Sample a dialogue's visual state and cache the result on it.

    Args:
        dialogue: Parsed dialogue event
        style: Its resolved style (None samples from AssStyle.default())
        frame_rate: Samples per second; <= 0 falls back to 30

    Returns:
        Frames ascending by time_ms, first at 0, last at the duration.
    """
    cache = build_frame_cache(dialogue, style, frame_rate)
    dialogue.frame_cache = cache
    logger.debug(
        "Sampled %d frames for dialogue at %.2fs (%.3g fps)",
        len(cache), dialogue.start, cache.frame_rate,
    )
    return cache.samples


def get_frame_data_at_time(
    dialogue: DialogueEvent,
    current_time: float,
    style: AssStyle | None = None,
    frame_rate: float | None = None,
) -> FrameSample:
    """
    Nearest cached frame for a playback time.

    Args:
        dialogue: Parsed dialogue event
        current_time: Playback time in seconds
        style: Used only when the cache has to be built
        frame_rate: Used only when the cache has to be built (default 30)

    Returns:
        The sample whose time_ms is closest to (current_time - start) * 1000.
        On an exact tie the earlier sample wins.
    """
    relative_ms = (current_time - dialogue.start) * 1000.0

    cache = dialogue.frame_cache
    if cache is None:
        cache = build_frame_cache(dialogue, style, frame_rate)
        dialogue.frame_cache = cache

    # argmin returns the first minimum
    index = int(np.argmin(np.abs(cache.timestamps - relative_ms)))
    return cache.samples[index]


def precompute_frames(
    subtitle: AssSubtitle,
    frame_rate: float = DEFAULT_FRAME_RATE,
    max_workers: int | None = None,
) -> int:
    """
    Fill the frame cache of every dialogue that lacks one at this rate.

    Dialogues are independent, so they are sampled on a thread pool; each
    worker writes only its own dialogue's cache.

    Returns:
        Number of dialogues sampled.
    """
    rate = _normalise_frame_rate(frame_rate)
    pending = [
        d for d in subtitle.dialogues
        if d.frame_cache is None or d.frame_cache.frame_rate != rate
    ]
    if not pending:
        return 0

    def _sample(dialogue: DialogueEvent) -> int:
        return len(generate_frame_data(dialogue, subtitle.style_for(dialogue), rate))

    if max_workers == 1 or len(pending) == 1:
        total = sum(_sample(d) for d in pending)
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            total = sum(executor.map(_sample, pending))

    logger.info("Precomputed %d frames for %d dialogues", total, len(pending))
    return len(pending)


def clear_frame_cache(subtitle: AssSubtitle) -> None:
    """Drop every dialogue's cached frames."""
    for dialogue in subtitle.dialogues:
        dialogue.frame_cache = None
