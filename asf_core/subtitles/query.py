# asf_core/subtitles/query.py
# -*- coding: utf-8 -*-
"""Playback-time queries over a parsed script."""
from __future__ import annotations

from .data import AssStyle, AssSubtitle, DialogueEvent


def get_active_dialogues(subtitle: AssSubtitle, current_time: float) -> list[DialogueEvent]:
    """
    Dialogues visible at current_time (seconds).

    Both ends of [start, end] are inclusive; script order is preserved.
    """
    return [d for d in subtitle.dialogues if d.is_active_at(current_time)]


def get_active_with_styles(
    subtitle: AssSubtitle, current_time: float
) -> list[tuple[DialogueEvent, AssStyle | None]]:
    """Active dialogues paired with their resolved style (None if unresolved)."""
    return [(d, subtitle.style_for(d)) for d in get_active_dialogues(subtitle, current_time)]
