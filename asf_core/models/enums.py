# asf_core/models/enums.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from enum import Enum


class ScriptSection(Enum):
    SCRIPT_INFO = 'script info'
    STYLES = 'v4+ styles'
    EVENTS = 'events'

    @classmethod
    def from_header(cls, header: str) -> ScriptSection | None:
        """Map a '[Name]' header body to a known section, or None."""
        name = header.strip().lower()
        if name == 'v4 styles':  # SSA
            return cls.STYLES
        for section in cls:
            if section.value == name:
                return section
        return None


class OverrideType(Enum):
    PRIMARY_COLOR = 'primary_color'
    SECONDARY_COLOR = 'secondary_color'
    OUTLINE_COLOR = 'outline_color'
    BACK_COLOR = 'back_color'
    ALPHA = 'alpha'
    PRIMARY_ALPHA = 'primary_alpha'
    SECONDARY_ALPHA = 'secondary_alpha'
    OUTLINE_ALPHA = 'outline_alpha'
    BACK_ALPHA = 'back_alpha'
    FONT_SIZE = 'font_size'
    ROTATION = 'rotation'
    SCALE_X = 'scale_x'
    SCALE_Y = 'scale_y'

    @property
    def is_color(self) -> bool:
        return self in _COLOR_TYPES

    @property
    def is_alpha(self) -> bool:
        return self in _ALPHA_TYPES


_COLOR_TYPES = frozenset({
    OverrideType.PRIMARY_COLOR,
    OverrideType.SECONDARY_COLOR,
    OverrideType.OUTLINE_COLOR,
    OverrideType.BACK_COLOR,
})

_ALPHA_TYPES = frozenset({
    OverrideType.ALPHA,
    OverrideType.PRIMARY_ALPHA,
    OverrideType.SECONDARY_ALPHA,
    OverrideType.OUTLINE_ALPHA,
    OverrideType.BACK_ALPHA,
})
