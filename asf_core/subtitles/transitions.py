# asf_core/subtitles/transitions.py
# -*- coding: utf-8 -*-
"""
\\t(...) transition extraction.

A transition reads \\t(start,end,tags...): start/end are ms offsets from the
dialogue start, the remaining arguments are override tags giving the target
state. The tag fragment is re-parsed with the regular override catalogue, so
anything the block parser ignores is ignored here as well.

Occurrences with fewer than three arguments (\\t(\\fs40), \\t(accel,\\fs40))
are skipped.
"""
from __future__ import annotations

import logging

from ..models.enums import OverrideType
from .data import Transition
from .overrides import collect_override_tags, iter_block_bodies, match_paren
from .utils.codec import parse_float

logger = logging.getLogger(__name__)

_T_OPEN = '\\t('


def parse_transition_args(args_str: str) -> Transition | None:
    """
    Build a Transition from the text between '\\t(' and its ')'.

    Returns:
        None when fewer than three comma-separated arguments are present.
    """
    args = args_str.split(',')
    if len(args) < 3:
        logger.debug("Skipping \\t(%s): expected at least 3 arguments", args_str)
        return None

    start_ms = parse_float(args[0], 0.0)
    end_ms = parse_float(args[1], 0.0)
    if end_ms < start_ms:
        end_ms = start_ms

    # Tags may carry their own commas (\clip(...)), so rejoin before parsing
    fragment = ','.join(args[2:])
    targets: dict[OverrideType, str] = {}
    for tag in collect_override_tags('{' + fragment + '}'):
        targets[tag.type] = tag.value

    return Transition(start_ms=start_ms, end_ms=end_ms, targets=targets)


def extract_transitions(text: str) -> list[Transition]:
    """
    Extract every \\t(...) directive from the override blocks of text.

    Args:
        text: Dialogue text including {...} blocks

    Returns:
        Transitions in textual order. Windows may overlap.
    """
    transitions: list[Transition] = []

    for _offset, body in iter_block_bodies(text):
        pos = body.find(_T_OPEN)
        while pos != -1:
            open_index = pos + len(_T_OPEN) - 1
            close = match_paren(body, open_index)
            if close is None:
                inner = body[open_index + 1:]
                close_end = len(body)
            else:
                inner = body[open_index + 1:close]
                close_end = close + 1

            transition = parse_transition_args(inner)
            if transition is not None:
                transitions.append(transition)

            pos = body.find(_T_OPEN, close_end)

    return transitions
