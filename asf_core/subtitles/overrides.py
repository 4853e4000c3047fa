# asf_core/subtitles/overrides.py
# -*- coding: utf-8 -*-
"""
Inline override tag parsing.

Dialogue text alternates between {...} override blocks and plain runs:

    {\\c&H00FF00&\\fs40}Green {\\frz15}tilted

Each plain run becomes a TextSegment carrying every tag seen before it on the
line. Only a fixed catalogue of tags is understood (colors, alphas, font size,
rotation, scale); everything else inside a block (\\pos, \\k, \\p, \\frx, ...)
is skipped without error.

Also hosts the single-shot extractors used by layout code (\\pos/\\an,
\\c/\\3c, \\fad, \\move). Those look at the first match only and do not build
segments.
"""
from __future__ import annotations

import re
from collections.abc import Iterator

from ..models.enums import OverrideType
from .data import (
    ColorOverrides,
    FadeEffect,
    MoveEffect,
    OverrideTag,
    Positioning,
    TextSegment,
)
from .utils.codec import parse_color, parse_float, parse_int

_HEX_COLOR = r'(&H(?:[0-9A-Fa-f]{8}|[0-9A-Fa-f]{6})&)'
_HEX_ALPHA = r'(&H[0-9A-Fa-f]{2}&)'
_UNSIGNED = r'(\d+(?:\.\d+)?)'
_SIGNED = r'([+-]?\d+(?:\.\d+)?)'

# Tag grammar catalogue: tag type -> pattern matched at the start of a token.
# \fs requires a digit right after it, so it never matches \fscx/\fscy/\fsp.
TAG_CATALOGUE: list[tuple[OverrideType, re.Pattern]] = [
    (OverrideType.PRIMARY_COLOR, re.compile(r'\\1?c' + _HEX_COLOR)),
    (OverrideType.SECONDARY_COLOR, re.compile(r'\\2c' + _HEX_COLOR)),
    (OverrideType.OUTLINE_COLOR, re.compile(r'\\3c' + _HEX_COLOR)),
    (OverrideType.BACK_COLOR, re.compile(r'\\4c' + _HEX_COLOR)),
    (OverrideType.ALPHA, re.compile(r'\\alpha' + _HEX_ALPHA)),
    (OverrideType.PRIMARY_ALPHA, re.compile(r'\\1a' + _HEX_ALPHA)),
    (OverrideType.SECONDARY_ALPHA, re.compile(r'\\2a' + _HEX_ALPHA)),
    (OverrideType.OUTLINE_ALPHA, re.compile(r'\\3a' + _HEX_ALPHA)),
    (OverrideType.BACK_ALPHA, re.compile(r'\\4a' + _HEX_ALPHA)),
    (OverrideType.SCALE_X, re.compile(r'\\fscx' + _UNSIGNED)),
    (OverrideType.SCALE_Y, re.compile(r'\\fscy' + _UNSIGNED)),
    (OverrideType.FONT_SIZE, re.compile(r'\\fs' + _UNSIGNED)),
    (OverrideType.ROTATION, re.compile(r'\\frz?' + _SIGNED)),
]

_BLOCK_RE = re.compile(r'\{[^}]*\}')

_POS_RE = re.compile(r'\\pos\(\s*' + _SIGNED + r'\s*,\s*' + _SIGNED + r'\s*\)')
_AN_RE = re.compile(r'\\an([1-9])')
_PRIMARY_RE = re.compile(r'\\1?c' + _HEX_COLOR)
_OUTLINE_RE = re.compile(r'\\3c' + _HEX_COLOR)
_FADE_RE = re.compile(r'\\fad\(\s*(\d+)\s*,\s*(\d+)\s*\)')
_MOVE_RE = re.compile(
    r'\\move\(\s*' + _SIGNED + r'\s*,\s*' + _SIGNED + r'\s*,\s*' + _SIGNED
    + r'\s*,\s*' + _SIGNED + r'(?:\s*,\s*(\d+)\s*,\s*(\d+))?\s*\)'
)


# =============================================================================
# Block scanning
# =============================================================================


def iter_blocks(text: str) -> Iterator[tuple[bool, int, int]]:
    """
    Split text into alternating plain runs and override blocks.

    Yields:
        (is_block, start, end) spans covering the whole text. Block spans
        include the braces. A '{' with no closing '}' is plain text.
    """
    pos = 0
    for match in _BLOCK_RE.finditer(text):
        if match.start() > pos:
            yield (False, pos, match.start())
        yield (True, match.start(), match.end())
        pos = match.end()
    if pos < len(text):
        yield (False, pos, len(text))


def strip_override_blocks(text: str) -> str:
    """Remove all {...} blocks and trim the result."""
    return _BLOCK_RE.sub('', text).strip()


def match_paren(body: str, open_index: int) -> int | None:
    """Index of the ')' balancing the '(' at open_index, or None if unterminated."""
    depth = 0
    for i in range(open_index, len(body)):
        ch = body[i]
        if ch == '(':
            depth += 1
        elif ch == ')':
            depth -= 1
            if depth == 0:
                return i
    return None


def find_paren_end(body: str, open_index: int) -> int:
    """Index just past the matching ')'; an unterminated group runs to the end."""
    close = match_paren(body, open_index)
    return len(body) if close is None else close + 1


def iter_tag_tokens(body: str) -> Iterator[str]:
    """
    Yield backslash tokens of a block body in textual order.

    \\t(...) groups are skipped whole; their contents belong to the
    transition engine.
    """
    i = 0
    length = len(body)
    while i < length:
        if body[i] != '\\':
            i += 1
            continue
        if body.startswith('\\t(', i):
            i = find_paren_end(body, i + 2)
            continue
        end = body.find('\\', i + 1)
        if end == -1:
            end = length
        # Keep parenthesised arguments attached to their tag
        paren = body.find('(', i, end)
        if paren != -1:
            end = max(end, find_paren_end(body, paren))
        yield body[i:end]
        i = end


def match_tag(token: str, offset: int) -> OverrideTag | None:
    for tag_type, pattern in TAG_CATALOGUE:
        match = pattern.match(token)
        if match:
            return OverrideTag(type=tag_type, value=match.group(1), offset=offset)
    return None


def parse_block_tags(body: str, offset: int) -> list[OverrideTag]:
    """
    Parse the tags of one block body (braces already removed).

    Args:
        body: Block contents
        offset: Character offset of the block's '{' in the dialogue text

    Returns:
        Recognised tags in textual order, all attributed to offset.
    """
    tags = []
    for token in iter_tag_tokens(body):
        tag = match_tag(token, offset)
        if tag is not None:
            tags.append(tag)
    return tags


# =============================================================================
# Public parsing API
# =============================================================================


def parse_override_tags(text: str) -> list[TextSegment]:
    """
    Split dialogue text into plain segments with cumulative overrides.

    Args:
        text: Dialogue text including {...} blocks

    Returns:
        One TextSegment per non-empty plain run, in order. Each carries a
        snapshot of all tags from blocks before it on the line.
    """
    segments: list[TextSegment] = []
    current: list[OverrideTag] = []

    for is_block, start, end in iter_blocks(text):
        if is_block:
            current.extend(parse_block_tags(text[start + 1:end - 1], start))
        else:
            segments.append(TextSegment(
                text=text[start:end],
                start=start,
                end=end,
                overrides=list(current),
            ))

    return segments


def collect_override_tags(text: str) -> list[OverrideTag]:
    """All recognised tags across every block of text, in order."""
    tags: list[OverrideTag] = []
    for is_block, start, end in iter_blocks(text):
        if is_block:
            tags.extend(parse_block_tags(text[start + 1:end - 1], start))
    return tags


def iter_block_bodies(text: str) -> Iterator[tuple[int, str]]:
    """(offset, body) for every {...} block of text."""
    for is_block, start, end in iter_blocks(text):
        if is_block:
            yield start, text[start + 1:end - 1]


# =============================================================================
# Single-shot extractors
# =============================================================================


def extract_positioning(text: str) -> Positioning:
    """
    Extract \\pos(x,y) and \\an<n> from override text.

    Returns:
        Positioning with None for anything not present.
    """
    positioning = Positioning()

    pos_match = _POS_RE.search(text)
    if pos_match:
        positioning.x = parse_float(pos_match.group(1))
        positioning.y = parse_float(pos_match.group(2))

    align_match = _AN_RE.search(text)
    if align_match:
        positioning.alignment = int(align_match.group(1))

    return positioning


def extract_colors(text: str) -> ColorOverrides:
    """Extract the first primary (\\c, \\1c) and outline (\\3c) colors."""
    colors = ColorOverrides()

    primary_match = _PRIMARY_RE.search(text)
    if primary_match:
        colors.primary = parse_color(primary_match.group(1))

    outline_match = _OUTLINE_RE.search(text)
    if outline_match:
        colors.outline = parse_color(outline_match.group(1))

    return colors


def extract_fade(text: str) -> FadeEffect | None:
    """\\fad(in,out) durations in ms, or None."""
    match = _FADE_RE.search(text)
    if not match:
        return None
    return FadeEffect(fade_in_ms=int(match.group(1)), fade_out_ms=int(match.group(2)))


def extract_move(text: str) -> MoveEffect | None:
    """\\move(x1,y1,x2,y2[,t1,t2]), or None."""
    match = _MOVE_RE.search(text)
    if not match:
        return None
    t1, t2 = match.group(5), match.group(6)
    return MoveEffect(
        x1=parse_float(match.group(1)),
        y1=parse_float(match.group(2)),
        x2=parse_float(match.group(3)),
        y2=parse_float(match.group(4)),
        t1_ms=parse_int(t1) if t1 is not None else None,
        t2_ms=parse_int(t2) if t2 is not None else None,
    )
