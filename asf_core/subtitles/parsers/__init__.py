# asf_core/subtitles/parsers/__init__.py
# -*- coding: utf-8 -*-
"""Subtitle script parsers."""

from .ass_parser import build_dialogue, build_style, detect_encoding, parse_ass_file, parse_ass_text

__all__ = ['build_dialogue', 'build_style', 'detect_encoding', 'parse_ass_file', 'parse_ass_text']
