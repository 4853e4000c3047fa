# asf_core/subtitles/loader.py
# -*- coding: utf-8 -*-
"""
Load any subtitle file into an AssSubtitle.

.ass/.ssa files go straight to the ASS parser. Every other format pysubs2
understands (SRT, WebVTT, MicroDVD, ...) is loaded with pysubs2 and
serialised to ASS text first, so the rest of the pipeline only ever sees
one grammar.
"""
from __future__ import annotations

import logging
from pathlib import Path

import pysubs2
from pysubs2.exceptions import Pysubs2Error

from .data import AssSubtitle
from .parsers.ass_parser import detect_encoding, parse_ass_file, parse_ass_text

logger = logging.getLogger(__name__)

ASS_SUFFIXES = ('.ass', '.ssa')


def convert_to_ass_text(path: Path | str, encoding: str | None = None) -> str | None:
    """
    Convert a non-ASS subtitle file to ASS script text using pysubs2.

    Returns:
        ASS text, or None when pysubs2 cannot read the file.
    """
    path = Path(path)
    if encoding is None:
        encoding, _has_bom = detect_encoding(path)

    try:
        subs = pysubs2.load(str(path), encoding=encoding)
    except (Pysubs2Error, UnicodeDecodeError, ValueError) as e:
        logger.warning("Could not load %s with pysubs2: %s", path.name, e)
        return None

    logger.info("Converted %s to ASS (%d events)", path.name, len(subs.events))
    return subs.to_string('ass')


def load_subtitle(path: Path | str, encoding: str | None = None) -> AssSubtitle:
    """
    Load a subtitle file of any supported format.

    Args:
        path: Subtitle file path
        encoding: Force an encoding instead of auto-detecting

    Returns:
        Parsed AssSubtitle; empty when a non-ASS file cannot be read.

    Raises:
        OSError: If the file does not exist or cannot be opened
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Subtitle file not found: {path}")

    if path.suffix.lower() in ASS_SUFFIXES:
        return parse_ass_file(path, encoding=encoding)

    content = convert_to_ass_text(path, encoding=encoding)
    if content is None:
        return AssSubtitle()
    return parse_ass_text(content)
