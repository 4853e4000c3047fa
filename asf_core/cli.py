from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import AppConfig
from .log_manager import LogManager
from .subtitles import (
    extract_fade,
    extract_move,
    extract_positioning,
    get_active_dialogues,
    get_frame_data_at_time,
    load_subtitle,
    precompute_frames,
)
from .subtitles.data import AssSubtitle


def _summary(subtitle: AssSubtitle) -> dict:
    first, last = subtitle.get_timing_range()
    return {
        "script_info": dict(subtitle.script_info),
        "styles": sorted(subtitle.styles),
        "dialogues": len(subtitle.dialogues),
        "dialogues_per_style": subtitle.get_style_counts(),
        "timing_range": [first, last],
    }


def _active_at(subtitle: AssSubtitle, time_s: float, frame_rate: float) -> dict:
    entries = []
    for dialogue in get_active_dialogues(subtitle, time_s):
        style = subtitle.style_for(dialogue)
        frame = get_frame_data_at_time(dialogue, time_s, style, frame_rate)
        positioning = extract_positioning(dialogue.original_text)
        fade = extract_fade(dialogue.original_text)
        move = extract_move(dialogue.original_text)
        entries.append({
            "layer": dialogue.layer,
            "start": dialogue.start,
            "end": dialogue.end,
            "style": dialogue.style,
            "style_resolved": style is not None,
            "text": dialogue.text,
            "alignment": positioning.alignment or (style.alignment if style else 2),
            "position": [positioning.x, positioning.y] if positioning.has_position else None,
            "fade": [fade.fade_in_ms, fade.fade_out_ms] if fade else None,
            "move": vars(move) if move else None,
            "frame": frame.to_dict(),
        })
    return {"time": time_s, "active": entries}


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Query an ASS script at a playback time")
    p.add_argument("script", type=Path)
    p.add_argument("--time", type=float, help="Playback time in seconds")
    p.add_argument("--frame-rate", type=float, help="Sampling rate (default from settings)")
    p.add_argument("--summary", action="store_true", help="Print script summary instead")
    p.add_argument("--precompute", action="store_true",
                   help="Sample every dialogue up front on the frame_workers pool")
    p.add_argument("--settings", type=Path, help="JSON settings file")
    p.add_argument("--log-file", type=Path)
    p.add_argument("--verbose", action="store_true")
    args = p.parse_args(argv)

    config = AppConfig(args.settings)
    level = "DEBUG" if args.verbose else str(config.get('log_level', 'INFO'))
    log_file = args.log_file
    if log_file is None and config.get('log_file'):
        log_file = Path(config.get('log_file'))

    echo = (lambda m: print(m, file=sys.stderr)) if args.verbose else None
    logger, handler, log = LogManager.setup_session_log("asf_query", level, log_file, echo)

    try:
        try:
            subtitle = load_subtitle(args.script, encoding=config.get('default_encoding') or None)
        except OSError as e:
            log(f"[Error] {e}")
            print(f"error: {e}", file=sys.stderr)
            return 1

        log(f"[Query] {args.script.name}: {len(subtitle.dialogues)} dialogues")

        frame_rate = args.frame_rate if args.frame_rate else config.frame_rate
        sampled = None
        if args.precompute:
            sampled = precompute_frames(subtitle, frame_rate, config.frame_workers)
            log(f"[Frames] Sampled {sampled} dialogues with {config.frame_workers} workers")

        if args.summary or args.time is None:
            output = _summary(subtitle)
        else:
            output = _active_at(subtitle, args.time, frame_rate)
        if sampled is not None:
            output["precomputed"] = sampled

        print(json.dumps(output, indent=2, ensure_ascii=False))
        return 0
    finally:
        LogManager.cleanup_log(logger, handler)


if __name__ == "__main__":
    sys.exit(main())
