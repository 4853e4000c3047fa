# tests/conftest.py
from pathlib import Path

import pytest

SAMPLE_SCRIPT = r"""[Script Info]
; Test file
Title: Test Subtitle
ScriptType: v4.00+
WrapStyle: 0
PlayResX: 1920
PlayResY: 1080

[Aegisub Project Garbage]
Last Style Storage: Default
Video File: test.mkv

[V4+ Styles]
Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, ScaleY, Spacing, Angle, BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, Encoding
Style: Default,Arial,20,&H00FFFFFF,&H000000FF,&H00000000,&H00000000,0,0,0,0,100,100,0,0,1,2,2,2,10,10,10,1
Style: Signs,Times New Roman,36,&H00FFFF00,&H000000FF,&H00000000,&H80000000,-1,0,0,0,100,100,0,5,1,3,1,8,20,20,30,1

[Events]
Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text
Dialogue: 0,0:00:01.00,0:00:03.00,Default,,0,0,0,,Hello
Dialogue: 0,0:00:05.00,0:00:08.50,Default,Narrator,0,0,0,,Hello, world, with commas
Comment: 0,0:00:10.00,0:00:12.00,Default,,0,0,0,,This is a comment.
Dialogue: 1,0:00:15.00,0:00:17.00,Signs,,0,0,0,,{\pos(100,200)\c&H00FF00&}Sign {\fs40}text
Dialogue: 0,0:00:20.00,0:00:22.00,Default,,0,0,0,,{\t(0,1000,\fs40)}Grow
"""


@pytest.fixture
def sample_script() -> str:
    return SAMPLE_SCRIPT


@pytest.fixture
def sample_subtitle(sample_script):
    from asf_core.subtitles import parse_ass_text
    return parse_ass_text(sample_script)


@pytest.fixture
def script_file(tmp_path: Path, sample_script) -> Path:
    path = tmp_path / "sample.ass"
    path.write_text(sample_script, encoding="utf-8")
    return path


@pytest.fixture
def make_dialogue():
    """Build a single parsed dialogue from its Text field."""
    from asf_core.subtitles.parsers.ass_parser import DEFAULT_EVENTS_FORMAT, build_dialogue

    def _make(text: str, start: str = "0:00:00.00", end: str = "0:00:02.00"):
        values = f"0,{start},{end},Default,,0,0,0,,{text}".split(",")
        return build_dialogue(DEFAULT_EVENTS_FORMAT, values)

    return _make
