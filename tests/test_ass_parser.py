# tests/test_ass_parser.py
# -*- coding: utf-8 -*-
"""
Tests for the section scanner, style table builder and dialogue parser.
"""
import pytest

from asf_core.subtitles import parse_ass_file, parse_ass_text
from asf_core.subtitles.data import RGBA

STYLE_FORMAT = (
    "Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, "
    "BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, ScaleY, Spacing, Angle, "
    "BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, Encoding"
)


def _script(styles: list[str] = (), events: list[str] = ()) -> str:
    lines = ["[V4+ Styles]", STYLE_FORMAT, *styles, "",
             "[Events]",
             "Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text",
             *events]
    return "\n".join(lines)


def test_sample_script_sections(sample_subtitle):
    assert sample_subtitle.script_info["Title"] == "Test Subtitle"
    assert sample_subtitle.script_info["PlayResX"] == "1920"
    assert sample_subtitle.play_res == (1920, 1080)
    # Aegisub garbage section is unknown and ignored
    assert "Video File" not in sample_subtitle.script_info
    assert set(sample_subtitle.styles) == {"Default", "Signs"}
    # Comment: rows are not dialogues
    assert len(sample_subtitle.dialogues) == 4


def test_single_dialogue_example():
    subtitle = parse_ass_text(_script(
        styles=["Style: Default,Arial,20,&H00FFFFFF,&H000000FF,&H00000000,&H00000000,"
                "0,0,0,0,100,100,0,0,1,2,2,2,10,10,10,1"],
        events=["Dialogue: 0,0:00:01.00,0:00:03.00,Default,,0,0,0,,Hello"],
    ))

    assert len(subtitle.dialogues) == 1
    dialogue = subtitle.dialogues[0]
    assert dialogue.start == 1.0
    assert dialogue.end == 3.0
    assert dialogue.text == "Hello"
    assert dialogue.original_text == "Hello"
    assert subtitle.styles["Default"].fontsize == 20


def test_style_fields_decoded(sample_subtitle):
    signs = sample_subtitle.styles["Signs"]
    assert signs.fontname == "Times New Roman"
    assert signs.fontsize == 36
    assert signs.primary_color == RGBA(0, 255, 255, 1.0)
    assert signs.back_color.a == pytest.approx((255 - 0x80) / 255)
    assert signs.bold is True  # -1
    assert signs.italic is False
    assert signs.angle == 5
    assert signs.outline == 3
    assert signs.alignment == 8
    assert (signs.margin_l, signs.margin_r, signs.margin_v) == (20, 20, 30)
    assert signs.encoding == 1


def test_underline_and_strikeout_only_accept_one():
    subtitle = parse_ass_text(_script(styles=[
        "Style: A,Arial,20,&H00FFFFFF,&H000000FF,&H00000000,&H00000000,1,1,-1,-1,100,100,0,0,1,2,2,2,10,10,10,1",
        "Style: B,Arial,20,&H00FFFFFF,&H000000FF,&H00000000,&H00000000,0,0,1,1,100,100,0,0,1,2,2,2,10,10,10,1",
    ]))
    a, b = subtitle.styles["A"], subtitle.styles["B"]
    assert a.bold and a.italic
    assert not a.underline and not a.strike_out
    assert b.underline and b.strike_out


def test_style_with_missing_field_is_dropped():
    subtitle = parse_ass_text(_script(styles=[
        # 22 values for 23 format fields
        "Style: Broken,Arial,20,&H00FFFFFF,&H000000FF,&H00000000,&H00000000,0,0,0,0,100,100,0,0,1,2,2,2,10,10,10",
    ]))
    assert "Broken" not in subtitle.styles
    assert subtitle.styles == {}


def test_duplicate_style_overwrites_earlier():
    subtitle = parse_ass_text(_script(styles=[
        "Style: Dup,Arial,20,&H00FFFFFF,&H000000FF,&H00000000,&H00000000,0,0,0,0,100,100,0,0,1,2,2,2,10,10,10,1",
        "Style: Dup,Verdana,44,&H00FFFFFF,&H000000FF,&H00000000,&H00000000,0,0,0,0,100,100,0,0,1,2,2,2,10,10,10,1",
    ]))
    assert len(subtitle.styles) == 1
    assert subtitle.styles["Dup"].fontname == "Verdana"
    assert subtitle.styles["Dup"].fontsize == 44


def test_style_without_name_is_dropped():
    subtitle = parse_ass_text(_script(styles=[
        "Style: ,Arial,20,&H00FFFFFF,&H000000FF,&H00000000,&H00000000,0,0,0,0,100,100,0,0,1,2,2,2,10,10,10,1",
    ]))
    assert subtitle.styles == {}


def test_style_bad_scalars_fall_back_to_defaults():
    subtitle = parse_ass_text(_script(styles=[
        "Style: Odd,Arial,big,nonsense,&H000000FF,&H00000000,&H00000000,0,0,0,0,wide,,0,0,x,2,2,12,a,b,c,?",
    ]))
    odd = subtitle.styles["Odd"]
    assert odd.fontsize == 20
    assert odd.primary_color == RGBA(255, 255, 255, 1.0)
    assert odd.scale_x == 100 and odd.scale_y == 100
    assert odd.border_style == 1
    assert odd.alignment == 2
    assert (odd.margin_l, odd.margin_r, odd.margin_v) == (0, 0, 0)
    assert odd.encoding == 1


def test_unknown_style_fields_are_ignored():
    script = "\n".join([
        "[V4+ Styles]",
        "Format: Name, Fontsize, Sparkle, PrimaryColor",
        "Style: Custom,30,yes,&H0000FF00",
    ])
    custom = parse_ass_text(script).styles["Custom"]
    assert custom.fontsize == 30
    assert custom.primary_color == RGBA(0, 255, 0, 1.0)


def test_dialogue_text_keeps_commas(sample_subtitle):
    dialogue = sample_subtitle.dialogues[1]
    assert dialogue.text == "Hello, world, with commas"
    assert dialogue.name == "Narrator"
    assert dialogue.end == pytest.approx(8.5)


def test_dialogue_fields_pass_through():
    subtitle = parse_ass_text(_script(events=[
        "Dialogue: 3,0:00:01.00,0:00:02.00,Nowhere,Actor,11,22,33,Scroll up;10;20,Text",
    ]))
    dialogue = subtitle.dialogues[0]
    assert dialogue.layer == 3
    assert dialogue.style == "Nowhere"  # unresolved reference is not an error
    assert subtitle.style_for(dialogue) is None
    assert (dialogue.margin_l, dialogue.margin_r, dialogue.margin_v) == (11, 22, 33)
    assert dialogue.effect == "Scroll up;10;20"


def test_dialogue_override_only_text_is_dropped():
    subtitle = parse_ass_text(_script(events=[
        "Dialogue: 0,0:00:01.00,0:00:02.00,Default,,0,0,0,,{\\fs40}",
        "Dialogue: 0,0:00:01.00,0:00:02.00,Default,,0,0,0,,   ",
    ]))
    assert subtitle.dialogues == []


def test_dialogue_too_few_fields_is_dropped():
    subtitle = parse_ass_text(_script(events=[
        "Dialogue: 0,0:00:01.00,0:00:02.00,Default",
    ]))
    assert subtitle.dialogues == []


def test_dialogue_ending_before_start_is_dropped():
    subtitle = parse_ass_text(_script(events=[
        "Dialogue: 0,0:00:05.00,0:00:02.00,Default,,0,0,0,,Backwards",
    ]))
    assert subtitle.dialogues == []


def test_dialogue_bad_numbers_default_to_zero():
    subtitle = parse_ass_text(_script(events=[
        "Dialogue: top,0:00:01.00,0:00:02.00,Default,,l,r,v,,Text",
    ]))
    dialogue = subtitle.dialogues[0]
    assert dialogue.layer == 0
    assert (dialogue.margin_l, dialogue.margin_r, dialogue.margin_v) == (0, 0, 0)


def test_dialogue_without_format_uses_default_layout():
    script = "[Events]\nDialogue: 0,0:00:01.00,0:00:02.00,Default,,0,0,0,,No format line"
    subtitle = parse_ass_text(script)
    assert subtitle.dialogues[0].text == "No format line"


def test_lines_outside_known_sections_are_ignored():
    script = "\n".join([
        "Dialogue: 0,0:00:01.00,0:00:02.00,Default,,0,0,0,,Before any section",
        "[Fonts]",
        "fontname: something.ttf",
        "Dialogue: 0,0:00:01.00,0:00:02.00,Default,,0,0,0,,In fonts",
        "[Events]",
        "; a comment",
        "",
        "Dialogue: 0,0:00:01.00,0:00:02.00,Default,,0,0,0,,Kept",
    ])
    subtitle = parse_ass_text(script)
    assert [d.text for d in subtitle.dialogues] == ["Kept"]


def test_section_names_and_prefixes_are_case_insensitive():
    script = "\n".join([
        "[SCRIPT INFO]",
        "Title: Shouting",
        "[v4 styles]",
        "format: Name, Fontsize",
        "style: Old,18",
        "[events]",
        "dialogue: 0,0:00:01.00,0:00:02.00,Old,,0,0,0,,lower",
    ])
    subtitle = parse_ass_text(script)
    assert subtitle.script_info["Title"] == "Shouting"
    assert subtitle.styles["Old"].fontsize == 18
    assert subtitle.dialogues[0].text == "lower"


def test_windows_line_endings():
    script = _script(events=["Dialogue: 0,0:00:01.00,0:00:02.00,Default,,0,0,0,,CRLF"]).replace("\n", "\r\n")
    assert parse_ass_text(script).dialogues[0].text == "CRLF"


@pytest.mark.parametrize("separator", ["\u2028", "\u2029", "\x85", "\x0b", "\x0c", "\x1c"])
def test_only_newline_ends_a_line(separator):
    line = f"Dialogue: 0,0:00:01.00,0:00:03.00,Default,,0,0,0,,Hello{separator}World"
    subtitle = parse_ass_text(_script(events=[line]))
    assert len(subtitle.dialogues) == 1
    assert subtitle.dialogues[0].text == f"Hello{separator}World"


def test_style_before_format_line_is_dropped():
    script = "\n".join([
        "[V4+ Styles]",
        "Style: Default,Arial,20,&H00FFFFFF,&H000000FF,&H00000000,&H00000000,0,0,0,0,100,100,0,0,1,2,2,2,10,10,10,1",
        STYLE_FORMAT,
        "Style: Later,Arial,24,&H00FFFFFF,&H000000FF,&H00000000,&H00000000,0,0,0,0,100,100,0,0,1,2,2,2,10,10,10,1",
    ])
    subtitle = parse_ass_text(script)
    assert list(subtitle.styles) == ["Later"]


def test_garbage_input_never_raises():
    for junk in ("", "[", "]", "[]", "\x00\x01", "[Events]\nDialogue:", "[V4+ Styles]\nStyle:"):
        subtitle = parse_ass_text(junk)
        assert subtitle.dialogues == []


def test_parse_ass_file_with_bom(tmp_path, sample_script):
    path = tmp_path / "bom.ass"
    path.write_text(sample_script, encoding="utf-8-sig")
    subtitle = parse_ass_file(path)
    assert subtitle.script_info["Title"] == "Test Subtitle"
    assert len(subtitle.dialogues) == 4


def test_parse_ass_file_utf16(tmp_path, sample_script):
    path = tmp_path / "wide.ass"
    path.write_text(sample_script, encoding="utf-16")
    assert len(parse_ass_file(path).dialogues) == 4


def test_all_parsed_dialogues_are_ordered_in_time(sample_subtitle):
    for dialogue in sample_subtitle.dialogues:
        assert dialogue.start <= dialogue.end
