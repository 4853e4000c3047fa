# tests/test_query.py
from asf_core.subtitles import get_active_dialogues, get_active_with_styles


def _texts(dialogues):
    return [d.text for d in dialogues]


def test_active_window_is_inclusive(sample_subtitle):
    assert _texts(get_active_dialogues(sample_subtitle, 1.0)) == ["Hello"]
    assert _texts(get_active_dialogues(sample_subtitle, 3.0)) == ["Hello"]
    assert get_active_dialogues(sample_subtitle, 3.01) == []
    assert get_active_dialogues(sample_subtitle, 0.99) == []


def test_gap_and_comment_rows_are_inactive(sample_subtitle):
    assert get_active_dialogues(sample_subtitle, 4.0) == []
    assert get_active_dialogues(sample_subtitle, 11.0) == []


def test_overlap_keeps_file_order(make_dialogue):
    from asf_core.subtitles.data import AssSubtitle

    subtitle = AssSubtitle(dialogues=[
        make_dialogue("late", start="0:00:02.00", end="0:00:06.00"),
        make_dialogue("early", start="0:00:00.00", end="0:00:05.00"),
        make_dialogue("gone", start="0:00:00.00", end="0:00:01.00"),
    ])
    assert _texts(get_active_dialogues(subtitle, 4.0)) == ["late", "early"]


def test_active_with_styles(sample_subtitle):
    sample_subtitle.dialogues[0].style = "Missing"
    pairs = get_active_with_styles(sample_subtitle, 2.0)
    assert len(pairs) == 1
    dialogue, style = pairs[0]
    assert dialogue.text == "Hello"
    assert style is None

    (dialogue, style), = get_active_with_styles(sample_subtitle, 16.0)
    assert style.name == "Signs"
    assert style.alignment == 8


def test_dialogue_active_helper(make_dialogue):
    dialogue = make_dialogue("x", start="0:00:01.00", end="0:00:02.00")
    assert dialogue.is_active_at(1.0)
    assert dialogue.is_active_at(2.0)
    assert not dialogue.is_active_at(2.01)


def test_style_lookup_helpers(sample_subtitle):
    assert sample_subtitle.get_style("Signs").fontsize == 36
    assert sample_subtitle.get_style("Missing") is None
    signs_dialogue = next(d for d in sample_subtitle.dialogues if d.style == "Signs")
    assert sample_subtitle.style_for(signs_dialogue) is sample_subtitle.get_style("Signs")
