from __future__ import annotations

import pytest

from domain.score import (
    DiatonicPitch,
    Document,
    MusicLength,
    Note,
    PlayableLength,
    Rest,
    Voice,
    tie_notes,
)


QUARTER = PlayableLength(MusicLength.QUARTER)


def test_dotted_lengths_add_halves() -> None:
    assert PlayableLength(MusicLength.HALF).time_length == 512
    assert PlayableLength(MusicLength.HALF, 1).time_length == 768
    assert PlayableLength(MusicLength.HALF, 2).time_length == 896
    assert PlayableLength(MusicLength.QUARTER, 3).describe() == "quarter..."


def test_lengths_reject_impossible_dots() -> None:
    with pytest.raises(ValueError):
        PlayableLength(MusicLength.HUNDRED_TWENTY_EIGHTH, 4)
    with pytest.raises(ValueError):
        PlayableLength(MusicLength.QUARTER, -1)
    with pytest.raises(ValueError):
        PlayableLength(300)  # type: ignore[arg-type]


def test_diatonic_pitch_helpers() -> None:
    pitch = DiatonicPitch(note_name=33, accs=1)
    assert pitch.step == "A"
    assert pitch.octave == 4
    assert pitch.to_midi() == 70
    assert pitch.describe() == "A#4"
    assert DiatonicPitch(30, -1).describe() == "Eb4"


def test_voice_append_keeps_elements_contiguous() -> None:
    voice = Voice()
    rest = voice.append(Rest(QUARTER))
    note = voice.append(Note(DiatonicPitch(28), PlayableLength(MusicLength.HALF)))
    assert (rest.time_start, note.time_start) == (0, 256)
    assert voice.time_end == 768
    assert voice.rests() == [rest]
    assert voice.notes() == [note]
    assert len(voice) == 2


def test_tie_requires_same_pitch_and_adjacency() -> None:
    voice = Voice()
    first = voice.append(Note(DiatonicPitch(28), QUARTER))
    second = voice.append(Note(DiatonicPitch(28), QUARTER))
    tie = tie_notes(first, second)
    assert first.tie_start is tie and second.tie_end is tie

    other = voice.append(Note(DiatonicPitch(29), QUARTER))
    with pytest.raises(ValueError):
        tie_notes(second, other)
    with pytest.raises(ValueError):
        tie_notes(first, Note(DiatonicPitch(28), QUARTER, time_start=1024))


def test_document_builds_nested_structure() -> None:
    document = Document(title="Song")
    sheet = document.add_sheet("main")
    staff = sheet.add_staff("lead")
    staff.add_voice("v1")
    assert document.sheets[0].staffs[0].voices[0].name == "v1"
    assert staff.number_of_lines == 5


def test_package_exports_step_names_used_for_pitch_spelling() -> None:
    import domain.score as score
    from score_tools.pitch import midi_to_diatonic_pitch

    assert "STEP_NAMES" in score.__all__
    assert score.STEP_NAMES[midi_to_diatonic_pitch(62).note_name % 7] == "D"
