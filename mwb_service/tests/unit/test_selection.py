import pytest

from mwb_service.core.errors import StructuralError
from mwb_service.services.program.selection import (
    DocumentSelection,
    LandmarkRole,
    build_christian_living_selections,
    build_field_ministry_selection,
    build_program_groups,
    build_song_selections,
    build_treasures_selections,
)


def test_program_groups_partition_the_page(page_html: str) -> None:
    groups = build_program_groups(DocumentSelection.from_html(page_html))

    assert groups.introduction is groups.songs.starting_song
    assert [song.name for song in groups.songs.songs] == ["h3", "h3", "h3"]
    assert groups.treasures_talk[0]["id"] == "tt8"
    assert [el.name for el in groups.spiritual_gems] == ["h3", "div"]
    assert groups.bible_reading[0].get_text().startswith("3.")
    assert len(groups.field_ministry) == 4
    assert groups.christian_living[0].get_text().startswith("6.")
    assert groups.bible_study[0].get_text().startswith("7.")
    assert len(groups.bible_study) == 2


def test_landmark_must_match_exactly_once(page_html: str) -> None:
    html = page_html.replace(
        '<div class="dc-icon--sheep">', '<div class="dc-icon--wheat"><h2>X</h2></div><div class="dc-icon--sheep">'
    )
    doc = DocumentSelection.from_html(html)

    with pytest.raises(StructuralError, match="got 2"):
        doc.find_one(LandmarkRole.FIELD_MINISTRY_HEADLINE)


def test_headline_needs_a_single_h2(page_html: str) -> None:
    html = page_html.replace("<h2>NUESTRA VIDA CRISTIANA</h2>", "<p>NUESTRA VIDA CRISTIANA</p>")

    with pytest.raises(StructuralError, match="christian_living_headline"):
        build_field_ministry_selection(DocumentSelection.from_html(html))


def test_song_landmarks_must_be_headings(page_html: str) -> None:
    html = page_html.replace(
        '<h3 class="dc-icon--music"><a href="/es/wol/pc/r4/lp-s/202201/0/10">Canción 45</a></h3>',
        '<div class="dc-icon--music"><a href="/es/wol/pc/r4/lp-s/202201/0/10">Canción 45</a></div>',
    )

    with pytest.raises(StructuralError, match="Expected h3, got div"):
        build_song_selections(DocumentSelection.from_html(html))


def test_treasures_requires_four_elements(page_html: str) -> None:
    html = page_html.replace("  <h3>3. Lectura de la Biblia</h3>\n", "")

    with pytest.raises(StructuralError, match="expected 4, got 3"):
        build_treasures_selections(DocumentSelection.from_html(html))


def test_christian_living_and_bible_study_ranges(page_html: str) -> None:
    living = build_christian_living_selections(DocumentSelection.from_html(page_html))

    assert [el.name for el in living.christian_living] == ["h3", "div"]
    assert living.bible_study[0].name == "h3"
    assert living.bible_study[1].find("a").get_text() == "lff lección 1"


def test_building_groups_leaves_the_document_untouched(page_html: str) -> None:
    doc = DocumentSelection.from_html(page_html)
    before = str(doc.document)

    build_program_groups(doc)
    build_program_groups(doc)

    assert str(doc.document) == before
