import pytest
from bs4 import BeautifulSoup

from mwb_service.core.errors import FormatError, InputError, RetrievalError, StructuralError
from mwb_service.services.program.models import WeeklyProgram
from mwb_service.services.program.selection import DocumentSelection, build_program_groups

from .fixtures import PUB_PATH, item


@pytest.mark.anyio
async def test_week_date_span_is_lower_cased(scraper) -> None:
    result = await scraper.extract_week_date_span(html='<div id="p1">WEEK 1: 2022-01-01 - 2022-01-07</div>')

    assert result.ok
    assert result.value == "week 1: 2022-01-01 - 2022-01-07"


@pytest.mark.anyio
async def test_missing_input_is_an_input_error(scraper) -> None:
    result = await scraper.extract_week_date_span()

    assert not result.ok
    assert isinstance(result.error, InputError)


@pytest.mark.anyio
async def test_songs(scraper, page_html) -> None:
    result = await scraper.extract_songs(html=page_html)

    assert result.ok
    starting, middle, closing = result.value
    assert [starting.song_number, middle.song_number, closing.song_number] == [1, 45, 100]
    assert starting.title == "Jehová, mi Roca"
    assert starting.theme_scripture == "Salmo 62:6"
    assert middle.lyrics == "Letra de la canción 45"
    assert closing.closing_reference == "Vea también 1 Ped 4:9"


@pytest.mark.anyio
async def test_treasures_talk_footnotes(scraper, page_html) -> None:
    result = await scraper.extract_treasures_talk(html=page_html)

    assert result.ok
    talk = result.value
    assert talk.section_number == 1
    assert talk.time_box_minutes == 10
    assert talk.heading == "1. “Proclamen un año de buena voluntad”"
    assert [point.text for point in talk.points] == [
        "Jehová libera a los oprimidos (Is 58:6[^1]).",
        "Su pueblo disfruta de paz (w14 15/1 12[^2]; w20.07 5[^3]).",
    ]
    referenced = [i for point in talk.points for i in point.footnote_ids]
    assert referenced == [1, 2, 3]
    assert set(talk.footnotes) == set(referenced)
    assert talk.footnotes[1] == "¿No es este el ayuno que yo quiero?"
    assert talk.footnotes[3] == "La paz viene de Dios."


@pytest.mark.anyio
async def test_spiritual_gems(scraper, page_html) -> None:
    result = await scraper.extract_spiritual_gems(html=page_html)

    assert result.ok
    gems = result.value
    assert gems.section_number == 2
    assert gems.time_box_minutes == 10
    assert gems.printed_question.question == "¿Con quién habita Jehová?"
    assert gems.printed_question.scripture_mnemonic == "Is 57:15"
    assert gems.printed_question.scripture_text == "Habito con el quebrantado."
    assert [(a.mnemonic, a.text) for a in gems.printed_question.answer_sources] == [
        ("w05 15/10 26", "Jehová está cerca de los humildes.")
    ]
    assert gems.open_ended_question == "¿Qué perlas espirituales ha encontrado?"


@pytest.mark.anyio
async def test_spiritual_gems_needs_one_scripture_anchor(scraper, page_html) -> None:
    html = page_html.replace(f'<a href="/es{PUB_PATH}/6">', f'<a class="b" href="/es{PUB_PATH}/6">')

    result = await scraper.extract_spiritual_gems(html=html)

    assert not result.ok
    assert isinstance(result.error, StructuralError)


@pytest.mark.anyio
async def test_bible_reading(scraper, page_html) -> None:
    result = await scraper.extract_bible_reading(html=page_html)

    assert result.ok
    reading = result.value
    assert reading.section_number == 3
    assert reading.time_box_minutes == 4
    assert reading.scripture_mnemonic == "Is 58:1-14"
    assert reading.scripture_text == "Clama a voz en cuello."
    assert reading.study_point.mnemonic == "th lección 10"
    assert reading.study_point.text == "Lea con exactitud\nSegunda línea"


@pytest.mark.anyio
async def test_weekly_bible_read_range(scraper, page_html) -> None:
    result = await scraper.extract_weekly_bible_read(html=page_html)

    assert result.ok
    reading = result.value
    assert reading.book_name == "Isaías"
    assert reading.book_number == 23
    assert (reading.first_chapter, reading.last_chapter) == (58, 59)
    assert reading.links == [
        "https://wol.jw.org/es/wol/b/r4/lp-s/nwtsty/23/58",
        "https://wol.jw.org/es/wol/b/r4/lp-s/nwtsty/23/59",
    ]
    assert len(reading.links) == reading.last_chapter - reading.first_chapter + 1


@pytest.mark.anyio
async def test_weekly_bible_read_widens_bounds_sequentially(scraper, payloads, requested) -> None:
    payloads["/wol/bc/r4/lp-s/202201/0/9"] = {
        "items": [
            {
                "content": "<p>Isaías 60</p>",
                "articleClasses": "pub-nwtsty",
                "caption": "Isaías 60:1-22",
                "book": 23,
                "first_chapter": 57,
                "last_chapter": 60,
                "url": "/wol/b/r4/lp-s/nwtsty/23/60",
            }
        ]
    }
    html = (
        '<h2 id="p2"><a href="/es/wol/bc/r4/lp-s/202201/0/0">ISAÍAS 58, 59</a>'
        '<a href="/es/wol/bc/r4/lp-s/202201/0/9">60</a></h2>'
    )

    result = await scraper.extract_weekly_bible_read(html=html)

    assert result.ok
    assert (result.value.first_chapter, result.value.last_chapter) == (57, 60)
    assert len(result.value.links) == 4
    assert result.value.links[0].endswith("/23/57")
    assert requested == ["/wol/bc/r4/lp-s/202201/0/0", "/wol/bc/r4/lp-s/202201/0/9"]


@pytest.mark.anyio
async def test_weekly_bible_read_rejects_non_scripture(scraper, payloads, page_html) -> None:
    payloads["/wol/bc/r4/lp-s/202201/0/0"] = {"items": [{"content": "<p>x</p>", "articleClasses": "pub-w"}]}

    result = await scraper.extract_weekly_bible_read(html=page_html)

    assert not result.ok
    assert isinstance(result.error, StructuralError)
    assert "Unexpected anchor reference data" in result.message



def _reading_item(**overrides):
    fields = {
        "caption": "Isaías 58:1–59:21",
        "book": 23,
        "first_chapter": 58,
        "last_chapter": 59,
        "url": "/wol/b/r4/lp-s/nwtsty/23/58",
    }
    fields.update(overrides)
    return item("<p>Isaías 58, 59</p>", "bibleCitation pub-nwtsty", **{k: v for k, v in fields.items() if v is not None})


@pytest.mark.anyio
@pytest.mark.parametrize(
    "overrides",
    [
        {"url": None},
        {"url": ""},
        {"url": "58"},
        {"url": "/wol/d/r4/lp-s/2022480"},
        {"caption": None},
        {"caption": "   "},
    ],
)
async def test_weekly_bible_read_requires_url_and_caption(scraper, payloads, page_html, overrides) -> None:
    payloads["/wol/bc/r4/lp-s/202201/0/0"] = _reading_item(**overrides)

    result = await scraper.extract_weekly_bible_read(html=page_html)

    assert not result.ok
    assert isinstance(result.error, FormatError)

@pytest.mark.anyio
async def test_field_ministry(scraper, page_html) -> None:
    result = await scraper.extract_field_ministry(html=page_html)

    assert result.ok
    student, talk = result.value
    assert (student.section_number, talk.section_number) == (4, 5)
    assert student.is_student_task
    assert student.headline == "Empiece conversaciones"
    assert student.time_box_minutes == 3
    assert student.body == "De casa en casa. Use la sugerencia."
    assert student.study_point.mnemonic == "lmd lección 1 punto 3"
    assert student.study_point.text == "Sea natural\nSegunda línea"
    assert not talk.is_student_task
    assert talk.study_point is None
    assert talk.time_box_minutes == 5
    assert talk.body == "(5 min.) Discurso a cargo de un anciano."


@pytest.mark.anyio
async def test_christian_living(scraper, page_html) -> None:
    result = await scraper.extract_christian_living(html=page_html)

    assert result.ok
    [section] = result.value
    assert section.section_number == 6
    assert section.time_box_minutes == 15
    assert section.body == "Análisis con el auditorio."


@pytest.mark.anyio
async def test_bible_study(scraper, page_html) -> None:
    result = await scraper.extract_bible_study(html=page_html)

    assert result.ok
    study = result.value
    assert study.section_number == 7
    assert study.time_box_minutes == 30
    assert study.body.startswith("7. Estudio bíblico de la congregación")
    assert study.references == ["https://wol.jw.org/es/wol/d/r4/lp-s/1102023301"]


@pytest.mark.anyio
async def test_section_accepts_prebuilt_selection(scraper, page_html) -> None:
    groups = build_program_groups(DocumentSelection.from_html(page_html))

    result = await scraper.extract_bible_reading(selection=groups.bible_reading)

    assert result.ok
    assert result.value.section_number == 3


@pytest.mark.anyio
async def test_missing_time_box_is_a_format_error(scraper, page_html) -> None:
    html = page_html.replace('<p class="du-color--textSubdued">(15 mins.)</p>', '<p class="du-color--textSubdued">pronto</p>')

    result = await scraper.extract_christian_living(html=html)

    assert not result.ok
    assert isinstance(result.error, FormatError)


@pytest.mark.anyio
async def test_full_program(scraper, page_html) -> None:
    result = await scraper.extract_full_program(html=page_html)

    assert result.ok
    program = result.value
    assert isinstance(program, WeeklyProgram)
    assert program.week_date_span == "week 1: 2022-01-01 - 2022-01-07"
    assert program.middle_song.song_number == 45
    assert program.weekly_bible_read.book_number == 23
    numbers = [
        program.treasures_talk.section_number,
        program.spiritual_gems.section_number,
        program.bible_reading.section_number,
        *(item.section_number for item in program.field_ministry_items),
        *(item.section_number for item in program.christian_living_items),
        program.bible_study.section_number,
    ]
    assert numbers == sorted(numbers) == [1, 2, 3, 4, 5, 6, 7]
    for item in program.field_ministry_items:
        assert (item.study_point is not None) == item.is_student_task

    dumped = program.model_dump(by_alias=True)
    assert set(dumped) >= {"weekDateSpan", "startingSong", "treasuresTalk", "fieldMinistryItems", "bibleStudy"}
    assert dumped["treasuresTalk"]["points"][0]["footnoteIds"] == [1]


@pytest.mark.anyio
async def test_full_program_is_idempotent_and_leaves_document_untouched(scraper, page_html) -> None:
    document = BeautifulSoup(page_html, "html.parser")
    before = str(document)

    first = await scraper.extract_full_program(document=document)
    second = await scraper.extract_full_program(document=document)

    assert first.ok and second.ok
    assert first.value == second.value
    assert str(document) == before


@pytest.mark.anyio
async def test_full_program_fails_when_any_reference_fails(scraper, payloads, page_html) -> None:
    del payloads[f"{PUB_PATH}/4"]

    result = await scraper.extract_full_program(html=page_html)

    assert not result.ok
    assert isinstance(result.error, RetrievalError)
    assert result.error.url == f"https://wol.jw.org{PUB_PATH}/4"


@pytest.mark.anyio
async def test_full_program_reports_structural_drift(scraper, page_html) -> None:
    html = page_html.replace('<div class="dc-icon--wheat"><h2>SEAMOS MEJORES MAESTROS</h2></div>', "")

    result = await scraper.extract_full_program(html=html)

    assert not result.ok
    assert result.kind == "structural"
