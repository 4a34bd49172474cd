import pytest

from inkpress.project import (
    Chapter,
    Language,
    Part,
    WithChapters,
    WithParts,
    flatten_chapters,
)
from inkpress.typography import ENGLISH, FRENCH

from conftest import make_chapters


def test_flatten_with_chapters_returns_them_as_is():
    chapters = make_chapters([1, 2, 3])
    assert flatten_chapters(WithChapters(tuple(chapters))) == chapters


def test_flatten_with_parts_concatenates_in_part_order(parts_content):
    titles = [(c.content[0]) for c in flatten_chapters(parts_content)]
    assert titles == ["a0-0", "a1-0", "b0-0", "b1-0", "b2-0", "c0-0"]


def test_flatten_is_identical_for_equivalent_trees():
    chapters = make_chapters([2, 1, 3])
    flat = WithChapters(tuple(chapters))
    grouped = WithParts((
        Part("First", tuple(chapters[:1])),
        Part("Rest", tuple(chapters[1:])),
    ))
    assert flatten_chapters(flat) == flatten_chapters(grouped)


def test_leaves_follow_document_order(parts_content):
    assert parts_content.leaves() == ["a0-0", "a1-0", "b0-0", "b1-0", "b2-0", "c0-0"]


def test_map_leaves_preserves_shape_and_titles(parts_content):
    mapped = parts_content.map_leaves(len)

    assert isinstance(mapped, WithParts)
    assert [p.title for p in mapped.parts] == ["One", "Two", None]
    assert [len(p.chapters) for p in mapped.parts] == [2, 3, 1]
    assert mapped.leaves() == [4, 4, 4, 4, 4, 4]


def test_map_leaves_builds_a_new_tree():
    chapter = Chapter("Title", ("x", "y"))
    content = WithChapters((chapter,))

    mapped = content.map_leaves(str.upper)

    assert mapped.chapters[0].content == ("X", "Y")
    assert content.chapters[0].content == ("x", "y")


def test_dispatch_calls_the_matching_branch(parts_content):
    chapters = WithChapters(tuple(make_chapters([1])))

    assert parts_content.dispatch(lambda p: "parts", lambda c: "chapters") == "parts"
    assert chapters.dispatch(lambda p: "parts", lambda c: "chapters") == "chapters"


def test_empty_parts_contribute_no_chapters():
    content = WithParts((Part("Empty", ()), Part("Full", tuple(make_chapters([1])))))
    assert len(flatten_chapters(content)) == 1


@pytest.mark.parametrize("value, expected", [
    ("En", Language.EN),
    ("en", Language.EN),
    ("Fr", Language.FR),
    ("fr", Language.FR),
])
def test_language_parse(value, expected):
    assert Language.parse(value) is expected


def test_language_parse_rejects_unknown_locale():
    with pytest.raises(ValueError):
        Language.parse("De")


def test_language_maps_to_typography():
    assert Language.EN.typography is ENGLISH
    assert Language.FR.typography is FRENCH
    assert Language.FR.code == "fr"
