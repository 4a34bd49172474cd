import zipfile

import pytest
from jinja2 import DictLoader, Environment, StrictUndefined
from jinja2.exceptions import FilterArgumentError

from inkpress.assets import roman_filter, template_environment
from inkpress.errors import FileWriteError, TemplateRenderError
from inkpress.writer import DirectoryWriter, ZipWriter


@pytest.fixture
def templates():
    env = Environment(
        loader=DictLoader({
            "hello.txt": "Hello {{ name }}",
            "number.txt": "{{ n | roman }}",
        }),
        undefined=StrictUndefined,
    )
    env.filters["roman"] = roman_filter
    return env


def directory_entries(path):
    with zipfile.ZipFile(path) as archive:
        return [name for name in archive.namelist() if name.endswith("/")]


def test_zip_creates_each_directory_once(tmp_path, templates):
    target = tmp_path / "book.zip"
    with ZipWriter(str(target), templates) as writer:
        writer.write_bytes("mimetype", b"application/epub+zip")
        writer.write_bytes("OEBPS/Text/0.xhtml", b"a")
        writer.write_bytes("OEBPS/Text/1.xhtml", b"b")
        writer.write_bytes("OEBPS/Text/2.xhtml", b"c")
        writer.write_bytes("OEBPS/content.opf", b"d")
        writer.write_bytes("OEBPS/toc.ncx", b"e")
        assert writer.directories == {"OEBPS/Text", "OEBPS"}

    assert directory_entries(target) == ["OEBPS/Text/", "OEBPS/"]


def test_zip_directory_entry_precedes_its_first_file(tmp_path, templates):
    target = tmp_path / "book.zip"
    with ZipWriter(str(target), templates) as writer:
        writer.write_bytes("META-INF/container.xml", b"<container/>")

    with zipfile.ZipFile(target) as archive:
        assert archive.namelist() == ["META-INF/", "META-INF/container.xml"]


def test_zip_stores_mimetype_uncompressed(tmp_path, templates):
    target = tmp_path / "book.zip"
    with ZipWriter(str(target), templates) as writer:
        writer.write_bytes("mimetype", b"application/epub+zip")
        writer.write_bytes("OEBPS/a.txt", b"x" * 100)

    with zipfile.ZipFile(target) as archive:
        assert archive.namelist()[0] == "mimetype"
        assert archive.getinfo("mimetype").compress_type == zipfile.ZIP_STORED
        assert archive.getinfo("OEBPS/a.txt").compress_type == zipfile.ZIP_DEFLATED
        assert archive.read("mimetype") == b"application/epub+zip"


def test_zip_write_template_and_file(tmp_path, templates):
    source = tmp_path / "font.ttf"
    source.write_bytes(b"\x00\x01font")
    target = tmp_path / "book.zip"

    with ZipWriter(str(target), templates) as writer:
        writer.write_template("a/hello.txt", "hello.txt", {"name": "you"})
        writer.write_file("Fonts/font.ttf", str(source))

    with zipfile.ZipFile(target) as archive:
        assert archive.read("a/hello.txt") == b"Hello you"
        assert archive.read("Fonts/font.ttf") == b"\x00\x01font"


def test_write_file_from_missing_source(tmp_path, templates):
    writer = DirectoryWriter(str(tmp_path / "out"), templates)
    with pytest.raises(FileWriteError):
        writer.write_file("style.css", str(tmp_path / "missing.css"))


def test_template_errors_are_reported(tmp_path, templates):
    writer = DirectoryWriter(str(tmp_path / "out"), templates)

    with pytest.raises(TemplateRenderError):
        writer.write_template("x.txt", "hello.txt", {})
    with pytest.raises(TemplateRenderError):
        writer.write_template("x.txt", "no-such-template.txt", {})


def test_directory_writer_creates_output_directory(tmp_path, templates):
    base = tmp_path / "out"

    writer = DirectoryWriter(str(base), templates)
    writer.write_bytes("index.html", b"<html/>")
    writer.write_template("0.html", "hello.txt", {"name": "there"})

    assert (base / "index.html").read_bytes() == b"<html/>"
    assert (base / "0.html").read_text() == "Hello there"


def test_directory_writer_refuses_a_file(tmp_path, templates):
    target = tmp_path / "out"
    target.write_text("not a directory")
    with pytest.raises(FileWriteError):
        DirectoryWriter(str(target), templates)


@pytest.mark.parametrize("value, expected", [(1, "I"), (4, "IV"), (14, "XIV"), (2024, "MMXXIV")])
def test_roman_filter(tmp_path, templates, value, expected):
    writer = DirectoryWriter(str(tmp_path), templates)
    writer.write_template("n.txt", "number.txt", {"n": value})
    assert (tmp_path / "n.txt").read_text() == expected


@pytest.mark.parametrize("value", [0, -3, "7", 1.5])
def test_roman_filter_rejects_non_positive_integers(tmp_path, templates, value):
    writer = DirectoryWriter(str(tmp_path), templates)
    with pytest.raises(TemplateRenderError):
        writer.write_template("n.txt", "number.txt", {"n": value})


def test_bundled_environment_has_the_roman_filter():
    env = template_environment("/nonexistent")
    assert env.filters["roman"] is roman_filter


@pytest.mark.parametrize("value", [0, -1])
def test_roman_filter_refuses_zero_and_negatives_directly(value):
    with pytest.raises(FilterArgumentError):
        roman_filter(value)
