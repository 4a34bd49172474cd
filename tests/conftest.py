import os
import shutil

import pytest

from inkpress.assets import BUNDLED_ASSETS, template_environment
from inkpress.builders.epub import FONTS
from inkpress.compiler import Block, CompileError, Compiler, close_block, open_block, space, word
from inkpress.errors import CoverError, DocumentReadError
from inkpress.loader import Loader
from inkpress.project import Chapter, Cover, Language, Part, Project, WithParts
from inkpress.writer import Writer


class MemoryLoader(Loader):
    """Loader over dicts; records every document it is asked for."""

    def __init__(self, project=None, documents=None, covers=None):
        self.project = project
        self.documents = documents or {}
        self.covers = covers or {}
        self.loaded = []

    def load_project(self, ident):
        return self.project

    def load_cover(self, ident):
        if ident not in self.covers:
            raise CoverError("no such cover", ident=ident)
        return self.covers[ident]

    def load_document(self, ident):
        self.loaded.append(ident)
        if ident not in self.documents:
            raise DocumentReadError("no such document", ident=ident)
        return self.documents[ident]


class WordsCompiler(Compiler):
    """One story, one paragraph, whitespace-separated words. "FAIL" fails."""

    def compile(self, text, typography):
        if text.startswith("FAIL"):
            raise CompileError("refused")
        events = [open_block(Block.STORY), open_block(Block.PARAGRAPH)]
        for idx, w in enumerate(text.split()):
            if idx:
                events.append(space())
            events.append(word(w))
        events += [close_block(Block.PARAGRAPH), close_block(Block.STORY)]
        return events


class MemoryWriter(Writer):
    """Keeps written files and template contexts in dicts."""

    def __init__(self, templates=None):
        super().__init__(templates or template_environment(BUNDLED_ASSETS))
        self.files = {}
        self.contexts = {}
        self.order = []

    def write_bytes(self, path, data):
        self.files[path] = bytes(data)
        self.order.append(path)

    def write_template(self, path, template, context):
        self.contexts[path] = context
        super().write_template(path, template, context)

    def text(self, path):
        return self.files[path].decode("utf-8")


def make_chapters(sizes, prefix="doc"):
    """Chapters titled "Chapter n", the n-th holding `sizes[n]` documents."""
    chapters = []
    for idx, size in enumerate(sizes):
        docs = tuple(f"{prefix}{idx}-{d}" for d in range(size))
        chapters.append(Chapter(title=f"Chapter {idx}", content=docs))
    return chapters


def make_project(content, language=Language.EN, numbering=False, cover=None,
                 description=None):
    return Project(
        author="Jane Doe",
        title="The Book",
        language=language,
        content=content,
        description=description,
        cover=cover,
        numbering=numbering,
    )


@pytest.fixture
def compiler():
    return WordsCompiler()


@pytest.fixture
def writer():
    return MemoryWriter()


@pytest.fixture
def parts_content():
    """Parts of 2, 3 and 1 chapters, one document each."""
    return WithParts((
        Part("One", tuple(make_chapters([1, 1], prefix="a"))),
        Part("Two", tuple(make_chapters([1, 1, 1], prefix="b"))),
        Part(None, tuple(make_chapters([1], prefix="c"))),
    ))


@pytest.fixture
def assets(tmp_path):
    """Assets directory with the bundled templates and placeholder fonts."""
    root = tmp_path / "assets"
    shutil.copytree(os.path.join(BUNDLED_ASSETS, "templates"), root / "templates")
    (root / "fonts").mkdir()
    for name in FONTS:
        (root / "fonts" / name).write_bytes(f"font:{name}".encode())
    return root


@pytest.fixture
def font_sources(assets):
    return {name: str(assets / "fonts" / name) for name in FONTS}


@pytest.fixture
def png_cover():
    return Cover(extension="png", content=b"\x89PNG\r\n\x1a\nfake")
