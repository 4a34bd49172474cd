"""
Build entry points.

Each function takes a project root (the directory holding Book.toml or
book.yaml) and runs one action end to end:

    build_epub(root)             Book.epub
    build_static(root)           out/
    list_dependencies(root)      every document, in reading order
    word_count(root)             words per part / chapter

Errors are never caught here; callers get the BuildError of the step
that failed.
"""

import os
from dataclasses import dataclass, field

from inkpress.assets import assets_dir, resolve_artifact, template_dir, template_environment
from inkpress.builders import EpubBuilder, StaticBuilder
from inkpress.builders.epub import FONTS
from inkpress.compiler import PandocCompiler
from inkpress.loader import FilesystemLoader
from inkpress.output import Html, WordCount
from inkpress.render import render_project
from inkpress.writer import DirectoryWriter, ZipWriter


def load_and_render(root, loader=None, compiler=None, output=Html, jobs=1):
    """Load the project at `root` and render every document with `output`."""
    loader = loader or FilesystemLoader()
    compiler = compiler or PandocCompiler()
    project = loader.load_project(root)
    return render_project(project, loader, compiler, output_factory=output, jobs=jobs)


def build_epub(root, output_file="Book.epub", assets=None, loader=None,
               compiler=None, jobs=1, verbose=False):
    """Render the project at `root` into an EPUB archive."""
    project = load_and_render(root, loader, compiler, jobs=jobs)
    assets = assets_dir(assets)

    font_sources = {}
    for name in FONTS:
        path = resolve_artifact(os.path.join("fonts", name), root, assets)
        if path:
            font_sources[name] = path

    with ZipWriter(output_file, template_environment(assets)) as writer:
        EpubBuilder(project, writer, font_sources=font_sources, verbose=verbose).build()

    print(f"  ✓ {output_file}")
    return output_file


def build_static(root, output_dir="out", body_only=False, assets=None,
                 loader=None, compiler=None, jobs=1, verbose=False):
    """Render the project at `root` into a static website."""
    project = load_and_render(root, loader, compiler, jobs=jobs)
    assets = assets_dir(assets)
    stylesheet = os.path.join(template_dir(assets), "static", "style.css")

    with DirectoryWriter(output_dir, template_environment(assets)) as writer:
        StaticBuilder(
            project,
            writer,
            body_only=body_only,
            stylesheet=stylesheet,
            verbose=verbose,
        ).build()

    print(f"  ✓ {output_dir}")
    return output_dir


def list_dependencies(root, loader=None):
    """Every document id of the project, in document order."""
    loader = loader or FilesystemLoader()
    project = loader.load_project(root)
    return project.content.leaves()


# ── Word count ─────────────────────────────────────────────────────────


@dataclass
class CountEntry:
    label: str
    count: int
    depth: int = 0


@dataclass
class WordCountReport:
    entries: list = field(default_factory=list)
    total: int = 0

    def lines(self):
        lines = [f"{'  ' * e.depth}{e.label} ({e.count})" for e in self.entries]
        lines.append(f"Total: {self.total}")
        return lines


def _label(kind, idx, title):
    return f"{idx}. {title}" if title else f"{kind} {idx}"


def _chapter_words(chapter):
    return sum(doc.words_count for doc in chapter.content)


def word_count(root, loader=None, compiler=None, jobs=1):
    """
    Count the words of the project at `root`.

    Chapters are numbered from 1 along the flattened sequence; with parts,
    each part is listed with its total and its chapters indented below.
    """
    project = load_and_render(root, loader, compiler, output=WordCount, jobs=jobs)
    report = WordCountReport()

    def on_parts(parts):
        chapter_idx = 1
        for idx, part in enumerate(parts, start=1):
            counts = [_chapter_words(c) for c in part.chapters]
            report.entries.append(CountEntry(_label("Part", idx, part.title), sum(counts)))
            for chapter, count in zip(part.chapters, counts):
                report.entries.append(
                    CountEntry(_label("Chapter", chapter_idx, chapter.title), count, depth=1)
                )
                chapter_idx += 1

    def on_chapters(chapters):
        for idx, chapter in enumerate(chapters, start=1):
            report.entries.append(
                CountEntry(_label("Chapter", idx, chapter.title), _chapter_words(chapter))
            )

    project.content.dispatch(on_parts, on_chapters)
    report.total = sum(_chapter_words(c) for c in project.content.flatten())

    for line in report.lines():
        print(line)
    return report
