"""
inkpress — publish a manuscript as an EPUB archive or a static website.

Public API:
    from inkpress.project import Project, WithParts, WithChapters, Part, Chapter
    from inkpress.loader import Loader, FilesystemLoader
    from inkpress.render import render, render_project
    from inkpress.writer import Writer, ZipWriter, DirectoryWriter
    from inkpress.builders import BUILDERS, EpubBuilder, StaticBuilder
    from inkpress.pipeline import build_epub, build_static, list_dependencies, word_count
"""
