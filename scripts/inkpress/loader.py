"""
Loaders resolve a project, its cover and its documents from opaque ids.

The core only relies on the Loader interface. FilesystemLoader is the
implementation used by the build pipeline: ids are absolute paths.
"""

import os
from abc import ABC, abstractmethod

from inkpress.config import load_descriptor
from inkpress.errors import CoverError, DescriptorParseError, DocumentReadError
from inkpress.project import (
    Chapter,
    Cover,
    Language,
    Part,
    Project,
    WithChapters,
    WithParts,
)


class Loader(ABC):

    @abstractmethod
    def load_project(self, ident):
        """Project whose cover and leaves are still unresolved ids."""
        ...

    @abstractmethod
    def load_cover(self, ident):
        """Cover. Raises CoverError."""
        ...

    @abstractmethod
    def load_document(self, ident):
        """Raw text of a document. Raises DocumentReadError."""
        ...


class FilesystemLoader(Loader):
    """
    Reads Book.toml / book.yaml from a project root.

    Relative paths in the descriptor are resolved against the root once,
    at load time, so later changes of working directory do not matter.
    """

    def load_project(self, ident):
        root = os.path.abspath(ident)
        data = load_descriptor(root)

        try:
            language = Language.parse(data["language"])
        except ValueError as e:
            raise DescriptorParseError(str(e), ident=root) from e

        if "parts" in data:
            content = WithParts(tuple(
                _part(p, root) for p in _table_list(data["parts"], "parts", root)
            ))
        else:
            content = WithChapters(tuple(
                _chapter(c, root)
                for c in _table_list(data["chapters"], "chapters", root)
            ))

        cover = data["cover"]
        if cover is not None and not isinstance(cover, str):
            raise DescriptorParseError("cover must be a path", ident=root)

        return Project(
            author=data["author"],
            title=data["title"],
            language=language,
            content=content,
            description=data["description"],
            cover=_absolute(cover, root) if cover else None,
            numbering=data["numbering"],
        )

    def load_cover(self, ident):
        extension = os.path.splitext(ident)[1][1:]
        if not extension:
            raise CoverError("cover lacks an extension", ident=ident)

        try:
            with open(ident, "rb") as f:
                content = f.read()
        except OSError as e:
            raise CoverError(f"could not read cover ({e.strerror})", ident=ident) from e

        return Cover(extension=extension, content=content)

    def load_document(self, ident):
        try:
            with open(ident, encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            raise DocumentReadError(f"could not read ({e.strerror})", ident=ident) from e
        except UnicodeDecodeError as e:
            raise DocumentReadError("not valid UTF-8", ident=ident) from e


# ── Descriptor → tree ──────────────────────────────────────────────────


def _absolute(path, root):
    return os.path.abspath(os.path.join(root, path))


def _table_list(value, key, root):
    if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
        raise DescriptorParseError(f"'{key}' must be a list of tables", ident=root)
    return value


def _title(table, root):
    title = table.get("title")
    if title is not None and not isinstance(title, str):
        raise DescriptorParseError("titles must be strings", ident=root)
    return title


def _chapter(table, root):
    documents = table.get("content", [])
    if not isinstance(documents, list) or not all(isinstance(d, str) for d in documents):
        raise DescriptorParseError(
            "chapter content must be a list of document paths", ident=root
        )
    return Chapter(
        title=_title(table, root),
        content=tuple(_absolute(d, root) for d in documents),
    )


def _part(table, root):
    chapters = _table_list(table.get("chapters", []), "chapters", root)
    return Part(
        title=_title(table, root),
        chapters=tuple(_chapter(c, root) for c in chapters),
    )
