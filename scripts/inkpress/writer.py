"""
Writers: the sinks backends write their output through.

Paths are POSIX-style and relative to the writer's destination (an
archive root or an output directory).

    ZipWriter        — EPUB archive
    DirectoryWriter  — static website directory
"""

import os
import posixpath
import zipfile
from abc import ABC, abstractmethod

from jinja2 import TemplateError

from inkpress.errors import ArchiveWriteError, FileWriteError, TemplateRenderError


class Writer(ABC):
    """
    Abstract sink.

    Subclasses must define:
        write_bytes():  method — store `data` at `path`
    """

    def __init__(self, templates):
        self.templates = templates

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        pass

    @abstractmethod
    def write_bytes(self, path, data):
        ...

    def write_file(self, path, source):
        """Copy the bytes of the file `source` to `path`."""
        try:
            with open(source, "rb") as f:
                data = f.read()
        except OSError as e:
            raise FileWriteError(f"could not read {source} ({e.strerror})", ident=path) from e
        self.write_bytes(path, data)

    def write_template(self, path, template, context):
        """Render the template named `template` with `context` into `path`."""
        try:
            text = self.templates.get_template(template).render(**context)
        except TemplateError as e:
            raise TemplateRenderError(f"could not render {template} ({e})", ident=path) from e
        self.write_bytes(path, text.encode("utf-8"))


class ZipWriter(Writer):
    """
    Writes an archive. A directory entry is added the first time a file
    is written under a new parent directory.
    """

    def __init__(self, path, templates):
        super().__init__(templates)
        self.path = path
        self._dirs = set()
        try:
            self._archive = zipfile.ZipFile(path, "w")
        except OSError as e:
            raise ArchiveWriteError(f"could not create archive ({e.strerror})", ident=path) from e

    def close(self):
        try:
            self._archive.close()
        except OSError as e:
            raise ArchiveWriteError(f"could not finalize archive ({e.strerror})", ident=self.path) from e

    @property
    def directories(self):
        return frozenset(self._dirs)

    def _create_parent(self, path):
        parent = posixpath.dirname(path)
        if parent and parent not in self._dirs:
            try:
                self._archive.writestr(zipfile.ZipInfo(parent + "/"), b"")
            except (OSError, ValueError) as e:
                raise ArchiveWriteError(f"could not create directory {parent}", ident=self.path) from e
            self._dirs.add(parent)

    def write_bytes(self, path, data):
        self._create_parent(path)
        compression = zipfile.ZIP_STORED if path == "mimetype" else zipfile.ZIP_DEFLATED
        try:
            self._archive.writestr(path, data, compress_type=compression)
        except (OSError, ValueError) as e:
            raise ArchiveWriteError(f"could not add {path} to archive", ident=self.path) from e


class DirectoryWriter(Writer):
    """Writes files under the `base` directory, created if missing."""

    def __init__(self, base, templates):
        super().__init__(templates)
        if os.path.exists(base) and not os.path.isdir(base):
            raise FileWriteError("already exists and is not a directory", ident=base)
        try:
            os.makedirs(base, exist_ok=True)
        except OSError as e:
            raise FileWriteError(f"could not create output directory ({e.strerror})", ident=base) from e
        self.base = base

    def write_bytes(self, path, data):
        target = os.path.join(self.base, *path.split("/"))
        try:
            os.makedirs(os.path.dirname(target), exist_ok=True)
            with open(target, "wb") as f:
                f.write(data)
        except OSError as e:
            raise FileWriteError(f"could not write content ({e.strerror})", ident=target) from e
