"""
The manuscript tree.

    Project
      └── content: WithParts(parts)      Part → Chapter → leaf
                 | WithChapters(chapters)        Chapter → leaf

Chapters are generic over their leaf type: a document identifier before
rendering, a rendered Output after. Every node is immutable; mapping over
the leaves always builds a new tree.

The flattened chapter sequence (depth-first, left-to-right) is the index
every backend numbers chapters by, whether or not the tree uses parts.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from enum import Enum
from typing import Generic, Optional, Tuple, TypeVar

from inkpress.typography import ENGLISH, FRENCH

I = TypeVar("I")


class Language(Enum):
    EN = "En"
    FR = "Fr"

    @classmethod
    def parse(cls, value):
        """Accept "En"/"Fr" as well as lowercase codes. Raises ValueError."""
        for lang in cls:
            if value in (lang.value, lang.code):
                return lang
        raise ValueError(f"unknown language {value!r}")

    @property
    def code(self):
        return self.value.lower()

    @property
    def typography(self):
        return _TYPOGRAPHIES[self]


_TYPOGRAPHIES = {
    Language.EN: ENGLISH,
    Language.FR: FRENCH,
}


@dataclass(frozen=True)
class Cover:
    extension: str
    content: bytes


@dataclass(frozen=True)
class Chapter(Generic[I]):
    title: Optional[str]
    content: Tuple[I, ...]

    def map_leaves(self, fn):
        return Chapter(self.title, tuple(fn(leaf) for leaf in self.content))


@dataclass(frozen=True)
class Part(Generic[I]):
    title: Optional[str]
    chapters: Tuple[Chapter[I], ...]

    def map_leaves(self, fn):
        return Part(self.title, tuple(c.map_leaves(fn) for c in self.chapters))


class Content(ABC, Generic[I]):
    """
    Either WithParts or WithChapters, never both, never anything else.

    Consumers branch with `dispatch()` instead of isinstance checks.
    """

    @abstractmethod
    def dispatch(self, on_parts, on_chapters):
        """Call `on_parts(parts)` or `on_chapters(chapters)`."""
        ...

    @abstractmethod
    def flatten(self):
        """The flattened chapter sequence."""
        ...

    @abstractmethod
    def map_leaves(self, fn):
        """Same shape, every leaf replaced by `fn(leaf)`, in document order."""
        ...

    def leaves(self):
        return [leaf for chapter in self.flatten() for leaf in chapter.content]


@dataclass(frozen=True)
class WithParts(Content[I]):
    parts: Tuple[Part[I], ...]

    def dispatch(self, on_parts, on_chapters):
        return on_parts(self.parts)

    def flatten(self):
        return [chapter for part in self.parts for chapter in part.chapters]

    def map_leaves(self, fn):
        return WithParts(tuple(p.map_leaves(fn) for p in self.parts))


@dataclass(frozen=True)
class WithChapters(Content[I]):
    chapters: Tuple[Chapter[I], ...]

    def dispatch(self, on_parts, on_chapters):
        return on_chapters(self.chapters)

    def flatten(self):
        return list(self.chapters)

    def map_leaves(self, fn):
        return WithChapters(tuple(c.map_leaves(fn) for c in self.chapters))


def flatten_chapters(content):
    """All chapters of `content`, depth-first, left-to-right."""
    return content.flatten()


@dataclass(frozen=True)
class Project(Generic[I]):
    author: str
    title: str
    language: Language
    content: Content[I]
    description: Optional[str] = None
    cover: object = None
    numbering: bool = False

    def with_content(self, content, cover=None):
        """A copy carrying rendered content and a resolved cover."""
        return replace(self, content=content, cover=cover)
