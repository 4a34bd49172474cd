"""
Locale typography rules.

A Typography tells the compiler which space goes around a punctuation
mark and which quotation marks open and close a dialogue.
"""

from dataclasses import dataclass, field
from enum import Enum


class Space(Enum):
    NORMAL = "normal"
    NBSP = "nbsp"
    NONE = "none"


@dataclass(frozen=True)
class Typography:
    name: str
    open_quote: str
    close_quote: str
    # mark -> space forced before / after it; marks not listed keep
    # whatever space the source had
    before: dict = field(default_factory=dict)
    after: dict = field(default_factory=dict)

    def space_before(self, mark):
        return self.before.get(mark)

    def space_after(self, mark):
        return self.after.get(mark)


ENGLISH = Typography(
    name="english",
    open_quote="“",
    close_quote="”",
    before={
        ",": Space.NONE,
        ".": Space.NONE,
        ";": Space.NONE,
        ":": Space.NONE,
        "!": Space.NONE,
        "?": Space.NONE,
        "…": Space.NONE,
        "”": Space.NONE,
    },
    after={
        "“": Space.NONE,
    },
)

FRENCH = Typography(
    name="french",
    open_quote="«",
    close_quote="»",
    before={
        ",": Space.NONE,
        ".": Space.NONE,
        "…": Space.NONE,
        ";": Space.NBSP,
        ":": Space.NBSP,
        "!": Space.NBSP,
        "?": Space.NBSP,
        "»": Space.NBSP,
    },
    after={
        "«": Space.NBSP,
    },
)
