"""
Typography compiler interface.

A compiler turns the raw text of one document into a flat stream of
render events, shaped by a locale Typography. Output sinks (see
inkpress.output) consume the stream.

PandocCompiler is the bundled implementation: pandoc parses the
document, and the resulting JSON AST is mapped onto events here.
"""

import json
import re
import subprocess
from abc import ABC, abstractmethod
from collections import namedtuple
from enum import Enum

from inkpress.typography import Space


class Block(Enum):
    EMPHASIS = "emphasis"
    STRONG_EMPHASIS = "strong_emphasis"
    REPLY = "reply"
    DIALOGUE = "dialogue"
    THOUGHT = "thought"
    ASIDE = "aside"
    PARAGRAPH = "paragraph"
    STORY = "story"
    ILLFORMED_INLINE = "illformed_inline"
    ILLFORMED_BLOCK = "illformed_block"


# kind is one of: word, mark, space, illformed, between_dialogue, open, close
#   open:  value = (Block, attr or None)
#   close: value = Block
Event = namedtuple("Event", ["kind", "value"])


def word(text):
    return Event("word", text)


def mark(text):
    return Event("mark", text)


def space(kind=Space.NORMAL):
    return Event("space", kind)


def illformed(text):
    return Event("illformed", text)


def between_dialogue():
    return Event("between_dialogue", None)


def open_block(block, attr=None):
    return Event("open", (block, attr))


def close_block(block):
    return Event("close", block)


class CompileError(Exception):
    """Raised by a compiler that cannot process a document."""
    pass


class Compiler(ABC):

    @abstractmethod
    def compile(self, text, typography):
        """
        Compile one document.

        Returns: list of Event. Raises CompileError.
        """
        ...


# ── Pandoc adapter ─────────────────────────────────────────────────────

TOKEN_RE = re.compile(r"[\w’'-]+|\S")

SPEAKER_SPANS = {
    "dialogue": Block.DIALOGUE,
    "thought": Block.THOUGHT,
    "reply": Block.REPLY,
}


class PandocCompiler(Compiler):
    """
    Compile markdown documents through pandoc's JSON AST.

    Usage:
        compiler = PandocCompiler()
        events = compiler.compile(text, Language.FR.typography)
    """

    def __init__(self, executable="pandoc", from_format="markdown+smart"):
        self.executable = executable
        self.from_format = from_format

    def compile(self, text, typography):
        return self.translate(self.parse(text), typography)

    def parse(self, text):
        """Run pandoc and return the decoded JSON AST."""
        cmd = [self.executable, "--from", self.from_format, "--to", "json"]
        try:
            result = subprocess.run(cmd, input=text, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise CompileError(f"{self.executable} not found") from e

        if result.returncode != 0:
            lines = result.stderr.strip().splitlines()[:20]
            raise CompileError(
                f"{self.executable} failed (exit {result.returncode}): " + " ".join(lines)
            )

        try:
            return json.loads(result.stdout)
        except ValueError as e:
            raise CompileError(f"{self.executable} produced invalid JSON") from e

    def translate(self, ast, typography):
        """Map a pandoc JSON AST onto a render event stream."""
        if not isinstance(ast, dict) or "blocks" not in ast:
            raise CompileError("not a pandoc document")

        emitter = _Emitter(typography)
        emitter.open(Block.STORY)
        for block in ast["blocks"]:
            _block(emitter, block)
        emitter.close(Block.STORY)
        return emitter.events


class _Emitter:
    """Accumulates events and resolves spacing around punctuation."""

    def __init__(self, typography):
        self.typography = typography
        self.events = []
        self.pending = None   # space seen in the source
        self.forced = None    # space imposed by the previous mark

    def _flush(self, before=None):
        sp = before
        if sp is None:
            sp = self.forced if self.forced is not None else self.pending
        if sp is not None and sp is not Space.NONE:
            self.events.append(space(sp))
        self.pending = None
        self.forced = None

    def space(self):
        self.pending = Space.NORMAL

    def text(self, s):
        for token in TOKEN_RE.findall(s):
            if token[0].isalnum() or token[0] == "_":
                self.word(token)
            else:
                self.mark(token)

    def word(self, w):
        self._flush()
        self.events.append(word(w))

    def mark(self, m):
        self._flush(self.typography.space_before(m))
        self.events.append(mark(m))
        self.forced = self.typography.space_after(m)

    def raw(self, s):
        self._flush()
        self.events.append(illformed(s))

    def open(self, block, attr=None):
        if block in (Block.PARAGRAPH, Block.STORY, Block.ASIDE, Block.ILLFORMED_BLOCK):
            self.pending = self.forced = None
        else:
            self._flush()
        self.events.append(open_block(block, attr))

    def close(self, block):
        if block in (Block.PARAGRAPH, Block.STORY, Block.ASIDE, Block.ILLFORMED_BLOCK):
            self.pending = self.forced = None
        self.events.append(close_block(block))


def _stringify(node):
    if isinstance(node, str):
        return node
    if isinstance(node, list):
        return "".join(_stringify(n) for n in node)
    if not isinstance(node, dict):
        return ""
    kind, content = node.get("t"), node.get("c")
    if kind in ("Space", "SoftBreak", "LineBreak"):
        return " "
    if kind in ("Code", "Math", "RawInline", "RawBlock", "CodeBlock"):
        return content[-1]
    if kind in ("Span", "Div", "Link", "Image"):
        return _stringify(content[1])
    return _stringify(content)


def _attr_classes(attr):
    _ident, classes, pairs = attr
    return classes, dict(pairs)


def _block(emitter, node, depth=0):
    kind, content = node.get("t"), node.get("c")

    if kind in ("Para", "Plain"):
        emitter.open(Block.PARAGRAPH)
        _inlines(emitter, content)
        emitter.close(Block.PARAGRAPH)
    elif kind == "HorizontalRule" and depth == 0:
        # only a top-level rule splits the story; nested ones fall through
        emitter.close(Block.STORY)
        emitter.open(Block.STORY)
    elif kind == "BlockQuote":
        emitter.open(Block.ASIDE)
        for child in content:
            _block(emitter, child, depth + 1)
        emitter.close(Block.ASIDE)
    elif kind == "Div":
        classes, _ = _attr_classes(content[0])
        emitter.open(Block.ASIDE, classes[0] if classes else None)
        for child in content[1]:
            _block(emitter, child, depth + 1)
        emitter.close(Block.ASIDE)
    else:
        emitter.open(Block.ILLFORMED_BLOCK)
        emitter.raw(_stringify(node))
        emitter.close(Block.ILLFORMED_BLOCK)


def _inlines(emitter, nodes):
    for node in nodes:
        _inline(emitter, node)


def _inline(emitter, node):
    kind, content = node.get("t"), node.get("c")

    if kind == "Str":
        emitter.text(content)
    elif kind in ("Space", "SoftBreak"):
        emitter.space()
    elif kind == "Emph":
        emitter.open(Block.EMPHASIS)
        _inlines(emitter, content)
        emitter.close(Block.EMPHASIS)
    elif kind == "Strong":
        emitter.open(Block.STRONG_EMPHASIS)
        _inlines(emitter, content)
        emitter.close(Block.STRONG_EMPHASIS)
    elif kind == "Quoted":
        emitter.open(Block.DIALOGUE)
        emitter.mark(emitter.typography.open_quote)
        _inlines(emitter, content[1])
        emitter.mark(emitter.typography.close_quote)
        emitter.close(Block.DIALOGUE)
    elif kind == "Span":
        classes, pairs = _attr_classes(content[0])
        block = next((SPEAKER_SPANS[c] for c in classes if c in SPEAKER_SPANS), None)
        if block is None:
            _inlines(emitter, content[1])
        else:
            emitter.open(block, pairs.get("by"))
            _inlines(emitter, content[1])
            emitter.close(block)
    else:
        emitter.open(Block.ILLFORMED_INLINE)
        emitter.raw(_stringify(node))
        emitter.close(Block.ILLFORMED_INLINE)
