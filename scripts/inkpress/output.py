"""
Output sinks: consume a render event stream, accumulate a payload.

    Html       — the markup embedded in chapters by both backends
    WordCount  — number of words, for the word-count report
"""

from markupsafe import escape

from inkpress.compiler import Block
from inkpress.typography import Space


class MalformedStream(ValueError):
    """Raised when open/close events do not nest."""
    pass


class Output:
    """
    Base sink. Subclasses override the hooks they care about; `feed()`
    walks the stream and checks that blocks nest properly.
    """

    def feed(self, events):
        stack = []
        for event in events:
            kind, value = event
            if kind == "open":
                block, attr = value
                stack.append(block)
                self.open(block, attr)
            elif kind == "close":
                if not stack or stack[-1] is not value:
                    raise MalformedStream(f"unexpected end of {value.value}")
                stack.pop()
                self.close(value)
            elif kind == "word":
                self.word(value)
            elif kind == "mark":
                self.mark(value)
            elif kind == "space":
                self.space(value)
            elif kind == "illformed":
                self.illformed(value)
            elif kind == "between_dialogue":
                self.between_dialogue()
            else:
                raise MalformedStream(f"unknown event {kind!r}")
        if stack:
            raise MalformedStream(f"unclosed {stack[-1].value}")
        return self

    def word(self, text):
        pass

    def mark(self, text):
        pass

    def space(self, kind):
        pass

    def illformed(self, text):
        pass

    def between_dialogue(self):
        pass

    def open(self, block, attr):
        pass

    def close(self, block):
        pass


SPACES = {
    Space.NORMAL: " ",
    Space.NBSP: "&#160;",
    Space.NONE: "",
}

# block -> (element, class); class None means a bare element
ELEMENTS = {
    Block.EMPHASIS: ("em", None),
    Block.STRONG_EMPHASIS: ("strong", None),
    Block.REPLY: ("span", "reply"),
    Block.DIALOGUE: ("span", "dialogue"),
    Block.THOUGHT: ("span", "thought"),
    Block.ASIDE: ("div", "aside"),
    Block.PARAGRAPH: ("p", None),
    Block.STORY: ("div", "story"),
    Block.ILLFORMED_INLINE: ("span", "illformed_inline"),
    Block.ILLFORMED_BLOCK: ("div", "illformed_block"),
}


class Html(Output):
    """
    HTML fragment. Templates insert it as-is (it implements __html__).

    Dialogues and thoughts get a `by-AUTHOR` class when the author is
    known; asides get their own class appended.
    """

    def __init__(self):
        self._chunks = []

    def __str__(self):
        return "".join(self._chunks)

    def __html__(self):
        return str(self)

    def __repr__(self):
        return f"Html({str(self)!r})"

    def __eq__(self, other):
        if isinstance(other, Html):
            return str(self) == str(other)
        return NotImplemented

    def word(self, text):
        self._chunks.append(str(escape(text)))

    def mark(self, text):
        self._chunks.append(str(escape(text)))

    def illformed(self, text):
        self._chunks.append(str(escape(text)))

    def space(self, kind):
        self._chunks.append(SPACES[kind])

    def between_dialogue(self):
        self._chunks.append("</p><p>")

    def open(self, block, attr):
        element, cls = ELEMENTS[block]
        if cls is None:
            self._chunks.append(f"<{element}>")
            return
        if attr and block in (Block.DIALOGUE, Block.THOUGHT):
            cls = f"{cls} by-{attr}"
        elif attr and block is Block.ASIDE:
            cls = f"{cls} {attr}"
        self._chunks.append(f'<{element} class="{escape(cls)}">')

    def close(self, block):
        element, _ = ELEMENTS[block]
        self._chunks.append(f"</{element}>")


class WordCount(Output):

    def __init__(self):
        self.words_count = 0

    def word(self, text):
        self.words_count += 1
