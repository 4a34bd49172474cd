"""
Static website builder.

Output layout:

    index.html            table of contents
    p{p}.html             one page per part (only when the book has parts)
    {i}.html              one page per chapter, i = global chapter index
    style.css             unless body-only

Chapter pages link to the neighbouring parts only; there is no
chapter-to-chapter navigation.
"""

from inkpress.builders.base import BaseBuilder
from inkpress.errors import FileWriteError


def _toc_entries(chapters, offset):
    return [
        {"index": offset + idx, "title": chapter.title}
        for idx, chapter in enumerate(chapters)
    ]


class StaticBuilder(BaseBuilder):
    """
    Usage:
        writer = DirectoryWriter("out", templates)
        StaticBuilder(project, writer, stylesheet=css_path).build()
    """

    format_name = "static website"

    def __init__(self, project, writer, body_only=False, stylesheet=None, **kwargs):
        super().__init__(project, writer, **kwargs)
        self.body_only = body_only
        self.stylesheet = stylesheet

    def build(self):
        self.header()

        self.generate_index()
        self.project.content.dispatch(self.generate_parts, self.generate_chapter_list)

        if not self.body_only:
            if self.stylesheet is None:
                raise FileWriteError("no stylesheet to copy", ident="style.css")
            self.write_file("style.css", self.stylesheet)

        print(f"  ✓ {len(self.project.content.flatten())} chapter page(s) written")

    # ── Table of contents ──────────────────────────────────

    def generate_index(self):
        def parts_toc(parts):
            entries, ofs = [], 0
            for idx, part in enumerate(parts):
                entries.append({
                    "index": idx,
                    "title": part.title,
                    "chapters": _toc_entries(part.chapters, ofs),
                })
                ofs += len(part.chapters)
            return {"parts": entries, "chapters": None}

        def chapters_toc(chapters):
            return {"parts": None, "chapters": _toc_entries(chapters, 0)}

        toc = self.project.content.dispatch(parts_toc, chapters_toc)

        self.write_template(
            "index.html",
            "static/index.html",
            title=self.project.title,
            description=self.project.description,
            language=self.project.language,
            numbering=self.numbering,
            body_only=self.body_only,
            **toc,
        )

    # ── Pages ──────────────────────────────────────────────

    def generate_parts(self, parts):
        ofs = 0
        for idx, part in enumerate(parts):
            previous_part = idx - 1 if idx > 0 else None
            next_part = idx + 1 if idx + 1 < len(parts) else None

            self.write_template(
                f"p{idx}.html",
                "static/part.html",
                title=part.title,
                number=idx + 1,
                numbering=self.numbering,
                language=self.project.language,
                body_only=self.body_only,
                chapters_number=len(part.chapters),
                parts_number=len(parts),
                offset=ofs,
            )

            self.generate_chapters(part.chapters, ofs, previous_part, next_part)
            ofs += len(part.chapters)

    def generate_chapter_list(self, chapters):
        self.generate_chapters(chapters, 0, None, None)

    def generate_chapters(self, chapters, offset, previous_part, next_part):
        for idx, chapter in enumerate(chapters):
            self.write_template(
                f"{offset + idx}.html",
                "static/chapter.html",
                number=idx + 1,
                chapter=chapter,
                numbering=self.numbering,
                language=self.project.language,
                body_only=self.body_only,
                offset=offset,
                chapters_number=len(chapters),
                previous_part=previous_part,
                next_part=next_part,
            )
