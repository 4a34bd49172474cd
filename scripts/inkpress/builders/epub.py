"""
EPUB builder.

Archive layout:

    mimetype
    META-INF/container.xml
    OEBPS/content.opf          manifest + spine
    OEBPS/toc.ncx              navigation
    OEBPS/Style/main.css
    OEBPS/Text/{i}.xhtml       i = index in the flattened chapter sequence
    OEBPS/Fonts/*.ttf
    OEBPS/cover.{ext}          only with a cover
"""

import uuid

from inkpress.builders.base import BaseBuilder
from inkpress.errors import FileWriteError

EPUB_MIMETYPE = b"application/epub+zip"

COVER_MEDIA_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "svg": "image/svg+xml",
    "webp": "image/webp",
}

FONTS = [
    "et-book-roman-line-figures.ttf",
    "et-book-bold-line-figures.ttf",
    "et-book-display-italic-old-style-figures.ttf",
]


def cover_media_type(extension):
    """Media type of a cover image; unknown extensions map to image/<ext>."""
    ext = extension.lower()
    return COVER_MEDIA_TYPES.get(ext, f"image/{ext}")


class EpubBuilder(BaseBuilder):
    """
    Usage:
        with ZipWriter("Book.epub", templates) as writer:
            EpubBuilder(project, writer, font_sources=fonts).build()

    `font_sources` maps every name of FONTS to the file to embed.
    """

    format_name = "EPUB"

    def __init__(self, project, writer, font_sources=None, **kwargs):
        super().__init__(project, writer, **kwargs)
        self.font_sources = font_sources or {}

    @property
    def identifier(self):
        """Stable book identifier, derived from author and title."""
        name = f"{self.project.author}/{self.project.title}"
        return f"urn:uuid:{uuid.uuid5(uuid.NAMESPACE_URL, name)}"

    def build(self):
        self.header()

        chapters = self.project.content.flatten()
        cover = self.project.cover

        self.write_bytes("mimetype", EPUB_MIMETYPE)
        self.write_template("META-INF/container.xml", "epub/container.xml")

        self.create_chapters(chapters)

        self.write_template("OEBPS/Style/main.css", "epub/main.css")

        if cover is not None:
            self.write_bytes(f"OEBPS/cover.{cover.extension}", cover.content)

        self.install_fonts()

        self.write_template(
            "OEBPS/content.opf",
            "epub/content.opf",
            identifier=self.identifier,
            title=self.project.title,
            author=self.project.author,
            description=self.project.description,
            language=self.project.language,
            cover_extension=cover.extension if cover is not None else None,
            cover_media_type=cover_media_type(cover.extension) if cover is not None else None,
            files=list(range(len(chapters))),
            fonts=FONTS,
        )

        self.write_template(
            "OEBPS/toc.ncx",
            "epub/toc.ncx",
            identifier=self.identifier,
            title=self.project.title,
            chapters=[
                {"index": idx, "title": chapter.title}
                for idx, chapter in enumerate(chapters)
            ],
        )

        print(f"  ✓ {len(chapters)} chapter(s) written")

    def create_chapters(self, chapters):
        for idx, chapter in enumerate(chapters):
            self.write_template(
                f"OEBPS/Text/{idx}.xhtml",
                "epub/chapter.xhtml",
                number=idx + 1,
                chapter=chapter,
                numbering=self.numbering,
                language=self.project.language,
            )

    def install_fonts(self):
        for name in FONTS:
            source = self.font_sources.get(name)
            if source is None:
                raise FileWriteError("font not found", ident=name)
            self.write_file(f"OEBPS/Fonts/{name}", source)
