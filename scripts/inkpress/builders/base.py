"""
Base builder class for all output formats.

A builder publishes a rendered Project through a Writer. Subclasses
implement `build()` and set `format_name`; logging lives here.
"""

from abc import ABC, abstractmethod


class BaseBuilder(ABC):
    """
    Abstract base for format builders.

    Subclasses must define:
        format_name:  str    — human-readable name ("EPUB", "static website")
        build():      method — the actual build logic
    """

    format_name = None  # Override in subclass

    def __init__(self, project, writer, verbose=False, **kwargs):
        self.project = project
        self.writer = writer
        self.verbose = verbose
        self.kwargs = kwargs

    @property
    def numbering(self):
        return bool(self.project.numbering)

    # ── Logging ────────────────────────────────────────────

    def log(self, msg):
        if self.verbose:
            print(msg)

    def header(self):
        print(f"\n{'─' * 60}")
        print(f"  Building {self.format_name}: {self.project.title}")
        print(f"{'─' * 60}")

    # ── Writing (every write is logged in verbose mode) ────

    def write_bytes(self, path, data):
        self.writer.write_bytes(path, data)
        self.log(f"  + {path}")

    def write_file(self, path, source):
        self.writer.write_file(path, source)
        self.log(f"  + {path}  (from {source})")

    def write_template(self, path, template, **context):
        self.writer.write_template(path, template, context)
        self.log(f"  + {path}")

    # ── Abstract interface ─────────────────────────────────

    @abstractmethod
    def build(self):
        """
        Execute the build. Raises BuildError on the first failed write.
        """
        ...
