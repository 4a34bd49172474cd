"""
Build errors.

Every failure in a build is a BuildError. Subclasses name the kind of
failure; `ident` carries the offending identifier (document path, cover
path, output path) when there is one.
"""


class BuildError(Exception):
    """Raised when a build step cannot complete."""

    def __init__(self, message, ident=None):
        super().__init__(message)
        self.message = message
        self.ident = ident

    def __str__(self):
        if self.ident is None:
            return self.message
        return f"{self.message}: {self.ident}"


class ProjectNotFound(BuildError):
    """No project descriptor in the given directory."""
    pass


class DescriptorParseError(BuildError):
    """The project descriptor is malformed or misses required fields."""
    pass


class DocumentReadError(BuildError):
    pass


class RenderCompileError(BuildError):
    """The typography compiler rejected a document."""
    pass


class CoverError(BuildError):
    pass


class TemplateRenderError(BuildError):
    pass


class ArchiveWriteError(BuildError):
    pass


class FileWriteError(BuildError):
    pass
