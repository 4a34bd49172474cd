"""
Render transform: Project[document id] → Project[Output].

Every leaf is loaded, compiled with the project's typography and fed to
a fresh output sink. The walk is fail-fast: the first document that
cannot be loaded or compiled aborts the whole render, and the error
names that document.
"""

from concurrent.futures import ThreadPoolExecutor

from inkpress.compiler import CompileError
from inkpress.errors import RenderCompileError
from inkpress.output import Html, MalformedStream


def render_document(ident, loader, compiler, typography, output_factory=Html):
    """Load, compile and sink a single document."""
    text = loader.load_document(ident)
    try:
        events = compiler.compile(text, typography)
        return output_factory().feed(events)
    except (CompileError, MalformedStream) as e:
        raise RenderCompileError(f"cannot compile document ({e})", ident=ident) from e


def render(content, loader, compiler, typography, output_factory=Html, jobs=1):
    """
    Render every leaf of `content`, preserving its shape.

    Args:
        content:        WithParts or WithChapters of document ids
        loader:         Loader providing load_document()
        compiler:       Compiler turning text into events
        typography:     rules for the project's language
        output_factory: callable returning an empty Output sink
        jobs:           documents compiled concurrently; 1 is sequential

    With jobs > 1 the results are reassembled in document order and, if
    several documents fail, the error of the first one in document order
    is raised.
    """
    def one(ident):
        return render_document(ident, loader, compiler, typography, output_factory)

    if jobs <= 1:
        return content.map_leaves(one)

    with ThreadPoolExecutor(max_workers=jobs) as pool:
        futures = [pool.submit(one, ident) for ident in content.leaves()]
        try:
            results = [f.result() for f in futures]
        except Exception:
            pool.shutdown(wait=False, cancel_futures=True)
            raise

    rendered = iter(results)
    return content.map_leaves(lambda _ident: next(rendered))


def render_project(project, loader, compiler, output_factory=Html, jobs=1):
    """
    Resolve the cover and render the content of `project`.

    Returns a new Project; `project` is left untouched.
    """
    cover = None
    if project.cover is not None:
        cover = loader.load_cover(project.cover)

    content = render(
        project.content,
        loader,
        compiler,
        project.language.typography,
        output_factory=output_factory,
        jobs=jobs,
    )
    return project.with_content(content, cover=cover)
