"""
Asset lookup: templates, fonts and stylesheets used by the backends.

An assets directory contains:

    templates/epub/     container.xml, chapter.xhtml, main.css,
                        content.opf, toc.ncx
    templates/static/   index.html, part.html, chapter.html, style.css
    fonts/              the fonts embedded in EPUB archives

The bundled directory (inkpress/data) ships templates only; fonts are
looked up in the project first, then in the assets directory.
"""

import os

import roman
from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape
from jinja2.exceptions import FilterArgumentError

ASSETS_ENV = "INKPRESS_ASSETS"

BUNDLED_ASSETS = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")


def assets_dir(explicit=None):
    """
    Resolve the assets directory. Search order (first match wins):
        1. `explicit` argument
        2. INKPRESS_ASSETS environment variable
        3. bundled assets
    """
    if explicit:
        return os.path.abspath(explicit)
    env = os.environ.get(ASSETS_ENV)
    if env:
        return os.path.abspath(env)
    return BUNDLED_ASSETS


def template_dir(assets):
    return os.path.join(assets, "templates")


def resolve_artifact(filename, project_root, assets):
    """
    Resolve an artifact (font, stylesheet) to its full path.

    Search order (first match wins):
        1. <project_root>/<filename>   (per-book overrides)
        2. <assets>/<filename>

    Returns: absolute path or None.
    """
    candidates = [assets] if project_root is None else [project_root, assets]
    for base in candidates:
        path = os.path.join(base, filename)
        if os.path.exists(path):
            return os.path.abspath(path)
    return None


def roman_filter(value):
    """Jinja filter: positive integer → Roman numeral. Raises on anything else."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise FilterArgumentError(f"roman: expected an integer, got {value!r}")
    if value < 1:
        raise FilterArgumentError(f"roman: {value} is not a positive integer")
    try:
        return roman.toRoman(value)
    except roman.RomanError as e:
        raise FilterArgumentError(f"roman: cannot convert {value!r} ({e})") from e


def template_environment(assets):
    """Jinja environment over the templates of `assets`."""
    env = Environment(
        loader=FileSystemLoader(template_dir(assets)),
        autoescape=select_autoescape(["html", "xhtml", "xml", "opf", "ncx"]),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
    )
    env.filters["roman"] = roman_filter
    return env
