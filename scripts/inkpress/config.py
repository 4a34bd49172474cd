"""
Project descriptor: locate, parse, and check the fields the data model
needs.

A project root holds either Book.toml or book.yaml:

    author = "Jane Doe"
    title = "The Trench Mage"
    language = "En"
    numbering = true

    [[chapters]]
    title = "Arrival"
    content = ["chapters/01.md", "chapters/02.md"]

or, with parts, `[[parts]]` tables each carrying their own `[[parts.chapters]]`.
"""

import os
import tomllib

import yaml

from inkpress.errors import DescriptorParseError, ProjectNotFound


# Searched in order, first match wins
DESCRIPTOR_FILES = ["Book.toml", "book.yaml"]

# Fields required in every descriptor
REQUIRED_FIELDS = ["author", "title", "language"]

# Defaults applied if missing
DEFAULTS = {
    "description": None,
    "cover": None,
    "numbering": False,
}


def find_descriptor(root):
    """Path of the descriptor in `root`, or None."""
    for name in DESCRIPTOR_FILES:
        path = os.path.join(root, name)
        if os.path.isfile(path):
            return path
    return None


def load_descriptor(root):
    """
    Load and validate the descriptor of the project rooted at `root`.

    Returns: dict with defaults applied.
    Raises: ProjectNotFound, DescriptorParseError.
    """
    path = find_descriptor(root)
    if path is None:
        raise ProjectNotFound(
            f"no {' or '.join(DESCRIPTOR_FILES)} found", ident=root
        )

    try:
        data = _parse(path)
    except OSError as e:
        raise DescriptorParseError(f"cannot read descriptor ({e})", ident=path) from e

    if not isinstance(data, dict):
        raise DescriptorParseError(
            f"descriptor must be a mapping, got {type(data).__name__}", ident=path
        )

    missing = [key for key in REQUIRED_FIELDS if not data.get(key)]
    if missing:
        raise DescriptorParseError(
            f"descriptor missing required fields: {', '.join(missing)}", ident=path
        )

    for key, default in DEFAULTS.items():
        if data.get(key) is None:
            data[key] = default

    if not isinstance(data["numbering"], bool):
        raise DescriptorParseError("numbering must be true or false", ident=path)

    has_parts, has_chapters = "parts" in data, "chapters" in data
    if has_parts == has_chapters:
        raise DescriptorParseError(
            "descriptor needs exactly one of 'parts' or 'chapters'", ident=path
        )

    return data


def _parse(path):
    if path.endswith(".toml"):
        with open(path, "rb") as f:
            try:
                return tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise DescriptorParseError(f"invalid TOML ({e})", ident=path) from e

    with open(path, encoding="utf-8") as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise DescriptorParseError(f"invalid YAML ({e})", ident=path) from e
