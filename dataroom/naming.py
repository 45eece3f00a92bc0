"""Slug and identifier normalisation helpers."""

from __future__ import annotations

import re

_SLUG_INVALID = re.compile(r"[^a-z0-9-]")
_PAGE_SLUG_INVALID = re.compile(r"[^a-z0-9]+")
_EXTENSION = re.compile(r"\.[^/.]+$")
_FOLDER_MARKER = "folders/"


def sanitize_slug(value: str) -> str:
    """Lowercase ``value`` and replace every character outside ``[a-z0-9-]`` with ``-``."""
    return _SLUG_INVALID.sub("-", value.lower())


def display_name(slug: str) -> str:
    """Title-case each hyphen separated segment: ``x-labs-alpha`` -> ``X Labs Alpha``."""
    return " ".join(segment[:1].upper() + segment[1:] for segment in slug.split("-"))


def extract_drive_id(value: str) -> str:
    """Return the folder id from a Drive folder URL, or ``value`` when it is already an id."""
    if _FOLDER_MARKER not in value:
        return value
    tail = value.split(_FOLDER_MARKER, 1)[1]
    return tail.split("?", 1)[0]


def strip_extension(filename: str) -> str:
    return _EXTENSION.sub("", filename)


def page_slug(filename: str) -> str:
    """Navigation key for a document page derived from its filename."""
    return _PAGE_SLUG_INVALID.sub("-", strip_extension(filename).lower())


__all__ = [
    "display_name",
    "extract_drive_id",
    "page_slug",
    "sanitize_slug",
    "strip_extension",
]
