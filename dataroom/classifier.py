"""File type and category classification for exported Drive files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, List, Sequence, Tuple

from .models import SourceFile

_TYPE_BY_EXTENSION = {
    ".md": "markdown",
    ".mdx": "markdown",
    ".txt": "markdown",
    ".docx": "document",
    ".doc": "document",
    ".xlsx": "spreadsheet",
    ".xls": "spreadsheet",
    ".csv": "spreadsheet",
    ".pptx": "presentation",
    ".ppt": "presentation",
    ".pdf": "pdf",
    ".png": "image",
    ".jpg": "image",
    ".jpeg": "image",
    ".svg": "image",
    ".gif": "image",
}

_IGNORED_FILES = {
    ".DS_Store",
    "Thumbs.db",
    "desktop.ini",
}

DEFAULT_CATEGORY = "appendix"

CategoryRule = Tuple[Callable[[str], bool], str]


def contains_any(*keywords: str) -> Callable[[str], bool]:
    """Predicate matching lowercased filenames that contain any of ``keywords``."""

    def _matches(name: str) -> bool:
        return any(keyword in name for keyword in keywords)

    return _matches


# Evaluated top to bottom; the first matching predicate decides the category.
CATEGORY_RULES: Tuple[CategoryRule, ...] = (
    (contains_any("exec", "summary"), "overview"),
    (contains_any("financial", "revenue"), "financials"),
    (contains_any("team", "org"), "team"),
    (contains_any("product", "roadmap"), "product"),
    (contains_any("market", "competitor"), "market"),
    (contains_any("legal", "term"), "legal"),
    (contains_any("deck", "pitch"), "pitch"),
)


def file_extension(filename: str) -> str:
    """Lowercased extension including the dot, or an empty string."""
    return os.path.splitext(filename)[1].lower()


def classify_type(filename: str) -> str:
    return _TYPE_BY_EXTENSION.get(file_extension(filename), "unknown")


class FileClassifier:
    """Assigns file types by extension and categories by ordered keyword rules."""

    def __init__(self, rules: Sequence[CategoryRule] | None = None) -> None:
        self.rules: Tuple[CategoryRule, ...] = tuple(rules) if rules is not None else CATEGORY_RULES

    def classify_category(self, filename: str) -> str:
        name = filename.lower()
        for predicate, category in self.rules:
            if predicate(name):
                return category
        return DEFAULT_CATEGORY

    def classify_file(self, filename: str) -> SourceFile:
        return SourceFile(
            filename=filename,
            extension=file_extension(filename),
            file_type=classify_type(filename),
            category=self.classify_category(filename),
        )

    def classify_directory(self, directory: Path) -> List[SourceFile]:
        """Classify every source file in ``directory``; a missing directory has no files."""
        return [self.classify_file(path.name) for path in list_source_files(directory)]


def list_source_files(directory: Path) -> List[Path]:
    """Return source files directly inside ``directory`` sorted by name."""
    if not directory.is_dir():
        return []
    entries: List[Path] = []
    for entry in sorted(directory.iterdir(), key=lambda path: path.name):
        if entry.name in _IGNORED_FILES:
            continue
        if not entry.is_file():
            continue
        entries.append(entry)
    return entries


__all__ = [
    "CATEGORY_RULES",
    "DEFAULT_CATEGORY",
    "FileClassifier",
    "classify_type",
    "contains_any",
    "file_extension",
    "list_source_files",
]
