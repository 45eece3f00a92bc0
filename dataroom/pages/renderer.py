"""Renders the generated page set from Jinja templates."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Sequence, Tuple
from urllib.parse import quote

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..models import Project, SourceFile
from ..naming import page_slug, strip_extension

# Output filename -> template name, in write order.
PAGE_TEMPLATES: Dict[str, str] = {
    "index.mdx": "index.mdx.j2",
    "_meta.ts": "_meta.ts.j2",
    "appendix.mdx": "appendix.mdx.j2",
    "changelog.mdx": "changelog.mdx.j2",
}

_NAVIGABLE_TYPES = {"markdown", "document"}
_RESERVED_NAV_KEYS = {"index", "appendix"}


@dataclass
class PageSet:
    """Rendered pages keyed by output filename."""

    pages: Dict[str, str] = field(default_factory=dict)

    def __getitem__(self, name: str) -> str:
        return self.pages[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.pages)

    def items(self) -> Iterator[Tuple[str, str]]:
        return iter(self.pages.items())


def navigation_entries(files: Sequence[SourceFile]) -> List[Tuple[str, str]]:
    """Ordered ``(page-slug, title)`` pairs for markdown and document files.

    The first file wins when two files map to the same key, and keys reserved
    for the fixed Overview and Appendix entries are never emitted.
    """
    entries: List[Tuple[str, str]] = []
    seen = set(_RESERVED_NAV_KEYS)
    for record in files:
        if record.file_type not in _NAVIGABLE_TYPES:
            continue
        key = page_slug(record.filename)
        if key in seen:
            continue
        seen.add(key)
        entries.append((key, strip_extension(record.filename)))
    return entries


def download_path(record: SourceFile, project: Project) -> str:
    return f"/projects/{project.slug}/assets/{quote(record.filename)}"


def _md_cell(value: object) -> str:
    return str(value).replace("|", "\\|").replace("\n", " ")


def _ts_string(value: object) -> str:
    return str(value).replace("\\", "\\\\").replace("'", "\\'")


class PageRenderer:
    """Produces the index, navigation, appendix and changelog pages for a project."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir
        self._env = self._create_env(templates_dir)

    def render(self, project: Project, files: Sequence[SourceFile]) -> PageSet:
        context = {
            "project": project,
            "files": list(files),
            "navigation": navigation_entries(files),
        }
        pages = {
            output: self._env.get_template(template).render(**context)
            for output, template in PAGE_TEMPLATES.items()
        }
        return PageSet(pages=pages)

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories: List[str] = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(Path(__file__).with_name("templates")))
        env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        env.filters["md_cell"] = _md_cell
        env.filters["ts_string"] = _ts_string
        env.filters["download_path"] = download_path
        return env


__all__ = ["PAGE_TEMPLATES", "PageRenderer", "PageSet", "download_path", "navigation_entries"]
