"""MDX page rendering for project data rooms."""

from .renderer import PAGE_TEMPLATES, PageRenderer, PageSet, download_path, navigation_entries

__all__ = ["PAGE_TEMPLATES", "PageRenderer", "PageSet", "download_path", "navigation_entries"]
