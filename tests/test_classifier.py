"""Tests for dataroom.classifier."""

from __future__ import annotations

from pathlib import Path

import pytest

from dataroom.classifier import FileClassifier, classify_type, contains_any


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("notes.md", "markdown"),
        ("page.MDX", "markdown"),
        ("readme.txt", "markdown"),
        ("memo.docx", "document"),
        ("memo.DOC", "document"),
        ("model.xlsx", "spreadsheet"),
        ("model.xls", "spreadsheet"),
        ("export.csv", "spreadsheet"),
        ("deck.pptx", "presentation"),
        ("deck.ppt", "presentation"),
        ("report.PDF", "pdf"),
        ("logo.png", "image"),
        ("photo.JPG", "image"),
        ("photo.jpeg", "image"),
        ("icon.svg", "image"),
        ("anim.gif", "image"),
        ("archive.zip", "unknown"),
        ("LICENSE", "unknown"),
    ],
)
def test_classify_type_by_extension(filename: str, expected: str) -> None:
    assert classify_type(filename) == expected


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("Executive-Summary.pdf", "overview"),
        ("Revenue-Forecast.xlsx", "financials"),
        ("Team-Bios.docx", "team"),
        ("Org-Chart.png", "team"),
        ("Product-Roadmap.pptx", "product"),
        ("Competitor-Landscape.pdf", "market"),
        ("Term-Sheet.pdf", "legal"),
        ("Pitch.pptx", "pitch"),
        ("random-notes.txt", "appendix"),
    ],
)
def test_classify_category_keywords(filename: str, expected: str) -> None:
    assert FileClassifier().classify_category(filename) == expected


def test_category_priority_prefers_earlier_rule() -> None:
    classifier = FileClassifier()
    assert classifier.classify_category("exec-financial-plan.xlsx") == "overview"
    assert classifier.classify_category("financial-team-costs.xlsx") == "financials"


def test_custom_rules_are_evaluated_in_order() -> None:
    classifier = FileClassifier(
        rules=[(contains_any("draft"), "appendix"), (contains_any("deck"), "pitch")]
    )
    assert classifier.classify_category("draft-deck.pptx") == "appendix"
    assert classifier.classify_category("deck.pptx") == "pitch"
    assert classifier.classify_category("other.pdf") == "appendix"


def test_classify_directory_missing_returns_empty(tmp_path: Path) -> None:
    assert FileClassifier().classify_directory(tmp_path / "missing") == []


def test_classify_directory_sorted_and_skips_noise(tmp_path: Path) -> None:
    raw = tmp_path / "raw"
    raw.mkdir()
    for name in ("random-notes.txt", "Financial-Model.xlsx", "Executive-Summary.pdf", ".DS_Store"):
        (raw / name).write_text("x", encoding="utf-8")
    (raw / "nested").mkdir()

    records = FileClassifier().classify_directory(raw)

    assert [(r.filename, r.file_type, r.category) for r in records] == [
        ("Executive-Summary.pdf", "pdf", "overview"),
        ("Financial-Model.xlsx", "spreadsheet", "financials"),
        ("random-notes.txt", "markdown", "appendix"),
    ]
    assert records[0].extension == ".pdf"


def test_classification_is_deterministic(tmp_path: Path) -> None:
    raw = tmp_path / "raw"
    raw.mkdir()
    for name in ("b-deck.pptx", "a-legal.pdf"):
        (raw / name).write_text("x", encoding="utf-8")
    classifier = FileClassifier()
    assert classifier.classify_directory(raw) == classifier.classify_directory(raw)
