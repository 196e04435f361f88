"""Tests for the upload text extraction helpers."""

from __future__ import annotations

from pathlib import Path

import pytest  # type: ignore

import text_extraction
from text_extraction import extract_text_from_file, is_supported


def test_plain_text_is_read(tmp_path: Path) -> None:
    path = tmp_path / "resume.txt"
    path.write_text("Sales intern", encoding="utf-8")
    assert extract_text_from_file(path) == "Sales intern"


def test_invalid_utf8_is_ignored(tmp_path: Path) -> None:
    path = tmp_path / "resume.txt"
    path.write_bytes(b"crm \xff\xfe excel")
    assert extract_text_from_file(path) == "crm  excel"


def test_pdf_goes_through_pdfminer(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "resume.PDF"
    path.write_bytes(b"%PDF-1.4")
    seen = []

    def fake_extract(p: str) -> str:
        seen.append(p)
        return "Salesforce"

    monkeypatch.setattr(text_extraction, "pdf_extract_text", fake_extract)
    assert extract_text_from_file(path) == "Salesforce"
    assert seen == [str(path)]


def test_docx_without_text_gives_empty_string(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "resume.docx"
    path.write_bytes(b"PK")
    monkeypatch.setattr(text_extraction.docx2txt, "process", lambda p: None)
    assert extract_text_from_file(path) == ""


def test_parse_failure_raises_value_error(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"not a pdf")

    def boom(p: str) -> str:
        raise RuntimeError("No /Root object")

    monkeypatch.setattr(text_extraction, "pdf_extract_text", boom)
    with pytest.raises(ValueError, match="Could not extract text from broken.pdf"):
        extract_text_from_file(path)


def test_missing_file_raises_value_error(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        extract_text_from_file(tmp_path / "missing.txt")


@pytest.mark.parametrize(
    "filename, ok",
    [("cv.pdf", True), ("CV.PDF", True), ("cv.docx", True), ("cv.txt", True), ("cv.exe", False), ("", False)],
)
def test_is_supported(filename: str, ok: bool) -> None:
    assert is_supported(filename) is ok
