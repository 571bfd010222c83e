"""Pytest fixtures for media filter tests."""

import io
from dataclasses import dataclass
from pathlib import Path

import fitz  # PyMuPDF
import pytest

from media_filter.config import Configuration


@dataclass
class FakeTool:
    """A shell script standing in for pdftotext.

    The script records its arguments one per line in args_log, copies the
    file given as its fourth argument to staged_copy, writes output_file to
    stdout and exits with the configured code.
    """

    path: Path
    args_log: Path
    staged_copy: Path

    @property
    def invoked(self) -> bool:
        return self.args_log.exists()

    def args(self) -> list[str]:
        return self.args_log.read_text().splitlines()


@pytest.fixture
def make_tool(tmp_path):
    """Factory for executable fake tools."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    counter = iter(range(1000))

    def _make(stdout: bytes = b"", exit_code: int = 0, body: str | None = None) -> FakeTool:
        n = next(counter)
        script = bin_dir / f"pdftotext-{n}"
        args_log = bin_dir / f"args-{n}.log"
        staged_copy = bin_dir / f"staged-{n}.bin"
        output_file = bin_dir / f"output-{n}.bin"
        output_file.write_bytes(stdout)

        if body is None:
            body = (
                f"printf '%s\\n' \"$@\" > \"{args_log}\"\n"
                f"cat \"$4\" > \"{staged_copy}\"\n"
                f"cat \"{output_file}\"\n"
                f"exit {exit_code}\n"
            )
        script.write_text("#!/bin/sh\n" + body)
        script.chmod(0o755)
        return FakeTool(path=script, args_log=args_log, staged_copy=staged_copy)

    return _make


@pytest.fixture
def staging_dir(tmp_path):
    """Directory that receives staging files, so leftovers can be detected."""
    path = tmp_path / "staging"
    path.mkdir()
    return path


@pytest.fixture
def make_config(staging_dir):
    """Factory for a Configuration pointing at a fake tool."""

    def _make(tool: FakeTool | None = None, **extra) -> Configuration:
        properties = {"filter.staging_dir": str(staging_dir)}
        if tool is not None:
            properties["xpdf.path.pdftotext"] = str(tool.path)
        properties.update(extra)
        return Configuration(properties)

    return _make


@pytest.fixture
def pdf_bytes() -> bytes:
    """A one-page, letter-size PDF with a line of text."""
    doc = fitz.open()
    page = doc.new_page(width=612, height=792)
    page.insert_text((72, 72), "Hello World")
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def source(pdf_bytes) -> io.BytesIO:
    """Source asset stream for the sample PDF."""
    return io.BytesIO(pdf_bytes)


@pytest.fixture
def item_dir(tmp_path, pdf_bytes) -> Path:
    """Item directory with one PDF and one text file in ORIGINAL."""
    item = tmp_path / "items" / "item-1"
    original = item / "ORIGINAL"
    original.mkdir(parents=True)
    (original / "report.pdf").write_bytes(pdf_bytes)
    (original / "notes.txt").write_text("not a pdf")
    return item
