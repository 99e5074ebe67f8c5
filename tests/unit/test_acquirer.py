from __future__ import annotations

import asyncio
import time
from pathlib import Path

import pytest

from sheet_importer.services.acquirer import (
    CANCELLED,
    CSV_MIME,
    SPREADSHEET_MIME_TYPES,
    XLS_MIME,
    XLSX_MIME,
    AcquisitionFailed,
    LocalFile,
    LocalFileAcquirer,
    PromptFileAcquirer,
    guess_mime_type,
)


def test_spreadsheet_mime_types():
    assert SPREADSHEET_MIME_TYPES == {XLSX_MIME, XLS_MIME, CSV_MIME}


@pytest.mark.parametrize(
    "name, expected",
    [("a.xlsx", XLSX_MIME), ("A.XLSX", XLSX_MIME), ("a.xls", XLS_MIME), ("a.csv", CSV_MIME)],
)
def test_guess_mime_type(name: str, expected: str):
    assert guess_mime_type(name) == expected


def test_local_acquirer_returns_readable_file(tmp_path: Path):
    f = tmp_path / "pumps.csv"
    f.write_bytes(b"Code,Name\n1,Pump\n")
    selection = asyncio.run(LocalFileAcquirer(f).request(SPREADSHEET_MIME_TYPES))
    assert isinstance(selection, LocalFile)
    assert selection.name == "pumps.csv"
    assert asyncio.run(selection.read()) == b"Code,Name\n1,Pump\n"


def test_local_acquirer_missing_file(tmp_path: Path):
    with pytest.raises(AcquisitionFailed, match="file not found"):
        asyncio.run(LocalFileAcquirer(tmp_path / "nope.csv").request(SPREADSHEET_MIME_TYPES))


def test_local_acquirer_rejects_other_types(tmp_path: Path):
    f = tmp_path / "notes.txt"
    f.write_text("hello", encoding="utf-8")
    with pytest.raises(AcquisitionFailed, match="unsupported file type"):
        asyncio.run(LocalFileAcquirer(f).request(SPREADSHEET_MIME_TYPES))


def test_local_file_read_error(tmp_path: Path):
    f = tmp_path / "vanishing.csv"
    f.write_bytes(b"x")
    handle = LocalFile(f)
    f.unlink()
    with pytest.raises(AcquisitionFailed, match="could not read vanishing.csv"):
        asyncio.run(handle.read())


@pytest.mark.parametrize("answer", ["", "   "])
def test_prompt_blank_answer_cancels(answer: str):
    acquirer = PromptFileAcquirer(ask=lambda _prompt: answer)
    assert asyncio.run(acquirer.request(SPREADSHEET_MIME_TYPES)) is CANCELLED


def test_prompt_eof_cancels():
    def ask(_prompt: str) -> str:
        raise EOFError

    assert asyncio.run(PromptFileAcquirer(ask=ask).request(SPREADSHEET_MIME_TYPES)) is CANCELLED


def test_prompt_path_answer(tmp_path: Path):
    f = tmp_path / "my pumps.xlsx"
    f.write_bytes(b"PK\x03\x04")
    prompts: list[str] = []

    def ask(prompt: str) -> str:
        prompts.append(prompt)
        return f'"{f}"'

    selection = asyncio.run(PromptFileAcquirer(ask=ask).request(SPREADSHEET_MIME_TYPES))
    assert selection.name == "my pumps.xlsx"
    assert "blank to cancel" in prompts[0]


def test_prompt_unknown_home_directory_is_acquisition_failure():
    acquirer = PromptFileAcquirer(ask=lambda _prompt: "~nosuchuser_sheet_importer/a.csv")
    with pytest.raises(AcquisitionFailed, match="cannot resolve"):
        asyncio.run(acquirer.request(SPREADSHEET_MIME_TYPES))


def test_prompt_does_not_block_event_loop():
    events: list[str] = []

    def slow_ask(_prompt: str) -> str:
        time.sleep(0.2)
        events.append("answered")
        return ""

    async def ticker() -> None:
        for _ in range(3):
            events.append("tick")
            await asyncio.sleep(0.01)

    async def scenario():
        return await asyncio.gather(
            PromptFileAcquirer(ask=slow_ask).request(SPREADSHEET_MIME_TYPES), ticker()
        )

    selection, _ = asyncio.run(scenario())
    assert selection is CANCELLED
    assert events == ["tick", "tick", "tick", "answered"]
