# Shared pytest fixtures
from __future__ import annotations

import asyncio
import tempfile
from pathlib import Path

import pandas as pd
import pytest

from sheet_importer.logging.init import reset_logging
from sheet_importer.services.acquirer import CANCELLED


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        # keep developer environment overrides out of the tests
        monkeypatch.delenv("SHEET_IMPORT_OUTPUT_MODE", raising=False)
        monkeypatch.delenv("SHEET_IMPORT_READ_TIMEOUT", raising=False)
        yield p


@pytest.fixture(autouse=True)
def _fresh_logging():
    # handlers bind sys.stdout at setup time; capsys swaps it per test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """output_mode: assets
asset_label_prefix: Asset
null_sentinels: ["N/A", "null"]
read_timeout_seconds: 5
error_log_dir: ./logs
preview_rows: 10
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def make_xlsx(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
    """Write an xlsx with pandas/openpyxl, no header row, no index."""
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return path


@pytest.fixture()
def xlsx_file(temp_workdir: Path):
    def _make(name: str, sheets: dict[str, list[list[object]]]) -> Path:
        return make_xlsx(temp_workdir / "data" / name, sheets)
    return _make


class FakeFile:
    """In-memory AcquiredFile. ``delay`` suspends the read."""

    def __init__(self, name: str, payload: bytes = b"", delay: float = 0.0,
                 error: Exception | None = None) -> None:
        self.name = name
        self.payload = payload
        self.delay = delay
        self.error = error
        self.reads = 0

    async def read(self) -> bytes:
        self.reads += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.payload


class FakeAcquirer:
    """Acquirer returning a fixed selection; optionally waits for ``gate`` first."""

    def __init__(self, selection=CANCELLED, gate: asyncio.Event | None = None) -> None:
        self.selection = selection
        self.gate = gate
        self.requests: list[frozenset[str]] = []

    async def request(self, allowed_types: frozenset[str]):
        self.requests.append(allowed_types)
        if self.gate is not None:
            await self.gate.wait()
        return self.selection


class RecordingSink:
    def __init__(self) -> None:
        self.successes: list = []
        self.failures: list[str] = []

    def on_success(self, result) -> None:
        self.successes.append(result)

    def on_failure(self, message: str) -> None:
        self.failures.append(message)
