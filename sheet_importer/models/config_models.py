from __future__ import annotations

from dataclasses import dataclass, field

from .import_state import OutputMode

"""Configuration model for the sheet importer.

Built by ``sheet_importer.config.loader``; defaults here are the ones used when
no config file is present.
"""

DEFAULT_ASSET_LABEL_PREFIX = "Asset"
DEFAULT_ERROR_LOG_DIR = "logs"
DEFAULT_PREVIEW_ROWS = 20


@dataclass(frozen=True)
class ImporterConfig:
    """Root configuration object for an import session."""
    output_mode: OutputMode = OutputMode.ROWS  # fixed per session, not switchable at runtime
    asset_label_prefix: str = DEFAULT_ASSET_LABEL_PREFIX
    null_sentinels: frozenset[str] = field(default_factory=frozenset)  # upper-cased
    read_timeout_seconds: float | None = None
    error_log_dir: str = DEFAULT_ERROR_LOG_DIR
    preview_rows: int = DEFAULT_PREVIEW_ROWS
