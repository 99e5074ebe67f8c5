"""Domain models for the spreadsheet / CSV importer.

Raw decoded cells, normalized rows, projected asset records, the import
lifecycle and configuration.
"""

from .asset_record import AssetRecord
from .cells import EMPTY_CELL, CellKind, RawCell, RawRow
from .config_models import ImporterConfig
from .error_record import ErrorRecord
from .import_state import ImportResult, ImportState, ImportStatus, OutputMode
from .normalized_row import NormalizedRow
from .workbook import Sheet, SourceFormat, Workbook

__all__ = [
    # Decoded data
    "CellKind",
    "RawCell",
    "RawRow",
    "EMPTY_CELL",
    "Sheet",
    "SourceFormat",
    "Workbook",
    # Normalized data
    "NormalizedRow",
    "AssetRecord",
    # Lifecycle
    "ImportResult",
    "ImportState",
    "ImportStatus",
    "OutputMode",
    "ErrorRecord",
    # Configuration
    "ImporterConfig",
]
