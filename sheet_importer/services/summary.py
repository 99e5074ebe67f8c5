from __future__ import annotations

from ..models.import_state import ImportResult

"""SUMMARY line rendering for a completed import."""


def _render_file_name(name: str) -> str:
    if any(ch.isspace() for ch in name) or '"' in name:
        escaped = name.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return name


def render_summary_line(result: ImportResult) -> str:
    """Render the SUMMARY line for a successful import.

    Format:
    SUMMARY file={name} mode={rows|assets} rows={row_count} cols={column_count}

    Examples:
        >>> from sheet_importer.models.import_state import ImportResult, OutputMode
        >>> from sheet_importer.models.normalized_row import NormalizedRow
        >>> result = ImportResult(
        ...     file_name="pumps.xlsx", mode=OutputMode.ROWS,
        ...     rows=(NormalizedRow(0, ("Code", "Name")), NormalizedRow(2, ("1", "Pump"))),
        ... )
        >>> render_summary_line(result)
        'SUMMARY file=pumps.xlsx mode=rows rows=2 cols=2'
    """
    return (
        f"SUMMARY file={_render_file_name(result.file_name)} "
        f"mode={result.mode.value} "
        f"rows={result.row_count} "
        f"cols={result.column_count}"
    )
