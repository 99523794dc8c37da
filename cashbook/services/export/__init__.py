"""Export services."""

from cashbook.services.export.csv_export import (
    HEADERS,
    CsvExport,
    all_rows,
    default_export_range,
    export_rows,
    full_filename,
    range_filename,
    render_csv,
    to_row,
)

__all__ = [
    "HEADERS",
    "CsvExport",
    "all_rows",
    "default_export_range",
    "export_rows",
    "full_filename",
    "range_filename",
    "render_csv",
    "to_row",
]
