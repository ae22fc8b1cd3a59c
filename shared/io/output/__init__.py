"""보고서 출력 헬퍼

Usage:
    from shared.io.output import format_csv, write_account_csv
"""

from .report import CSV_HEADERS, format_csv, render_outcomes, render_table, report_filename, write_account_csv

__all__: list[str] = [
    "CSV_HEADERS",
    "format_csv",
    "render_outcomes",
    "render_table",
    "report_filename",
    "write_account_csv",
]
