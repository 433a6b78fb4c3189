"""Report writers and batching for magicverify scans.

Writers share a single ``write_batch(results, append=...)`` call so the
:class:`ResultSink` can drive either format.
"""

from .csv_table import CsvTableWriter, render_csv
from .json_lines import JsonLinesWriter, iter_json_records, render_json_lines, write_json_lines
from .sink import DEFAULT_BATCH_SIZE, ResultSink, TableWriter
from .summary import ScanSummary

__all__ = [
    "CsvTableWriter",
    "DEFAULT_BATCH_SIZE",
    "JsonLinesWriter",
    "ResultSink",
    "ScanSummary",
    "TableWriter",
    "iter_json_records",
    "render_csv",
    "render_json_lines",
    "write_json_lines",
]
