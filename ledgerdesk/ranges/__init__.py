"""Mini README: Date windows used to filter listings and exports.

Exports the query-parameter bundle, window computation, record filtering and
the ``dd/mm/yyyy`` helpers shared with the spreadsheet exporter.
"""

from .window import (
    EPOCH,
    PRESETS,
    DateWindow,
    RangeSpec,
    compute_window,
    filter_records,
    format_dmy,
    parse_dmy,
    range_label,
    record_datetime,
)

__all__ = [
    "EPOCH",
    "PRESETS",
    "DateWindow",
    "RangeSpec",
    "compute_window",
    "filter_records",
    "format_dmy",
    "parse_dmy",
    "range_label",
    "record_datetime",
]
