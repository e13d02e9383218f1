"""Mini README: Inclusive date windows over ``dd/mm/yyyy`` records.

Structure:
    * RangeSpec - the ``range``/``from``/``to`` selection sent by clients.
    * DateWindow - inclusive ``[start, end]`` datetimes.
    * compute_window - turns a selection into a window.
    * filter_records - keeps records whose date falls inside a window.
    * range_label - short label describing a selection, used in file names.

Windows are day-granular: ``end`` is the last millisecond of its day and
preset windows start at midnight. ``last N months`` means the span ending on
``end``'s date and including it, e.g. a 1 week window ending 15/01/2024
starts on 09/01/2024. Month arithmetic uses ``relativedelta`` and clamps to
the end of shorter months.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Dict, Iterable, List, Optional

from dateutil.relativedelta import relativedelta

from ..errors import InvalidDateRange
from ..records.models import Transaction

EPOCH = datetime(1970, 1, 1)
_DMY_PATTERN = re.compile(r"^(\d{1,2})\s*/\s*(\d{1,2})\s*/\s*(\d{4})$", re.ASCII)
END_OF_DAY = time(23, 59, 59, 999000)

PRESETS: Dict[str, relativedelta] = {
    "1w": relativedelta(days=7),
    "1m": relativedelta(months=1),
    "3m": relativedelta(months=3),
    "6m": relativedelta(months=6),
}
CUSTOM = "custom"

_LABELS = {
    "1w": "1_week",
    "1m": "1_month",
    "3m": "3_months",
    "6m": "6_months",
}


def parse_dmy(text: Optional[str]) -> Optional[date]:
    """Parse ``dd/mm/yyyy``; return ``None`` for anything else."""

    if not text:
        return None
    match = _DMY_PATTERN.match(str(text).strip())
    if match is None:
        return None
    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def format_dmy(value: date) -> str:
    return f"{value.day:02d}/{value.month:02d}/{value.year:04d}"


def record_datetime(text: Optional[str]) -> datetime:
    """Midnight of a record's date; unparsable dates count as the epoch."""

    parsed = parse_dmy(text)
    return datetime.combine(parsed, time.min) if parsed else EPOCH


@dataclass(slots=True, frozen=True)
class RangeSpec:
    """Client selection: a preset or custom range plus optional bounds."""

    range: Optional[str] = None
    from_date: Optional[str] = None
    to_date: Optional[str] = None

    @classmethod
    def from_query(
        cls,
        range: Optional[str] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
    ) -> "RangeSpec":
        """Build a selection from raw query values, treating blanks as absent."""

        def clean(value: Optional[str]) -> Optional[str]:
            return value.strip() if value and value.strip() else None

        return cls(range=clean(range), from_date=clean(from_date), to_date=clean(to_date))

    @property
    def is_empty(self) -> bool:
        return not (self.range or self.from_date or self.to_date)


@dataclass(slots=True, frozen=True)
class DateWindow:
    """Inclusive datetime bounds."""

    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


def _bound(text: Optional[str], label: str) -> Optional[date]:
    if text is None:
        return None
    parsed = parse_dmy(text)
    if parsed is None:
        raise InvalidDateRange(f"Invalid '{label}' date '{text}'. Use dd/mm/yyyy.")
    return parsed


def compute_window(spec: RangeSpec, now: Optional[datetime] = None) -> DateWindow:
    """Return the inclusive window described by ``spec``.

    Without a preset or custom range the window runs from the epoch to the
    end of the ``to`` day (or today), which matches everything dated so far.

    Raises:
        InvalidDateRange: ``from`` or ``to`` is not a ``dd/mm/yyyy`` date.
    """

    now = now or datetime.now()
    end_day = _bound(spec.to_date, "to") or now.date()
    end = datetime.combine(end_day, END_OF_DAY)

    if spec.range in PRESETS:
        start_day = (end - PRESETS[spec.range] + timedelta(days=1)).date()
        start = datetime.combine(start_day, time.min)
    elif spec.range == CUSTOM:
        from_day = _bound(spec.from_date, "from")
        start = datetime.combine(from_day, time.min) if from_day else EPOCH
    else:
        start = EPOCH
    return DateWindow(start=start, end=end)


def filter_records(records: Iterable[Transaction], window: DateWindow) -> List[Transaction]:
    """Keep records whose date falls inside ``window``, preserving order."""

    return [record for record in records if window.contains(record_datetime(record.date))]


def range_label(spec: RangeSpec) -> str:
    """Describe a selection for download file names (``1_week``, ``all``...)."""

    if spec.range in _LABELS:
        return _LABELS[spec.range]
    if spec.range == CUSTOM:
        start = (spec.from_date or "start").replace("/", "-")
        end = (spec.to_date or "now").replace("/", "-")
        return f"custom_{start}_to_{end}"
    return "all"
