"""Period filter: does a record's due date fall in the selected year / quarter?

Each record is dated by the first present of: period end, close date
(opportunities only), issue date. The chosen string is read for its literal
calendar date; no timezone conversion is applied, so the same string always
lands in the same month. A missing or unparsable date excludes the record.
"""

import re
from datetime import date
from typing import Iterable, Optional, TypeVar

from funnel_landing.models.period import PeriodFilter
from funnel_landing.models.records import Opportunity, Order, Quotation

T = TypeVar("T", Order, Quotation, Opportunity)

# YYYY-MM-DD or YYYY/MM/DD, optionally followed by a time and zone we ignore
_DATE_PREFIX = re.compile(r"^\s*(\d{4})[-/](\d{1,2})[-/](\d{1,2})(?:$|[T\s])")


def parse_record_date(value: Optional[str]) -> Optional[date]:
    """Parse the calendar date at the start of a serialized date or datetime."""
    if not value or not value.strip():
        return None
    m = _DATE_PREFIX.match(value)
    if not m:
        return None
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return None


def _first_present(*candidates: Optional[str]) -> Optional[str]:
    for value in candidates:
        if value:
            return value
    return None


def resolve_record_date(record: Order | Quotation | Opportunity) -> Optional[date]:
    """Due date used for period membership."""
    if isinstance(record, Opportunity):
        raw = _first_present(record.period_end, record.close_date)
    else:
        raw = _first_present(record.period_end, record.date)
    return parse_record_date(raw)


def is_in_period(due: Optional[date], period: PeriodFilter) -> bool:
    """True when the date is in the period's year and, if set, its quarter."""
    if due is None:
        return False
    return due.year == period.year and due.month in period.months


def filter_by_period(records: Iterable[T], period: PeriodFilter) -> list[T]:
    """Records whose due date falls in the period, in source order."""
    return [r for r in records if is_in_period(resolve_record_date(r), period)]
