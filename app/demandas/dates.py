"""Date helpers shared by the demand/document rules.

Two textual encodings circulate in the app: the display form
``DD/MM/YYYY`` and the sortable form ``YYYY-MM-DD`` (HTML date inputs and
the JSON API).  Every helper here is lenient: malformed input becomes
``None``/``""`` instead of raising, and callers treat it as "no date".
"""
from __future__ import annotations

import re
from datetime import date, datetime, time

DISPLAY_RE = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")
DISPLAY_DASH_RE = re.compile(r"^(\d{2})-(\d{2})-(\d{4})$")
SORTABLE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")

DateInput = date | datetime | str | None


def to_sortable(display: str | None) -> str:
    """``DD/MM/YYYY`` -> ``YYYY-MM-DD``; empty string when not in display form."""
    match = DISPLAY_RE.match((display or "").strip())
    if not match:
        return ""
    day, month, year = match.groups()
    return f"{year}-{month}-{day}"


def to_display(sortable: str | None) -> str:
    """``YYYY-MM-DD`` -> ``DD/MM/YYYY``; empty string when not in sortable form."""
    match = SORTABLE_RE.match((sortable or "").strip())
    if not match:
        return ""
    year, month, day = match.groups()
    return f"{day}/{month}/{year}"


def format_for_display(value: DateInput) -> str:
    if value is None or value == "":
        return ""
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.strftime("%d/%m/%Y")
    raw = value.strip()
    if DISPLAY_RE.match(raw):
        return raw
    return to_display(raw)


def format_date_dd_mm_yyyy(value: DateInput) -> str:
    """Hyphenated display form (``DD-MM-YYYY``); unknown strings pass through."""
    if value is None or value == "":
        return ""
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.strftime("%d-%m-%Y")
    raw = value.strip()
    if DISPLAY_DASH_RE.match(raw):
        return raw
    match = SORTABLE_RE.match(raw)
    if match:
        year, month, day = match.groups()
        return f"{day}-{month}-{year}"
    match = DISPLAY_RE.match(raw)
    if match:
        day, month, year = match.groups()
        return f"{day}-{month}-{year}"
    return value


def format_or_placeholder(value: DateInput, placeholder: str = "--") -> str:
    if value is None or value == "":
        return placeholder
    return format_date_dd_mm_yyyy(value)


def format_date_mask(value: str) -> str:
    digits = re.sub(r"\D", "", value or "")
    if len(digits) <= 2:
        return digits
    if len(digits) <= 4:
        return f"{digits[:2]}/{digits[2:]}"
    return f"{digits[:2]}/{digits[2:4]}/{digits[4:8]}"


def parse_date(value: DateInput) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raw = value.strip()
    match = SORTABLE_RE.match(raw)
    if match:
        year, month, day = match.groups()
    else:
        match = DISPLAY_RE.match(raw) or DISPLAY_DASH_RE.match(raw)
        if not match:
            return None
        day, month, year = match.groups()
    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None


def compare_calendar_dates(a: DateInput, b: DateInput) -> int | None:
    """Day-granularity comparison: -1, 0 or 1; ``None`` if either side is unparseable."""
    left = parse_date(a)
    right = parse_date(b)
    if left is None or right is None:
        return None
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def today() -> date:
    return date.today()


def day_bounds(day: date) -> tuple[datetime, datetime]:
    # Range starts compare against 00:00, "not in the future" checks against 23:59:59.
    return datetime.combine(day, time.min), datetime.combine(day, time.max)


def days_between(start: DateInput, end: DateInput = None, reference: date | None = None) -> int:
    start_date = parse_date(start)
    if start_date is None:
        return 0
    if end is None or end == "":
        end_date = reference or today()
    else:
        end_date = parse_date(end)
        if end_date is None:
            return 0
    return max(0, (end_date - start_date).days)


def demanda_duration_text(
    data_inicial: DateInput,
    data_final: DateInput,
    status: str,
    reference: date | None = None,
) -> str:
    dias = days_between(data_inicial, data_final, reference=reference)
    unidade = "dia" if dias == 1 else "dias"
    if status == "Finalizada" and data_final:
        return f"{dias} {unidade} finalizada"
    return f"{dias} {unidade} aberta"
