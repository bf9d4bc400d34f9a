"""Date-time parser — turns free-text replies like "tomorrow at 2pm" into a timestamp.

The parser is a fixed rule cascade; the first rule that yields a date *and*
a time of day wins:

1. ``today`` / ``hoy``
2. ``tomorrow`` / ``mañana``
3. a weekday name (next occurrence, never today)
4. ``next week`` / ``próxima semana`` (10:00 unless a time is given)
5. a day part (morning 10:00, afternoon 14:00, evening 17:00) on the next day
6. a bare clock time, today or tomorrow if already past

Date cues always outrank day-part cues, so the Spanish ``mañana`` is read as
"tomorrow" and only ``por la mañana`` and friends mean "morning".
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta

from .models import TimeExpression
from .text import contains_phrase

logger = logging.getLogger(__name__)

TODAY_PHRASES = ("today", "hoy")
TOMORROW_PHRASES = ("tomorrow", "mañana", "manana")
NEXT_WEEK_PHRASES = ("next week", "próxima semana", "proxima semana", "la semana que viene")

WEEKDAY_PHRASES: tuple[tuple[str, ...], ...] = (
    ("monday", "lunes"),
    ("tuesday", "martes"),
    ("wednesday", "miércoles", "miercoles"),
    ("thursday", "jueves"),
    ("friday", "viernes"),
    ("saturday", "sábado", "sabado"),
    ("sunday", "domingo"),
)

# (phrases, default hour); checked in order.
DAY_PARTS: tuple[tuple[tuple[str, ...], int], ...] = (
    (("morning", "por la mañana", "en la mañana", "de la mañana", "por la manana"), 10),
    (("afternoon", "tarde"), 14),
    (("evening", "noche"), 17),
)

NEXT_WEEK_DEFAULT_HOUR = 10

_MORNING_PHRASE = re.compile(r"\b(?:por|en|de)\s+la\s+ma(?:ñ|n)ana\b")

_CLOCK = re.compile(
    r"(?<![\w:])(?P<hour>\d{1,2})(?::(?P<minute>\d{2}))?(?:\s*(?P<meridiem>[ap])\.?m\.?)?(?![\w:])",
    re.IGNORECASE,
)
_AT_BEFORE = re.compile(r"(?:\bat|\ba\s+las?|@)\s*$", re.IGNORECASE)


def extract_clock_time(message: str) -> tuple[int, int] | None:
    """Return ``(hour, minute)`` for the clock time in *message*, if any.

    Times with an am/pm marker or minutes win over bare numbers; among bare
    numbers one following "at" / "a las" wins over the first one.
    """
    strong: tuple[int, int] | None = None
    after_at: tuple[int, int] | None = None
    first_bare: tuple[int, int] | None = None

    for m in _CLOCK.finditer(message):
        hour = int(m.group("hour"))
        minute = int(m.group("minute") or 0)
        meridiem = (m.group("meridiem") or "").lower()
        if minute > 59:
            continue
        if meridiem:
            if not 1 <= hour <= 12:
                continue
            if meridiem == "p" and hour != 12:
                hour += 12
            elif meridiem == "a" and hour == 12:
                hour = 0
        elif hour > 23:
            continue

        if meridiem or m.group("minute"):
            strong = strong or (hour, minute)
        elif _AT_BEFORE.search(message[: m.start()]):
            after_at = after_at or (hour, minute)
        else:
            first_bare = first_bare or (hour, minute)

    return strong or after_at or first_bare


def _day_part_hour(text: str) -> int | None:
    for phrases, default_hour in DAY_PARTS:
        if contains_phrase(text, phrases):
            return default_hour
    return None


def _weekday_offset(text: str, now: datetime) -> int | None:
    for weekday, phrases in enumerate(WEEKDAY_PHRASES):
        if contains_phrase(text, phrases):
            return (weekday - now.weekday()) % 7 or 7
    return None


def parse_expression(message: str, now: datetime) -> TimeExpression | None:
    """Run the rule cascade and return the resolved ``TimeExpression``.

    ``has_time_of_day`` records whether an explicit clock time was present;
    ``hour``/``minute`` always hold the resolved time.
    """
    text = message.lower()
    clock = extract_clock_time(text)
    day_part = _day_part_hour(text)

    # Explicit time first, then the day part's default.
    time_of_day = clock or ((day_part, 0) if day_part is not None else None)

    def _expr(day_offset: int, hour_minute: tuple[int, int], has_date: bool = True) -> TimeExpression:
        hour, minute = hour_minute
        return TimeExpression(
            has_date=has_date,
            day_offset=day_offset,
            has_time_of_day=clock is not None,
            hour=hour,
            minute=minute,
        )

    if time_of_day and contains_phrase(text, TODAY_PHRASES):
        return _expr(0, time_of_day)

    without_morning = _MORNING_PHRASE.sub(" ", text)
    if time_of_day and contains_phrase(without_morning, TOMORROW_PHRASES):
        return _expr(1, time_of_day)

    weekday_offset = _weekday_offset(text, now)
    if time_of_day and weekday_offset is not None:
        return _expr(weekday_offset, time_of_day)

    if contains_phrase(text, NEXT_WEEK_PHRASES):
        return _expr(7, time_of_day or (NEXT_WEEK_DEFAULT_HOUR, 0))

    if day_part is not None:
        return _expr(1, time_of_day or (day_part, 0))

    if clock:
        hour, minute = clock
        past = now.replace(hour=hour, minute=minute, second=0, microsecond=0) < now
        return _expr(1 if past else 0, clock, has_date=False)

    return None


def materialize(expression: TimeExpression, now: datetime) -> datetime:
    """Turn *expression* into a timestamp relative to *now* (keeps *now*'s tzinfo)."""
    day = now + timedelta(days=expression.day_offset)
    return day.replace(hour=expression.hour, minute=expression.minute, second=0, microsecond=0)


def parse(message: str, now: datetime) -> datetime | None:
    """Extract an interview time from *message*, or None if nothing usable is found."""
    expression = parse_expression(message, now)
    if expression is None:
        logger.debug("No date/time found in %r", message)
        return None
    return materialize(expression, now)
