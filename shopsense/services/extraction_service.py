"""Regex heuristics for pulling prices, hours, days and times out of SMS text."""

import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

DEFAULT_LABOR_HOURS = 1.0
DEFAULT_APPOINTMENT_TIME = "09:00"

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

_PRICE_PATTERN = re.compile(r"\$\s?(\d{1,3}(?:,\d{3})+|\d+)(\.\d{1,2})?")
# "$80/hr", "$80 per hour", "$80 an hour" quote the rate, not the total.
_RATE_SUFFIX = re.compile(r"^\s*(?:/\s*(?:hr|hour|h)\b|per\s+hour|an\s+hour)", re.IGNORECASE)
_HOURS_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*-?\s*(?:hours?|hrs?)\b", re.IGNORECASE)
_WEEKDAY_PATTERN = re.compile(r"\b(" + "|".join(WEEKDAYS) + r")\b", re.IGNORECASE)
_TIME_12H_PATTERN = re.compile(r"\b(\d{1,2})(?::(\d{2}))?\s*(am|pm|a\.m\.|p\.m\.)(?![a-z])", re.IGNORECASE)
_TIME_24H_PATTERN = re.compile(r"\b([01]?\d|2[0-3]):([0-5]\d)\b")
_BOOKING_DIRECTIVE = re.compile(r"BOOKING_CONFIRMED:\s*(.+)", re.IGNORECASE)


@dataclass(frozen=True)
class BookingSlot:
    date: str
    time: str


@dataclass(frozen=True)
class BookingDirective:
    """Fields from a ``BOOKING_CONFIRMED: name | phone | vehicle | service | day | time`` action."""

    name: Optional[str] = None
    phone: Optional[str] = None
    vehicle: Optional[str] = None
    service: Optional[str] = None
    day: Optional[str] = None
    time: Optional[str] = None


def extract_prices(text: str) -> list[float]:
    """Dollar amounts in ``text`` that are not hourly rates."""
    prices = []
    for match in _PRICE_PATTERN.finditer(text or ""):
        if _RATE_SUFFIX.match(text[match.end() :]):
            continue
        whole = match.group(1).replace(",", "")
        cents = match.group(2) or ""
        prices.append(float(whole + cents))
    return prices


def extract_total_price(text: str) -> Optional[float]:
    prices = extract_prices(text)
    return max(prices) if prices else None


def extract_labor_hours(text: str, default: float = DEFAULT_LABOR_HOURS) -> float:
    match = _HOURS_PATTERN.search(text or "")
    if not match:
        return default
    hours = float(match.group(1))
    return hours if hours > 0 else default


def extract_weekday(text: str) -> Optional[str]:
    match = _WEEKDAY_PATTERN.search(text or "")
    return match.group(1).lower() if match else None


def extract_time(text: str) -> Optional[str]:
    """Return the first clock time in ``text`` as 24h ``HH:MM``."""
    text = text or ""
    match = _TIME_12H_PATTERN.search(text)
    if match:
        hour = int(match.group(1))
        minute = int(match.group(2) or 0)
        if 1 <= hour <= 12 and minute < 60:
            is_pm = match.group(3).lower().startswith("p")
            if is_pm and hour != 12:
                hour += 12
            elif not is_pm and hour == 12:
                hour = 0
            return f"{hour:02d}:{minute:02d}"
    match = _TIME_24H_PATTERN.search(text)
    if match:
        return f"{int(match.group(1)):02d}:{match.group(2)}"
    return None


def next_weekday(weekday: str, today: date) -> date:
    """Next occurrence of ``weekday`` strictly after ``today``."""
    target = WEEKDAYS.index(weekday.lower())
    days_ahead = (target - today.weekday()) % 7
    return today + timedelta(days=days_ahead or 7)


def next_business_day(today: date) -> date:
    day = today + timedelta(days=1)
    while day.weekday() >= 5:
        day += timedelta(days=1)
    return day


def parse_booking_directive(action: str) -> Optional[BookingDirective]:
    match = _BOOKING_DIRECTIVE.search(action or "")
    if not match:
        return None
    parts = [part.strip() or None for part in match.group(1).split("|")]
    parts += [None] * (6 - len(parts))
    name, phone, vehicle, service, day, time = parts[:6]
    return BookingDirective(name=name, phone=phone, vehicle=vehicle, service=service, day=day, time=time)


def resolve_booking_slot(texts: Iterable[str], today: date, directive: Optional[BookingDirective] = None) -> BookingSlot:
    """Pick the appointment day and time.

    A booking directive wins, then the newest text that names a weekday or a
    time. Anything still missing defaults to the next business day at 09:00.
    """
    weekday = None
    clock = None
    if directive is not None:
        weekday = extract_weekday(directive.day or "")
        clock = extract_time(directive.time or "")

    for text in reversed(list(texts)):
        if weekday is None:
            weekday = extract_weekday(text)
        if clock is None:
            clock = extract_time(text)
        if weekday and clock:
            break

    day = next_weekday(weekday, today) if weekday else next_business_day(today)
    return BookingSlot(date=day.isoformat(), time=clock or DEFAULT_APPOINTMENT_TIME)
