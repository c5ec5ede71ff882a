"""
Expiry + strike decoding.

The block after the underlying is tried against three encodings in fixed
order, first structural match wins:

1. Monthly  YY MMM strike   NIFTY25JUL26900CE   -> last expiry weekday of Jul 2025
2. Weekly   YY M WW strike  SENSEX2570185000CE  -> 1st expiry weekday of Jul 2025
3. Legacy   YYMMDD strike   BANKNIFTY26032678000CE -> 26 Mar 2026

A matcher returns None to pass the block to the next form and raises
SymbolParseError when the block is its shape but cannot be decoded.
Only the weekly form passes on implausible values; the legacy form is
last in line so its failures are terminal.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence, Tuple

from tradesym.core.exceptions import SymbolParseError

from .expiry_calendar import last_weekday_of_month, nth_weekday_of_month

MONTH_ABBREVIATIONS = {
    "JAN": 1, "FEB": 2, "MAR": 3, "APR": 4, "MAY": 5, "JUN": 6,
    "JUL": 7, "AUG": 8, "SEP": 9, "OCT": 10, "NOV": 11, "DEC": 12,
}

MONTH_NAMES = {number: abbr for abbr, number in MONTH_ABBREVIATIONS.items()}


def month_from_abbreviation(abbr: str) -> int:
    """1-based month number for a 3-letter abbreviation."""
    month = MONTH_ABBREVIATIONS.get(abbr.upper())
    if month is None:
        raise SymbolParseError(f"Invalid month abbreviation: {abbr}")
    return month


@dataclass(frozen=True)
class ExpiryMatch:
    """Decoded expiry plus the raw strike digits that followed it."""

    expiry: date
    strike_segment: str
    form: str


class ExpiryForm(ABC):
    """One expiry encoding."""

    name: str = "base"
    pattern: "re.Pattern[str]"

    def match(self, remaining: str, expiry_weekday: int) -> Optional[ExpiryMatch]:
        m = self.pattern.match(remaining)
        if not m:
            return None
        return self.decode(m, expiry_weekday)

    @abstractmethod
    def decode(self, m: "re.Match[str]", expiry_weekday: int) -> Optional[ExpiryMatch]:
        pass


class MonthlyForm(ExpiryForm):
    """YY + month abbreviation; expires on the month's last expiry weekday."""

    name = "monthly"
    pattern = re.compile(r"^(\d{2})([A-Z]{3})(\d+)$", re.ASCII)

    def decode(self, m, expiry_weekday):
        year = 2000 + int(m.group(1))
        month = month_from_abbreviation(m.group(2))
        return ExpiryMatch(
            expiry=last_weekday_of_month(year, month, expiry_weekday),
            strike_segment=m.group(3),
            form=self.name,
        )


class WeeklyForm(ExpiryForm):
    """YY + 1-digit month + 2-digit week ordinal."""

    name = "weekly"
    pattern = re.compile(r"^(\d{2})(\d)(\d{2})(\d+)$", re.ASCII)

    def decode(self, m, expiry_weekday):
        year = 2000 + int(m.group(1))
        month_idx = int(m.group(2)) - 1
        week = int(m.group(3))

        if not 0 <= month_idx <= 11 or not 1 <= week <= 5:
            # Not a realistic weekly code, let the legacy form try
            return None

        return ExpiryMatch(
            expiry=nth_weekday_of_month(year, month_idx + 1, expiry_weekday, week),
            strike_segment=m.group(4),
            form=self.name,
        )


class LegacyForm(ExpiryForm):
    """YYMMDD taken literally."""

    name = "legacy"
    pattern = re.compile(r"^(\d{6})(\d+)$", re.ASCII)

    def decode(self, m, expiry_weekday):
        block = m.group(1)
        year = 2000 + int(block[0:2])
        month = int(block[2:4])
        day = int(block[4:6])

        if not 1 <= month <= 12 or not 1 <= day <= 31:
            raise SymbolParseError(f"Invalid expiry date: {block}")
        try:
            expiry = date(year, month, day)
        except ValueError:
            # 31 Apr, 30 Feb and friends
            raise SymbolParseError(f"Invalid expiry date: {block}")

        return ExpiryMatch(expiry=expiry, strike_segment=m.group(2), form=self.name)


EXPIRY_FORMS: Tuple[ExpiryForm, ...] = (MonthlyForm(), WeeklyForm(), LegacyForm())


def decode_expiry(
    remaining: str,
    expiry_weekday: int,
    forms: Sequence[ExpiryForm] = EXPIRY_FORMS,
) -> ExpiryMatch:
    """Run the forms in order; raise SymbolParseError if none decodes."""
    for form in forms:
        result = form.match(remaining, expiry_weekday)
        if result is not None:
            return result
    raise SymbolParseError(f"Unrecognized expiry/strike format: {remaining}")


def parse_strike(segment: str) -> int:
    """Strike digits to int."""
    if not segment or not segment.isdigit() or not segment.isascii():
        raise SymbolParseError(f"Invalid strike price: {segment}")
    return int(segment)
