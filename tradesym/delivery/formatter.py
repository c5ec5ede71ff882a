"""
Symbol formatting engine.

Renders decoded symbols for trade tables, import messages and logs:

    NIFTY25JUL26900CE -> "NIFTY 31 Jul 2025 26900 Call"
    150 NIFTY         -> "150 (2 lots)"

Dates are rendered with a fixed English month table so output does not
depend on the process locale.
"""

import re
from datetime import date
from typing import Optional, Tuple, Union

from tradesym.core.enums import OptionRight
from tradesym.core.exceptions import SymbolFormatError
from tradesym.core.models import ParsedSymbol
from tradesym.parser.decoder import SymbolDecoder, get_symbol_decoder
from tradesym.parser.expiry import MONTH_ABBREVIATIONS, MONTH_NAMES

DISPLAY_PATTERN = re.compile(
    r"^(?P<underlying>\S+) (?P<day>\d{2}) (?P<month>[A-Za-z]{3}) (?P<year>\d{4}) "
    r"(?P<strike>\d+) (?P<right>Call|Put)$",
    re.ASCII,
)

Number = Union[int, float]


def _format_number(value: Number) -> str:
    """150.0 -> '150', 1.5 -> '1.5'."""
    return f"{value:g}" if isinstance(value, float) else str(value)


def format_expiry(expiry: date) -> str:
    """31 Jul 2025"""
    return f"{expiry.day:02d} {MONTH_NAMES[expiry.month].title()} {expiry.year}"


class SymbolFormatter:
    """
    Formats decoded symbols and quantities for display.
    """

    def __init__(self, decoder: Optional[SymbolDecoder] = None):
        self.decoder = decoder or get_symbol_decoder()

    def format_options_symbol(self, parsed: ParsedSymbol) -> str:
        """Underlying, expiry, strike and right; invalid parses echo the raw symbol."""
        if not parsed.is_valid:
            return parsed.original_symbol
        return f"{parsed.underlying} {format_expiry(parsed.expiry)} {parsed.strike} {parsed.right.label}"

    def parse_display_string(self, text: str) -> Tuple[str, date, int, OptionRight]:
        """Inverse of format_options_symbol."""
        m = DISPLAY_PATTERN.match(text.strip()) if isinstance(text, str) else None
        if not m:
            raise SymbolFormatError(f"Not a formatted options symbol: {text!r}")

        month = MONTH_ABBREVIATIONS.get(m.group("month").upper())
        if month is None:
            raise SymbolFormatError(f"Unknown month in display string: {m.group('month')}")
        try:
            expiry = date(int(m.group("year")), month, int(m.group("day")))
        except ValueError as e:
            raise SymbolFormatError(f"Invalid date in display string {text!r}: {e}") from e

        right = OptionRight.CALL if m.group("right") == "Call" else OptionRight.PUT
        return m.group("underlying"), expiry, int(m.group("strike")), right

    def format_quantity_as_lots(self, quantity: Number, underlying: str) -> str:
        """'150 (2 lots)' for lot-traded underlyings, bare quantity otherwise."""
        lot_size = self.decoder.get_lot_size(underlying)
        if lot_size <= 1:
            return _format_number(quantity)
        lots = round(quantity / lot_size, 2)
        return f"{_format_number(quantity)} ({_format_number(float(lots))} lots)"

    def format_for_log(self, parsed: ParsedSymbol) -> str:
        """One-line summary with a status marker."""
        if parsed.is_valid:
            return f"[OK] {self.format_options_symbol(parsed)}"
        return f"[FAIL] {parsed.original_symbol}: {parsed.error}"


_formatter: Optional[SymbolFormatter] = None


def get_symbol_formatter() -> SymbolFormatter:
    global _formatter
    if _formatter is None:
        _formatter = SymbolFormatter()
    return _formatter


def format_options_symbol(parsed: ParsedSymbol) -> str:
    return get_symbol_formatter().format_options_symbol(parsed)


def parse_display_string(text: str) -> Tuple[str, date, int, OptionRight]:
    return get_symbol_formatter().parse_display_string(text)


def format_quantity_as_lots(quantity: Number, underlying: str, decoder: Optional[SymbolDecoder] = None) -> str:
    if decoder is not None:
        return SymbolFormatter(decoder).format_quantity_as_lots(quantity, underlying)
    return get_symbol_formatter().format_quantity_as_lots(quantity, underlying)
