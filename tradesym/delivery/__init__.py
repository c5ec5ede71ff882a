from .formatter import (
    SymbolFormatter,
    format_expiry,
    format_options_symbol,
    format_quantity_as_lots,
    get_symbol_formatter,
    parse_display_string,
)

__all__ = [
    "SymbolFormatter",
    "format_expiry",
    "format_options_symbol",
    "format_quantity_as_lots",
    "get_symbol_formatter",
    "parse_display_string",
]
