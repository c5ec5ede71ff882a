from tradesym.core.enums import InstrumentKind, OptionRight
from tradesym.core.exceptions import SymbolParseError
from tradesym.core.models import (
    LotSizeResolution,
    ParsedFuturesSymbol,
    ParsedStockSymbol,
    ParsedSymbol,
    SymbolClassification,
)

from .correction import SymbolCorrector
from .decoder import (
    SymbolDecoder,
    correct_malformed_symbol,
    detect_instrument_kind,
    get_lot_size,
    get_symbol_decoder,
    parse_futures_symbol,
    parse_nse_options_symbol,
    parse_nse_options_symbol_with_correction,
    parse_options_symbol,
    parse_symbol,
)
from .expiry import (
    EXPIRY_FORMS,
    ExpiryForm,
    ExpiryMatch,
    LegacyForm,
    MonthlyForm,
    WeeklyForm,
    decode_expiry,
)
from .expiry_calendar import last_day_of_month, last_weekday_of_month, nth_weekday_of_month

__all__ = [
    "EXPIRY_FORMS",
    "ExpiryForm",
    "ExpiryMatch",
    "InstrumentKind",
    "LegacyForm",
    "LotSizeResolution",
    "MonthlyForm",
    "OptionRight",
    "ParsedFuturesSymbol",
    "ParsedStockSymbol",
    "ParsedSymbol",
    "SymbolClassification",
    "SymbolCorrector",
    "SymbolDecoder",
    "SymbolParseError",
    "WeeklyForm",
    "correct_malformed_symbol",
    "decode_expiry",
    "detect_instrument_kind",
    "get_lot_size",
    "get_symbol_decoder",
    "last_day_of_month",
    "last_weekday_of_month",
    "nth_weekday_of_month",
    "parse_futures_symbol",
    "parse_nse_options_symbol",
    "parse_nse_options_symbol_with_correction",
    "parse_options_symbol",
    "parse_symbol",
]
