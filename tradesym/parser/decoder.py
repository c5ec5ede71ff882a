"""
Tradesym Symbol Decoder

Decodes exchange-traded derivative tickers (NSE/BSE index options and
futures, MCX commodity options and futures, NSE stock options) into their
underlying, expiry, strike and right:

    BANKNIFTY26032678000CE -> BANKNIFTY, 26-Mar-2026, 78000, CALL
    NIFTY25JUL26900CE      -> NIFTY, 31-Jul-2025, 26900, CALL
    SENSEX2570185000PE     -> SENSEX, 04-Jul-2025, 85000, PUT
    TCS2506263500CE        -> TCS, 26-Jun-2025, 3500, CALL
    GOLD24SEPFUT           -> GOLD, 30-Sep-2024 (futures)

Parse methods never raise. Failures come back as records with
is_valid=False and a diagnostic in error. Successful options parses are
memoized in the decoder's ParseCache.
"""

import logging
import re
from dataclasses import replace
from typing import Iterable, List, Optional, Sequence

from tradesym.config.corrections import CORRECTION_RULES, CorrectionRule
from tradesym.config.settings import Settings, get_settings
from tradesym.core.enums import InstrumentKind, OptionRight, UnderlyingKind
from tradesym.core.exceptions import SymbolParseError
from tradesym.core.models import (
    LotSizeResolution,
    ParsedFuturesSymbol,
    ParsedStockSymbol,
    ParsedSymbol,
    SymbolClassification,
)
from tradesym.data.cache import ParseCache
from tradesym.data.instruments import InstrumentRegistry, Underlying, get_instrument_registry
from tradesym.data.lot_sizes import LotSizeResolver

from .correction import RIGHT_CODES, SymbolCorrector
from .expiry import (
    EXPIRY_FORMS,
    MONTH_ABBREVIATIONS,
    ExpiryForm,
    decode_expiry,
    parse_strike,
)
from .expiry_calendar import last_day_of_month

logger = logging.getLogger(__name__)

FUTURES_SUFFIX = "FUT"

# Stock option body: letters (incl. & as in M&M) then date+strike digits
STOCK_OPTION_PATTERN = re.compile(r"^([A-Z&]+)(\d+)$", re.ASCII)
STOCK_CODE_PATTERN = re.compile(r"^([A-Z&]+)", re.ASCII)


def _clean(symbol) -> str:
    return symbol.strip().upper() if isinstance(symbol, str) else ""


def _raw(symbol) -> str:
    if symbol is None:
        return ""
    return symbol if isinstance(symbol, str) else str(symbol)


class SymbolDecoder:
    """
    Decode derivative tickers against an instrument registry.

    Each instance owns its cache, so tests and separate import jobs can
    run isolated decoders side by side.
    """

    def __init__(
        self,
        registry: Optional[InstrumentRegistry] = None,
        settings: Optional[Settings] = None,
        cache: Optional[ParseCache] = None,
        correction_rules: Iterable[CorrectionRule] = CORRECTION_RULES,
        expiry_forms: Sequence[ExpiryForm] = EXPIRY_FORMS,
        lot_sizes: Optional[LotSizeResolver] = None,
    ):
        self.settings = settings or get_settings()
        self.registry = registry or get_instrument_registry()
        self.min_options_length = self.settings.min_options_symbol_length
        self.default_expiry_weekday = self.settings.default_expiry_weekday
        self.warn_unknown_stocks = self.settings.warn_unknown_stocks

        if cache is None:
            cache = ParseCache(maxsize=self.settings.parse_cache_size)
        self.cache = cache
        self.expiry_forms = tuple(expiry_forms)
        self.lot_sizes = lot_sizes or LotSizeResolver(self.registry, self.settings)
        self.corrector = SymbolCorrector(self.registry, correction_rules)

    # =========================================================================
    # CLASSIFICATION
    # =========================================================================

    def is_options_symbol(self, symbol: str) -> bool:
        """Ends in CE or PE."""
        return _clean(symbol).endswith(RIGHT_CODES)

    def is_futures_symbol(self, symbol: str) -> bool:
        """Ends in FUT."""
        return _clean(symbol).endswith(FUTURES_SUFFIX)

    def is_index_or_commodity_symbol(self, symbol: str) -> bool:
        """Starts with a registry ticker."""
        return self.registry.match_prefix(_clean(symbol)) is not None

    def detect_instrument_kind(self, symbol: str) -> InstrumentKind:
        """
        Classify a ticker. Never fails.

        A bare registry ticker followed by anything that is not an explicit
        options or futures suffix defaults to FUTURES.
        """
        clean = _clean(symbol)
        if not clean:
            return InstrumentKind.STOCK
        if clean.endswith(RIGHT_CODES):
            return InstrumentKind.OPTIONS
        if clean.endswith(FUTURES_SUFFIX):
            return InstrumentKind.FUTURES

        underlying = self.registry.match_prefix(clean)
        if underlying is not None and len(clean) > len(underlying.ticker):
            return InstrumentKind.FUTURES
        return InstrumentKind.STOCK

    def extract_underlying(self, symbol: str) -> str:
        """Underlying code for any ticker kind."""
        clean = _clean(symbol)
        underlying = self.registry.match_prefix(clean)
        if underlying is not None:
            return underlying.ticker

        if clean.endswith(RIGHT_CODES):
            m = STOCK_OPTION_PATTERN.match(clean[:-2])
            return m.group(1) if m else clean
        if clean.endswith(FUTURES_SUFFIX):
            m = STOCK_CODE_PATTERN.match(clean[:-len(FUTURES_SUFFIX)])
            return m.group(1) if m else clean

        m = STOCK_CODE_PATTERN.match(clean)
        return m.group(1) if m else _raw(symbol)

    # =========================================================================
    # OPTIONS
    # =========================================================================

    def parse_options_symbol(self, symbol: str) -> ParsedSymbol:
        """Decode <UNDERLYING><EXPIRY><STRIKE><CE|PE>."""
        raw = _raw(symbol)
        if not isinstance(symbol, str) or not symbol.strip():
            return ParsedSymbol.invalid(raw, "Invalid symbol format")

        key = ParseCache.normalize_key(symbol)
        cached = self.cache.get(key)
        if cached is not None:
            if cached.original_symbol != raw:
                return replace(cached, original_symbol=raw)
            return cached

        try:
            result = self._decode_options(key, raw)
        except SymbolParseError as e:
            return ParsedSymbol.invalid(raw, str(e))
        except Exception as e:
            logger.exception(f"Unexpected error parsing options symbol {raw!r}")
            return ParsedSymbol.invalid(raw, f"Parsing error: {e}")

        self.cache.set(key, result)
        return result

    def parse_nse_options_symbol(self, symbol: str) -> ParsedSymbol:
        """Alias kept for callers written against the NSE-only parser."""
        return self.parse_options_symbol(symbol)

    def _decode_options(self, clean: str, raw: str) -> ParsedSymbol:
        if len(clean) < self.min_options_length:
            raise SymbolParseError("Symbol too short for options format")

        right_code = clean[-2:]
        if right_code not in RIGHT_CODES:
            raise SymbolParseError(f"Invalid option type: {right_code}. Must be CE or PE")
        right = OptionRight.from_code(right_code)

        body = clean[:-2]
        underlying = self._options_underlying(body, clean)
        remaining = body[len(underlying):]

        weekday = self.registry.expiry_weekday(underlying, default=self.default_expiry_weekday)
        match = decode_expiry(remaining, weekday, self.expiry_forms)
        strike = parse_strike(match.strike_segment)

        return ParsedSymbol(
            original_symbol=raw,
            underlying=underlying,
            expiry=match.expiry,
            strike=strike,
            right=right,
            is_valid=True,
        )

    def _options_underlying(self, body: str, clean: str) -> str:
        """Registry ticker (longest first), else the stock code heuristic."""
        entry = self.registry.match_prefix(body)
        if entry is not None:
            return entry.ticker

        m = STOCK_OPTION_PATTERN.match(body)
        if not m:
            raise SymbolParseError(f"Cannot extract underlying from symbol: {clean}")

        stock = m.group(1)
        if self.warn_unknown_stocks and not self.lot_sizes.is_known(stock):
            # Registry cannot list every F&O stock; accept and carry on
            logger.warning(f"Unknown stock underlying: {stock}")
        return stock

    # =========================================================================
    # FUTURES
    # =========================================================================

    def parse_futures_symbol(self, symbol: str) -> ParsedFuturesSymbol:
        """
        Decode <UNDERLYING><YY><MMM>FUT.

        Only registry underlyings are supported. Expiry is approximated as
        the last calendar day of the contract month.
        """
        raw = _raw(symbol)
        if not isinstance(symbol, str) or not symbol.strip():
            return ParsedFuturesSymbol.invalid(raw, "Invalid symbol format")

        try:
            return self._decode_futures(_clean(symbol), raw)
        except SymbolParseError as e:
            return ParsedFuturesSymbol.invalid(raw, str(e))
        except Exception as e:
            logger.exception(f"Unexpected error parsing futures symbol {raw!r}")
            return ParsedFuturesSymbol.invalid(raw, f"Parsing error: {e}")

    def _decode_futures(self, clean: str, raw: str) -> ParsedFuturesSymbol:
        if not clean.endswith(FUTURES_SUFFIX):
            raise SymbolParseError("Not a futures symbol (must end with FUT)")

        body = clean[:-len(FUTURES_SUFFIX)]
        entry = self.registry.match_prefix(body)
        if entry is None:
            raise SymbolParseError(f"Unknown underlying. Supported: {', '.join(self.registry.tickers)}")

        expiry_part = body[len(entry.ticker):]
        if len(expiry_part) != 5:
            raise SymbolParseError(
                f"Invalid expiry format: {expiry_part}. Expected YYMMM (e.g., 24AUG)"
            )

        year_part, month_part = expiry_part[:2], expiry_part[2:]
        if not (year_part.isascii() and year_part.isdigit()):
            raise SymbolParseError(f"Invalid year format: {year_part}. Expected 2 digits")

        month = MONTH_ABBREVIATIONS.get(month_part)
        if month is None:
            raise SymbolParseError(
                f"Invalid month: {month_part}. Expected one of: {', '.join(MONTH_ABBREVIATIONS)}"
            )

        return ParsedFuturesSymbol(
            original_symbol=raw,
            underlying=entry.ticker,
            expiry=last_day_of_month(2000 + int(year_part), month),
            is_valid=True,
        )

    # =========================================================================
    # CORRECTION
    # =========================================================================

    def correct_malformed_symbol(self, symbol: str) -> str:
        """Repair a known strike glitch, or return the input unchanged."""
        if not self.is_options_symbol(symbol):
            return symbol
        return self.corrector.correct(symbol)

    def parse_nse_options_symbol_with_correction(self, symbol: str) -> ParsedSymbol:
        """
        Parse, and on failure retry once with the corrected symbol.

        A successful retry keeps the pre-correction input as original_symbol.
        """
        result = self.parse_options_symbol(symbol)
        if result.is_valid or not self.is_options_symbol(symbol):
            return result

        corrected = self.correct_malformed_symbol(symbol)
        if corrected == symbol:
            return result

        retry = self.parse_options_symbol(corrected)
        if not retry.is_valid:
            return result

        logger.info(f"Parsed corrected symbol: {symbol} -> {corrected}")
        return replace(retry, original_symbol=_raw(symbol))

    def parse_multiple_symbols(self, symbols: Iterable[str]) -> List[ParsedSymbol]:
        """Batch options parse with correction."""
        return [self.parse_nse_options_symbol_with_correction(s) for s in symbols]

    # =========================================================================
    # UNIVERSAL
    # =========================================================================

    def parse_symbol(self, symbol: str) -> SymbolClassification:
        """Classify and decode any ticker."""
        kind = self.detect_instrument_kind(symbol)
        if kind == InstrumentKind.OPTIONS:
            parsed = self.parse_options_symbol(symbol)
        elif kind == InstrumentKind.FUTURES:
            parsed = self.parse_futures_symbol(symbol)
        else:
            raw = _raw(symbol)
            return SymbolClassification(
                kind=kind,
                underlying=raw,
                parsed=ParsedStockSymbol(original_symbol=raw, underlying=raw),
            )
        return SymbolClassification(
            kind=kind,
            underlying=self.extract_underlying(symbol),
            parsed=parsed,
        )

    # =========================================================================
    # LOT SIZES
    # =========================================================================

    def get_lot_size(self, underlying: str) -> int:
        """Lot size, never fails. Unknown tickers get the configured default."""
        return self.lot_sizes.get_lot_size(underlying)

    def resolve_lot_size(self, underlying: str) -> LotSizeResolution:
        """Lot size with the layer that supplied it."""
        return self.lot_sizes.resolve(underlying)

    def get_index_info(self, underlying: str) -> Optional[Underlying]:
        """Registry entry for an index underlying."""
        entry = self.registry.get(underlying)
        if entry is not None and entry.kind == UnderlyingKind.INDEX:
            return entry
        return None


# =============================================================================
# MODULE-LEVEL API (default decoder)
# =============================================================================

_decoder: Optional[SymbolDecoder] = None


def get_symbol_decoder() -> SymbolDecoder:
    """Get or create the default decoder."""
    global _decoder
    if _decoder is None:
        _decoder = SymbolDecoder()
    return _decoder


def detect_instrument_kind(symbol: str) -> InstrumentKind:
    return get_symbol_decoder().detect_instrument_kind(symbol)


def parse_options_symbol(symbol: str) -> ParsedSymbol:
    return get_symbol_decoder().parse_options_symbol(symbol)


def parse_nse_options_symbol(symbol: str) -> ParsedSymbol:
    return get_symbol_decoder().parse_nse_options_symbol(symbol)


def parse_futures_symbol(symbol: str) -> ParsedFuturesSymbol:
    return get_symbol_decoder().parse_futures_symbol(symbol)


def get_lot_size(underlying: str) -> int:
    return get_symbol_decoder().get_lot_size(underlying)


def correct_malformed_symbol(symbol: str) -> str:
    return get_symbol_decoder().correct_malformed_symbol(symbol)


def parse_nse_options_symbol_with_correction(symbol: str) -> ParsedSymbol:
    return get_symbol_decoder().parse_nse_options_symbol_with_correction(symbol)


def parse_symbol(symbol: str) -> SymbolClassification:
    return get_symbol_decoder().parse_symbol(symbol)
