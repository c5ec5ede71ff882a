"""
Tradesym Core Data Models

Frozen dataclasses for decoder output. Records are built once per parse
call and never mutated afterwards; cached records are shared between
callers, so corrections are applied with dataclasses.replace().
"""

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Optional, Union

from .enums import InstrumentKind, LotSizeSource, OptionRight


@dataclass(frozen=True)
class ParsedSymbol:
    """Decoded options ticker, e.g. NIFTY25JUL26900CE."""

    original_symbol: str
    underlying: str = ""
    expiry: Optional[date] = None
    strike: int = 0
    right: Optional[OptionRight] = None
    is_valid: bool = False
    error: Optional[str] = None
    instrument_kind: InstrumentKind = InstrumentKind.OPTIONS

    @classmethod
    def invalid(cls, original_symbol: str, error: str) -> "ParsedSymbol":
        return cls(original_symbol=original_symbol, error=error)

    @property
    def option_code(self) -> Optional[str]:
        """Exchange suffix (CE/PE) for the decoded right."""
        return self.right.code if self.right else None

    def to_dict(self) -> dict:
        d = asdict(self)
        d["expiry"] = self.expiry.isoformat() if self.expiry else None
        d["right"] = self.right.value if self.right else None
        d["instrument_kind"] = self.instrument_kind.value
        return d


@dataclass(frozen=True)
class ParsedFuturesSymbol:
    """Decoded futures ticker, e.g. BANKNIFTY24JULFUT."""

    original_symbol: str
    underlying: str = ""
    expiry: Optional[date] = None
    is_valid: bool = False
    error: Optional[str] = None
    instrument_kind: InstrumentKind = InstrumentKind.FUTURES

    @classmethod
    def invalid(cls, original_symbol: str, error: str) -> "ParsedFuturesSymbol":
        return cls(original_symbol=original_symbol, error=error)

    def to_dict(self) -> dict:
        d = asdict(self)
        d["expiry"] = self.expiry.isoformat() if self.expiry else None
        d["instrument_kind"] = self.instrument_kind.value
        return d


@dataclass(frozen=True)
class ParsedStockSymbol:
    """Cash-equity ticker. Always valid; nothing to decode beyond the code."""

    original_symbol: str
    underlying: str
    is_valid: bool = True
    error: Optional[str] = None
    instrument_kind: InstrumentKind = InstrumentKind.STOCK

    def to_dict(self) -> dict:
        d = asdict(self)
        d["instrument_kind"] = self.instrument_kind.value
        return d


AnyParsedSymbol = Union[ParsedSymbol, ParsedFuturesSymbol, ParsedStockSymbol]


@dataclass(frozen=True)
class SymbolClassification:
    """Result of the universal parse: kind, underlying and detail record."""

    kind: InstrumentKind
    underlying: str
    parsed: AnyParsedSymbol = field(repr=False)

    @property
    def is_valid(self) -> bool:
        return self.parsed.is_valid


@dataclass(frozen=True)
class LotSizeResolution:
    """Lot size plus the lookup layer that produced it."""

    underlying: str
    lot_size: int
    source: LotSizeSource

    @property
    def is_confident(self) -> bool:
        """False when the lot size is a guess (default or hard fallback)."""
        return self.source not in (LotSizeSource.DEFAULT, LotSizeSource.FALLBACK)

    def to_dict(self) -> dict:
        return {
            "underlying": self.underlying,
            "lot_size": self.lot_size,
            "source": self.source.value,
            "is_confident": self.is_confident,
        }
