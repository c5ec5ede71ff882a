"""
Tradesym Underlying Registry

Index and commodity underlyings whose derivatives the decoder understands:
- 7 Indian indices (NSE + BSE)
- 6 MCX commodities

Each entry carries the weekday its contracts conventionally expire on.
NSE index contracts expire on Thursday, BSE index contracts on Friday,
MCX contracts default to Thursday. Weekdays follow date.weekday()
(Monday=0 .. Sunday=6).

Tickers are matched longest-first against a raw symbol so that a short
code (GOLD, NIFTY) never claims a symbol built from a longer one
(GOLDM, NIFTYNXT50, NATURALGAS).
"""

import logging
import threading
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from tradesym.core.enums import Exchange, UnderlyingKind
from tradesym.core.exceptions import TradesymConfigError

logger = logging.getLogger(__name__)

THURSDAY = 3
FRIDAY = 4


@dataclass(frozen=True)
class Underlying:
    """Single registry entry."""

    ticker: str
    display_name: str
    kind: UnderlyingKind
    exchange: Exchange
    lot_size: int
    tick_size: float
    expiry_weekday: int = THURSDAY
    unit: str = ""

    def __post_init__(self):
        if not self.ticker or self.ticker != self.ticker.strip().upper():
            raise TradesymConfigError(f"Ticker must be non-empty uppercase: {self.ticker!r}")
        if not 0 <= self.expiry_weekday <= 6:
            raise TradesymConfigError(
                f"{self.ticker}: expiry weekday must be 0-6, got {self.expiry_weekday}"
            )
        if self.lot_size < 1:
            raise TradesymConfigError(f"{self.ticker}: lot size must be positive, got {self.lot_size}")
        if self.tick_size <= 0:
            raise TradesymConfigError(f"{self.ticker}: tick size must be positive, got {self.tick_size}")


# =============================================================================
# UNDERLYING LISTS
# =============================================================================

# (ticker, name, lot size, tick size, exchange, expiry weekday)
INDIAN_INDICES = [
    ("NIFTY", "NIFTY 50", 75, 0.05, Exchange.NSE, THURSDAY),
    ("BANKNIFTY", "BANK NIFTY", 30, 0.05, Exchange.NSE, THURSDAY),
    ("FINNIFTY", "NIFTY FINANCIAL SERVICES", 65, 0.05, Exchange.NSE, THURSDAY),
    ("MIDCPNIFTY", "NIFTY MIDCAP 50", 140, 0.05, Exchange.NSE, THURSDAY),
    ("NIFTYNXT50", "NIFTY NEXT 50", 25, 0.05, Exchange.NSE, THURSDAY),
    ("SENSEX", "BSE SENSEX", 20, 0.05, Exchange.BSE, FRIDAY),
    ("BANKEX", "BSE BANK INDEX", 30, 0.05, Exchange.BSE, FRIDAY),
]

# (ticker, name, lot size, tick size, unit)
MCX_COMMODITIES = [
    ("GOLD", "GOLD", 100, 1.0, "grams"),
    ("SILVER", "SILVER", 30000, 1.0, "grams"),
    ("CRUDEOIL", "CRUDE OIL", 100, 1.0, "barrels"),
    ("NATURALGAS", "NATURAL GAS", 1250, 0.10, "mmBtu"),
    ("COPPER", "COPPER", 2500, 0.05, "kg"),
    ("ZINC", "ZINC", 5000, 0.05, "kg"),
]


# =============================================================================
# REGISTRY CLASS
# =============================================================================

class InstrumentRegistry:
    """Registry of derivative underlyings, matched longest-ticker-first."""

    def __init__(self, underlyings: Optional[Iterable[Underlying]] = None):
        self.underlyings: Dict[str, Underlying] = {}
        self._by_length: Tuple[Underlying, ...] = ()
        self._lock = threading.RLock()

        if underlyings is None:
            self._load_all_underlyings()
        else:
            for underlying in underlyings:
                self.register(underlying)
        logger.info(f"Loaded {self.total_count} underlyings")

    def _load_all_underlyings(self):
        """Load the built-in index and commodity tables."""
        self._load_indices()
        self._load_commodities()

    def _load_indices(self):
        """Load NSE and BSE indices."""
        for ticker, name, lot_size, tick_size, exchange, weekday in INDIAN_INDICES:
            self.register(Underlying(
                ticker=ticker,
                display_name=name,
                kind=UnderlyingKind.INDEX,
                exchange=exchange,
                lot_size=lot_size,
                tick_size=tick_size,
                expiry_weekday=weekday,
            ))

    def _load_commodities(self):
        """Load MCX commodities."""
        for ticker, name, lot_size, tick_size, unit in MCX_COMMODITIES:
            self.register(Underlying(
                ticker=ticker,
                display_name=name,
                kind=UnderlyingKind.COMMODITY,
                exchange=Exchange.MCX,
                lot_size=lot_size,
                tick_size=tick_size,
                expiry_weekday=THURSDAY,
                unit=unit,
            ))

    def register(self, underlying: Underlying) -> None:
        """Add or replace an underlying and refresh the match order."""
        with self._lock:
            self.underlyings[underlying.ticker] = underlying
            # Stable sort keeps insertion order between equal-length tickers
            self._by_length = tuple(
                sorted(self.underlyings.values(), key=lambda u: len(u.ticker), reverse=True)
            )

    # =========================================================================
    # QUERY METHODS
    # =========================================================================

    @property
    def tickers(self) -> List[str]:
        """All tickers, longest first."""
        return [u.ticker for u in self._by_length]

    def match_prefix(self, symbol: str) -> Optional[Underlying]:
        """Longest registry ticker that prefixes the (upper-cased) symbol."""
        if not symbol:
            return None
        clean = symbol.strip().upper()
        for underlying in self._by_length:
            if clean.startswith(underlying.ticker):
                return underlying
        return None

    def get(self, ticker: str) -> Optional[Underlying]:
        """Get underlying by ticker."""
        if not ticker:
            return None
        return self.underlyings.get(ticker.strip().upper())

    def get_by_kind(self, kind: UnderlyingKind) -> List[Underlying]:
        """Get underlyings by category."""
        return [u for u in self.underlyings.values() if u.kind == kind]

    def get_by_exchange(self, exchange: Exchange) -> List[Underlying]:
        """Get underlyings listed on an exchange."""
        return [u for u in self.underlyings.values() if u.exchange == exchange]

    def expiry_weekday(self, ticker: str, default: int = THURSDAY) -> int:
        """Configured expiry weekday, or default for unknown tickers."""
        underlying = self.get(ticker)
        return underlying.expiry_weekday if underlying else default

    # =========================================================================
    # STATISTICS
    # =========================================================================

    @property
    def total_count(self) -> int:
        return len(self.underlyings)

    def summary(self) -> Dict:
        """Get summary statistics."""
        by_kind = {kind.value: len(self.get_by_kind(kind)) for kind in UnderlyingKind}
        by_exchange = {ex.value: len(self.get_by_exchange(ex)) for ex in Exchange}
        return {
            "total": self.total_count,
            "by_kind": by_kind,
            "by_exchange": by_exchange,
            "match_order": self.tickers,
        }


# =============================================================================
# SINGLETON
# =============================================================================

_registry: Optional[InstrumentRegistry] = None


def get_instrument_registry() -> InstrumentRegistry:
    """Get or create the registry singleton."""
    global _registry
    if _registry is None:
        _registry = InstrumentRegistry()
    return _registry
