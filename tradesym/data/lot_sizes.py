"""
Lot Size Resolution

Layered lookup, first hit wins:
1. explicit overrides from settings (LOT_SIZE_OVERRIDES)
2. MCX commodity lot sizes (registry)
3. index lot sizes (registry)
4. per-stock F&O lot sizes
5. configured default lot size
6. 1

Unknown tickers never raise. Callers that must distinguish a known lot
size from a guess check LotSizeResolution.is_confident.
"""

import logging
from typing import Dict, Optional

from tradesym.config.settings import Settings, get_settings
from tradesym.core.enums import LotSizeSource, UnderlyingKind
from tradesym.core.models import LotSizeResolution
from tradesym.data.instruments import InstrumentRegistry, get_instrument_registry

logger = logging.getLogger(__name__)

# NSE stock F&O lot sizes. High-value stocks trade in smaller lots.
NSE_STOCK_LOT_SIZES: Dict[str, int] = {
    "RELIANCE": 250,
    "TCS": 150,
    "HDFCBANK": 550,
    "INFY": 300,
    "HINDUNILVR": 300,
    "ITC": 1600,
    "SBIN": 1500,
    "BHARTIARTL": 1800,
    "BAJFINANCE": 125,
    "ASIANPAINT": 150,
    "MARUTI": 100,
    "WIPRO": 1200,
    "TECHM": 700,
    "ULTRACEMCO": 150,
    "TITAN": 300,
    "POWERGRID": 1800,
    "NTPC": 2250,
    "NESTLEIND": 50,
    "KOTAKBANK": 400,
    "LT": 225,
    "AXISBANK": 1200,
    "ICICIBANK": 1375,
    "HCLTECH": 700,
    "SUNPHARMA": 700,
    "BAJAJFINSV": 800,
    "DIVISLAB": 150,
    "ADANIPORTS": 900,
    "TATAMOTORS": 1500,
    "INDUSINDBK": 900,
    "TATASTEEL": 800,
    "DRREDDY": 125,
    "COALINDIA": 2400,
    "BRITANNIA": 200,
    "APOLLOHOSP": 150,
    "CIPLA": 800,
    "GRASIM": 450,
    "HINDALCO": 1750,
    "BPCL": 1000,
    "SHREECEM": 25,
    "HEROMOTOCO": 250,
    "JSWSTEEL": 1100,
    "EICHERMOT": 250,
    "BAJAJ-AUTO": 150,
    "TATACONSUM": 1050,
    "HDFCLIFE": 1200,
    "SBILIFE": 900,
    "ADANIENT": 400,
    "ONGC": 3400,
}


class LotSizeResolver:
    """Resolve contract multipliers through the fallback chain."""

    def __init__(
        self,
        registry: Optional[InstrumentRegistry] = None,
        settings: Optional[Settings] = None,
        stock_lot_sizes: Optional[Dict[str, int]] = None,
    ):
        self.registry = registry or get_instrument_registry()
        self.settings = settings or get_settings()
        self.overrides = {k.upper(): v for k, v in self.settings.lot_size_overrides.items()}
        self.stock_lot_sizes = stock_lot_sizes if stock_lot_sizes is not None else NSE_STOCK_LOT_SIZES
        self.default_lot_size = self.settings.default_lot_size

    def resolve(self, underlying) -> LotSizeResolution:
        """Walk the chain and report which layer answered."""
        ticker = underlying.strip().upper() if isinstance(underlying, str) else ""

        if ticker in self.overrides:
            return LotSizeResolution(ticker, self.overrides[ticker], LotSizeSource.OVERRIDE)

        entry = self.registry.get(ticker)
        if entry is not None and entry.kind == UnderlyingKind.COMMODITY:
            return LotSizeResolution(ticker, entry.lot_size, LotSizeSource.COMMODITY)
        if entry is not None and entry.kind == UnderlyingKind.INDEX:
            return LotSizeResolution(ticker, entry.lot_size, LotSizeSource.INDEX)

        stock_lot = self.stock_lot_sizes.get(ticker)
        if stock_lot:
            return LotSizeResolution(ticker, stock_lot, LotSizeSource.STOCK)

        if self.default_lot_size and self.default_lot_size > 0:
            logger.debug(f"No lot size for {ticker!r}, using default {self.default_lot_size}")
            return LotSizeResolution(ticker, self.default_lot_size, LotSizeSource.DEFAULT)

        return LotSizeResolution(ticker, 1, LotSizeSource.FALLBACK)

    def get_lot_size(self, underlying) -> int:
        """Lot size for an underlying. Always a positive integer."""
        return self.resolve(underlying).lot_size

    def is_known(self, underlying: str) -> bool:
        """True when some table other than the default knows the ticker."""
        return self.resolve(underlying).is_confident
