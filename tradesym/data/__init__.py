from .cache import ParseCache
from .instruments import (
    INDIAN_INDICES,
    MCX_COMMODITIES,
    InstrumentRegistry,
    Underlying,
    get_instrument_registry,
)
from .lot_sizes import NSE_STOCK_LOT_SIZES, LotSizeResolver

__all__ = [
    "INDIAN_INDICES",
    "InstrumentRegistry",
    "LotSizeResolver",
    "MCX_COMMODITIES",
    "NSE_STOCK_LOT_SIZES",
    "ParseCache",
    "Underlying",
    "get_instrument_registry",
]
