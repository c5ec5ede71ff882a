"""
Tradesym Test Configuration
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tradesym.config.settings import Settings
from tradesym.data.cache import ParseCache
from tradesym.data.instruments import InstrumentRegistry
from tradesym.parser.decoder import SymbolDecoder


@pytest.fixture
def settings():
    """Settings with library defaults, independent of the environment."""
    return Settings(
        _env_file=None,
        default_lot_size=1,
        default_expiry_weekday=3,
        min_options_symbol_length=10,
        parse_cache_size=128,
        warn_unknown_stocks=True,
        lot_size_overrides={"NIFTY": 75, "SENSEX": 20, "BANKNIFTY": 30},
    )


@pytest.fixture
def registry():
    """Fresh built-in registry."""
    return InstrumentRegistry()


@pytest.fixture
def decoder(registry, settings):
    """Decoder with its own empty cache."""
    return SymbolDecoder(registry=registry, settings=settings, cache=ParseCache(maxsize=128))
