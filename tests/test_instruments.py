"""Tests for the underlying registry."""

import pytest

from tradesym.core.enums import Exchange, UnderlyingKind
from tradesym.core.exceptions import TradesymConfigError
from tradesym.data.instruments import (
    FRIDAY,
    THURSDAY,
    InstrumentRegistry,
    Underlying,
    get_instrument_registry,
)


def _underlying(ticker, **overrides):
    base = {
        "ticker": ticker,
        "display_name": ticker,
        "kind": UnderlyingKind.COMMODITY,
        "exchange": Exchange.MCX,
        "lot_size": 1,
        "tick_size": 1.0,
    }
    base.update(overrides)
    return Underlying(**base)


class TestUnderlying:
    """Test registry entry validation."""

    def test_valid_entry(self):
        """A well-formed entry constructs."""
        entry = _underlying("GOLDM", lot_size=10)
        assert entry.expiry_weekday == THURSDAY
        assert entry.lot_size == 10

    def test_rejects_bad_weekday(self):
        """Weekday must be 0-6."""
        with pytest.raises(TradesymConfigError):
            _underlying("GOLDM", expiry_weekday=7)

    def test_rejects_non_positive_lot_size(self):
        """Lot size must be positive."""
        with pytest.raises(TradesymConfigError):
            _underlying("GOLDM", lot_size=0)

    def test_rejects_lowercase_ticker(self):
        """Tickers are canonical uppercase."""
        with pytest.raises(TradesymConfigError):
            _underlying("goldm")

    def test_rejects_empty_ticker(self):
        with pytest.raises(TradesymConfigError):
            _underlying("")


class TestInstrumentRegistry:
    """Test the built-in registry."""

    def test_loads_underlyings(self, registry):
        """7 indices + 6 commodities."""
        assert registry.total_count == 13
        assert len(registry.get_by_kind(UnderlyingKind.INDEX)) == 7
        assert len(registry.get_by_kind(UnderlyingKind.COMMODITY)) == 6

    def test_tickers_longest_first(self, registry):
        """Match order never puts a shorter ticker before a longer one."""
        lengths = [len(t) for t in registry.tickers]
        assert lengths == sorted(lengths, reverse=True)

    def test_bse_indices_expire_friday(self, registry):
        """SENSEX and BANKEX expire on Friday, NSE indices on Thursday."""
        assert registry.get("SENSEX").expiry_weekday == FRIDAY
        assert registry.get("BANKEX").expiry_weekday == FRIDAY
        assert registry.get("NIFTY").expiry_weekday == THURSDAY
        assert registry.get("BANKNIFTY").expiry_weekday == THURSDAY

    def test_expiry_weekday_default(self, registry):
        """Unknown tickers get the supplied default."""
        assert registry.expiry_weekday("TCS", default=2) == 2

    def test_get_is_case_insensitive(self, registry):
        assert registry.get(" nifty ").ticker == "NIFTY"
        assert registry.get("") is None

    def test_exchanges(self, registry):
        assert len(registry.get_by_exchange(Exchange.NSE)) == 5
        assert len(registry.get_by_exchange(Exchange.BSE)) == 2
        assert len(registry.get_by_exchange(Exchange.MCX)) == 6

    def test_match_prefix_prefers_longer_ticker(self, registry):
        """NIFTYNXT50 must not be claimed by NIFTY."""
        assert registry.match_prefix("NIFTYNXT5025JUL70000CE").ticker == "NIFTYNXT50"
        assert registry.match_prefix("NIFTY25JUL26900CE").ticker == "NIFTY"
        assert registry.match_prefix("INFY") is None
        assert registry.match_prefix("") is None

    def test_register_reorders(self):
        """Entries registered shortest-first still match longest-first."""
        registry = InstrumentRegistry([_underlying("GOLD"), _underlying("GOLDM")])
        assert registry.tickers == ["GOLDM", "GOLD"]
        assert registry.match_prefix("GOLDM25JUL70000CE").ticker == "GOLDM"
        assert registry.match_prefix("GOLD25JUL70000CE").ticker == "GOLD"

    def test_register_replaces(self, registry):
        """Re-registering a ticker replaces the entry."""
        registry.register(_underlying("GOLD", lot_size=1000))
        assert registry.get("GOLD").lot_size == 1000
        assert registry.total_count == 13

    def test_summary(self, registry):
        summary = registry.summary()
        assert summary["total"] == 13
        assert summary["by_kind"]["index"] == 7
        assert summary["by_exchange"]["MCX"] == 6
        assert summary["match_order"][0] in ("NATURALGAS", "MIDCPNIFTY", "NIFTYNXT50")

    def test_singleton(self):
        assert get_instrument_registry() is get_instrument_registry()
