"""
Tradesym enumerations.
"""

from enum import Enum


class InstrumentKind(str, Enum):
    """Instrument class inferred from a raw ticker."""

    STOCK = "STOCK"
    FUTURES = "FUTURES"
    OPTIONS = "OPTIONS"


class OptionRight(str, Enum):
    """Option right. Exchange tickers encode these as CE / PE."""

    CALL = "CALL"
    PUT = "PUT"

    @property
    def code(self) -> str:
        return "CE" if self is OptionRight.CALL else "PE"

    @property
    def label(self) -> str:
        return "Call" if self is OptionRight.CALL else "Put"

    @classmethod
    def from_code(cls, code: str) -> "OptionRight":
        """Map a CE/PE suffix to a right."""
        code = code.strip().upper()
        if code == "CE":
            return cls.CALL
        if code == "PE":
            return cls.PUT
        raise ValueError(f"Invalid option type: {code}. Must be CE or PE")


class Exchange(str, Enum):
    """Exchanges whose derivatives the decoder understands."""

    NSE = "NSE"
    BSE = "BSE"
    MCX = "MCX"


class UnderlyingKind(str, Enum):
    """Registry underlying category."""

    INDEX = "index"
    COMMODITY = "commodity"


class LotSizeSource(str, Enum):
    """Which lookup layer answered a lot-size query."""

    OVERRIDE = "override"
    COMMODITY = "commodity"
    INDEX = "index"
    STOCK = "stock"
    DEFAULT = "default"
    FALLBACK = "fallback"
