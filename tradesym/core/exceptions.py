"""
Tradesym custom exceptions.
"""


class TradesymError(Exception):
    """Base exception for tradesym."""

    pass


class TradesymConfigError(TradesymError):
    """Configuration or registry error."""

    pass


class SymbolParseError(TradesymError):
    """Symbol could not be decoded.

    Raised inside the expiry matchers and converted to an invalid
    result at the decoder boundary; public parse calls never raise it.
    """

    pass


class SymbolFormatError(TradesymError):
    """Display string could not be parsed back into symbol fields."""

    pass
