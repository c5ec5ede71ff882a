"""
Malformed symbol repair.

Some broker exports carry one spurious leading digit on the strike of
index options (BANKNIFTY260326668400CE for BANKNIFTY26032668400CE). The
corrector strips that digit when a rule for the underlying exists and the
repaired strike lands inside the rule's plausible range. Anything else is
returned untouched.

The date block is six characters (YYMMDD, or the weekly YYMWW) unless the
symbol uses the monthly YYMMM form, which is five. Monthly symbols are
therefore repaired too: NIFTY25JUL224500CE -> NIFTY25JUL24500CE.
"""

import logging
import re
from typing import Iterable, Optional

from tradesym.config.corrections import CORRECTION_RULES, CorrectionRule, index_rules
from tradesym.data.instruments import InstrumentRegistry, get_instrument_registry

logger = logging.getLogger(__name__)

RIGHT_CODES = ("CE", "PE")

_MONTHLY_DATE_BLOCK = re.compile(r"^\d{2}[A-Z]{3}", re.ASCII)
MONTHLY_DATE_LENGTH = 5
LEGACY_DATE_LENGTH = 6


class SymbolCorrector:
    """Apply CorrectionRules to options symbols."""

    def __init__(
        self,
        registry: Optional[InstrumentRegistry] = None,
        rules: Iterable[CorrectionRule] = CORRECTION_RULES,
    ):
        self.registry = registry or get_instrument_registry()
        self.rules = index_rules(rules)

    def correct(self, symbol: str) -> str:
        """Return the repaired symbol, or the input unchanged."""
        if not isinstance(symbol, str) or not symbol:
            return symbol

        try:
            corrected = self._correct(symbol)
        except Exception:
            logger.exception(f"Error correcting symbol {symbol!r}")
            return symbol

        if corrected is None:
            return symbol
        logger.info(f"Symbol correction: {symbol} -> {corrected}")
        return corrected

    def _correct(self, symbol: str) -> Optional[str]:
        clean = symbol.strip().upper()
        right = clean[-2:]
        if right not in RIGHT_CODES:
            return None

        underlying = self.registry.match_prefix(clean)
        if underlying is None:
            return None
        rule = self.rules.get(underlying.ticker)
        if rule is None:
            return None

        middle = clean[len(underlying.ticker):-2]
        date_length = MONTHLY_DATE_LENGTH if _MONTHLY_DATE_BLOCK.match(middle) else LEGACY_DATE_LENGTH
        if len(middle) < date_length + 2:
            return None

        date_part = middle[:date_length]
        strike_part = middle[date_length:]
        if not rule.applies_to(strike_part):
            return None

        candidate = strike_part[1:]
        if not rule.is_plausible(int(candidate)):
            logger.debug(
                f"{underlying.ticker} strike {candidate} outside "
                f"{rule.min_strike}-{rule.max_strike}, not correcting"
            )
            return None

        logger.info(f"Corrected {underlying.ticker} strike: {strike_part} -> {candidate}")
        return f"{underlying.ticker}{date_part}{candidate}{right}"
