"""
Strike Correction Rules - known broker export glitches.

Some exports prepend a spurious digit to the strike of high-profile index
options (BANKNIFTY 668400 instead of 68400). Each rule names the
underlying, the digit that gets prepended and the strike range the
repaired 5-digit strike must fall into before the fix is accepted.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple


@dataclass(frozen=True)
class CorrectionRule:
    """Repair rule for one underlying."""

    underlying: str
    spurious_leading_digit: str
    min_strike: int
    max_strike: int
    strike_length: int = 6  # length of the malformed strike segment

    def applies_to(self, strike_segment: str) -> bool:
        return (
            len(strike_segment) == self.strike_length
            and strike_segment.isdigit()
            and strike_segment.startswith(self.spurious_leading_digit)
        )

    def is_plausible(self, strike: int) -> bool:
        return self.min_strike <= strike <= self.max_strike


CORRECTION_RULES: Tuple[CorrectionRule, ...] = (
    CorrectionRule(
        underlying="BANKNIFTY",
        spurious_leading_digit="6",
        min_strike=40000,
        max_strike=80000,
    ),
    CorrectionRule(
        underlying="NIFTY",
        spurious_leading_digit="2",
        min_strike=18000,
        max_strike=30000,
    ),
)


def index_rules(rules: Iterable[CorrectionRule]) -> Dict[str, CorrectionRule]:
    """Key rules by underlying. Later rules win."""
    return {rule.underlying.upper(): rule for rule in rules}


def get_correction_rule(underlying: str) -> Optional[CorrectionRule]:
    """Default rule for an underlying, if any."""
    return index_rules(CORRECTION_RULES).get(underlying.upper())
