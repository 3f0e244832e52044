"""
Turnover Brackets
=================
Fee suggestions from a client's annual turnover.

Bracket percentages are fractions of turnover (0.08 == 8 %). The bracket
table is expected to be contiguous; lookups outside it give no suggestion.
The top bracket may be open (max_turnover inf) and then charges its
min_percent.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from common.models import Client, TurnoverBracket, to_number


class FeeStatus(Enum):
    UNDERPRICED = 'underpriced'
    FAIR = 'fair'
    ABOVE_AVERAGE = 'above_average'


@dataclass(frozen=True)
class FeeSuggestion:
    bracket: TurnoverBracket
    suggested_percent: float
    suggested_fee_annual: float

    @property
    def suggested_fee_monthly(self) -> float:
        return self.suggested_fee_annual / 12


@dataclass(frozen=True)
class FeeAnalysis:
    """Client's monthly fee compared with its bracket's range."""
    bracket: TurnoverBracket
    min_recommended_fee: float  # monthly
    max_recommended_fee: float  # monthly
    status: FeeStatus
    suggestion: FeeSuggestion


def find_bracket(turnover: float, brackets: Iterable[TurnoverBracket]) -> Optional[TurnoverBracket]:
    """First bracket with min_turnover <= turnover <= max_turnover."""
    for bracket in brackets:
        if bracket.min_turnover <= turnover <= bracket.max_turnover:
            return bracket
    return None


def suggest_fee(turnover: float, brackets: Iterable[TurnoverBracket]) -> Optional[FeeSuggestion]:
    """
    Interpolated fee suggestion for a turnover.

    The percentage moves linearly from min_percent at the bracket's lower
    bound to max_percent at its upper bound.

    Returns:
        FeeSuggestion, or None when no bracket contains the turnover
    """
    try:
        turnover = float(turnover)
    except (TypeError, ValueError):
        return None
    if math.isnan(turnover) or math.isinf(turnover):
        return None

    bracket = find_bracket(turnover, brackets)
    if bracket is None:
        return None

    width = bracket.max_turnover - bracket.min_turnover
    if width <= 0 or turnover == bracket.min_turnover:
        percent = bracket.min_percent
    elif turnover == bracket.max_turnover:
        percent = bracket.max_percent
    else:
        position = (turnover - bracket.min_turnover) / width
        percent = bracket.min_percent + (bracket.max_percent - bracket.min_percent) * position

    return FeeSuggestion(
        bracket=bracket,
        suggested_percent=percent,
        suggested_fee_annual=turnover * percent,
    )


def analyze_fee(client: Client, brackets: Iterable[TurnoverBracket]) -> Optional[FeeAnalysis]:
    """Classify a client's monthly fee against its turnover bracket."""
    suggestion = suggest_fee(client.turnover, brackets)
    if suggestion is None:
        return None

    bracket = suggestion.bracket
    min_monthly = client.turnover * bracket.min_percent / 12
    max_monthly = client.turnover * bracket.max_percent / 12
    fee = to_number(client.monthly_fee)

    if fee < min_monthly:
        status = FeeStatus.UNDERPRICED
    elif fee > max_monthly:
        status = FeeStatus.ABOVE_AVERAGE
    else:
        status = FeeStatus.FAIR

    return FeeAnalysis(
        bracket=bracket,
        min_recommended_fee=min_monthly,
        max_recommended_fee=max_monthly,
        status=status,
        suggestion=suggestion,
    )
