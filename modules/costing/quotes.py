"""
Quotes
======
Fee proposals for prospective clients, costed at area rates.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from common.models import (
    MultiplierLogic,
    MULTIPLIER_ATTRIBUTES,
    TaskDefinition,
    TaskType,
    TurnoverBracket,
    to_number,
)

from .brackets import FeeSuggestion, suggest_fee
from .defaults import CostingDefaults, DEFAULTS
from .profitability import area_rate


@dataclass
class QuoteItem:
    task_id: str
    quantity: float
    frequency: float

    @classmethod
    def from_dict(cls, data: Dict) -> "QuoteItem":
        return cls(
            task_id=str(data.get('task_id', data.get('taskId'))),
            quantity=to_number(data.get('quantity')),
            frequency=to_number(data.get('frequency')),
        )


@dataclass
class Quote:
    items: List[QuoteItem]
    target_margin: float
    total_annual_hours: float
    total_annual_cost: float
    recommended_annual_revenue: float
    fee_suggestion: Optional[FeeSuggestion] = None
    cost_by_task: Dict[str, float] = field(default_factory=dict)

    @property
    def recommended_monthly_fee(self) -> float:
        return self.recommended_annual_revenue / 12


def default_quantity(task: TaskDefinition, attributes: Mapping[str, float]) -> float:
    """Quantity for a task from prospect attributes (at least 1)."""
    logic = task.multiplier_logic
    if logic is None or logic is MultiplierLogic.MANUAL:
        return 1.0
    attribute = MULTIPLIER_ATTRIBUTES[logic]
    value = to_number(attributes.get(attribute))
    return value if value > 0 else 1.0


def default_quote_items(
    tasks: Iterable[TaskDefinition],
    attributes: Optional[Mapping[str, float]] = None,
) -> List[QuoteItem]:
    """Preselect every obligation in the catalog."""
    attributes = attributes or {}
    return [
        QuoteItem(
            task_id=task.id,
            quantity=default_quantity(task, attributes),
            frequency=task.default_frequency_per_year,
        )
        for task in tasks
        if task.type is TaskType.OBLIGATION
    ]


def build_quote(
    items: Iterable[QuoteItem],
    tasks: Iterable[TaskDefinition],
    area_costs: Mapping,
    target_margin: Optional[float] = None,
    turnover: float = 0.0,
    brackets: Iterable[TurnoverBracket] = (),
    defaults: Optional[CostingDefaults] = None,
) -> Quote:
    """
    Cost a list of quote items and derive the recommended fee.

    Recommended revenue is cost / (1 - margin/100); a margin of 100 % or more
    yields 0. Items referencing unknown tasks are ignored.
    """
    d = defaults or DEFAULTS
    margin = d.target_margin if target_margin is None else to_number(target_margin)
    catalog = {t.id: t for t in tasks}
    items = list(items)

    total_minutes = 0.0
    total_cost = 0.0
    cost_by_task: Dict[str, float] = {}
    for item in items:
        task = catalog.get(item.task_id)
        if task is None:
            continue
        minutes = task.default_time_minutes * to_number(item.quantity) * to_number(item.frequency)
        cost = minutes / 60 * area_rate(task.area, area_costs or {}, d)
        total_minutes += minutes
        total_cost += cost
        cost_by_task[task.id] = cost_by_task.get(task.id, 0.0) + cost

    recommended = total_cost / (1 - margin / 100) if margin < 100 else 0.0
    brackets = list(brackets)

    return Quote(
        items=items,
        target_margin=margin,
        total_annual_hours=total_minutes / 60,
        total_annual_cost=total_cost,
        recommended_annual_revenue=recommended,
        fee_suggestion=suggest_fee(turnover, brackets) if brackets else None,
        cost_by_task=cost_by_task,
    )
