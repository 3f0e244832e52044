"""
Multiplier Resolver
===================
Effective quantity and frequency of a catalog task for one client.
"""

from dataclasses import dataclass
from typing import Optional

from common.models import (
    Client,
    ClientTaskOverride,
    MultiplierLogic,
    MULTIPLIER_ATTRIBUTES,
    TaskDefinition,
    to_number,
)


@dataclass(frozen=True)
class Resolution:
    multiplier: float
    frequency: float


def find_override(client: Client, task_id: str) -> Optional[ClientTaskOverride]:
    """First override for task_id in the client's list (first occurrence wins)."""
    for override in client.tasks:
        if override.task_id == task_id:
            return override
    return None


def resolve_multiplier(
    task: TaskDefinition,
    override: Optional[ClientTaskOverride],
    client: Client,
) -> Resolution:
    """
    Resolve multiplier and frequency for a task.

    An override value that is set (0 included) always wins. Without one, the
    multiplier comes from the client attribute named by the task's
    multiplier logic; manual tasks default to 0.
    """
    if override is not None and override.multiplier is not None:
        multiplier = to_number(override.multiplier)
    elif task.multiplier_logic is None or task.multiplier_logic is MultiplierLogic.MANUAL:
        multiplier = 0.0
    else:
        attribute = MULTIPLIER_ATTRIBUTES[task.multiplier_logic]
        multiplier = to_number(getattr(client, attribute, None))

    if override is not None and override.frequency_per_year is not None:
        frequency = to_number(override.frequency_per_year)
    else:
        frequency = to_number(task.default_frequency_per_year)

    return Resolution(multiplier=multiplier, frequency=frequency)
