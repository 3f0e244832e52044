"""Shared data models across modules."""

from .base import (
    Area,
    TaskType,
    MultiplierLogic,
    MULTIPLIER_ATTRIBUTES,
    TaskDefinition,
    ClientTaskOverride,
    ResponsibleStaff,
    Client,
    Staff,
    TurnoverBracket,
    to_number,
    optional_number,
)

__all__ = [
    'Area',
    'TaskType',
    'MultiplierLogic',
    'MULTIPLIER_ATTRIBUTES',
    'TaskDefinition',
    'ClientTaskOverride',
    'ResponsibleStaff',
    'Client',
    'Staff',
    'TurnoverBracket',
    'to_number',
    'optional_number',
]
