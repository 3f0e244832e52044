"""Base data models."""
import math
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, List, Dict, Any
from enum import Enum


class Area(Enum):
    ACCOUNTING = 'Accounting'
    HR = 'HR'
    ADMINISTRATIVE = 'Administrative'
    CONSULTING = 'Consulting'
    TAXATION = 'Taxation'
    MANAGEMENT = 'Management'


class TaskType(Enum):
    OBLIGATION = 'Obligation'  # Gesetzliche Pflicht
    NEED = 'Need'
    EXTRA = 'Extra'


class MultiplierLogic(Enum):
    MANUAL = 'manual'
    EMPLOYEE_COUNT = 'employeeCount'
    DOCUMENT_COUNT = 'documentCount'
    ESTABLISHMENTS = 'establishments'
    BANKS = 'banks'


# Client attribute supplying the default multiplier
MULTIPLIER_ATTRIBUTES = {
    MultiplierLogic.EMPLOYEE_COUNT: 'employee_count',
    MultiplierLogic.DOCUMENT_COUNT: 'document_count',
    MultiplierLogic.ESTABLISHMENTS: 'establishments',
    MultiplierLogic.BANKS: 'banks',
}


def to_number(value: Any, allow_inf: bool = False) -> float:
    """
    Coerce any input to a non-negative float (0 otherwise).

    Infinity also becomes 0 unless allow_inf is set, which keeps +inf
    (open upper bounds).
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or number < 0:
        return 0.0
    if math.isinf(number) and not allow_inf:
        return 0.0
    return number


def optional_number(value: Any) -> Optional[float]:
    """Like to_number, but keeps None (= not set)."""
    if value is None or value == '':
        return None
    return to_number(value)


def _parse_date(value: Any) -> Optional[date]:
    if value is None or value == '':
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


@dataclass(frozen=True)
class TaskDefinition:
    """Catalog entry for a recurring unit of work."""
    id: str
    name: str
    area: Area
    type: TaskType = TaskType.OBLIGATION
    default_time_minutes: float = 0.0
    default_frequency_per_year: float = 0.0
    multiplier_logic: Optional[MultiplierLogic] = None  # None == manual

    @classmethod
    def from_dict(cls, data: Dict) -> "TaskDefinition":
        """Create from config dict (camelCase or snake_case keys)."""
        logic = data.get('multiplier_logic', data.get('multiplierLogic'))
        return cls(
            id=str(data['id']),
            name=data.get('name', ''),
            area=Area(data.get('area', Area.ACCOUNTING.value)),
            type=TaskType(data.get('type', TaskType.OBLIGATION.value)),
            default_time_minutes=to_number(
                data.get('default_time_minutes', data.get('defaultTimeMinutes'))
            ),
            default_frequency_per_year=to_number(
                data.get('default_frequency_per_year', data.get('defaultFrequencyPerYear'))
            ),
            multiplier_logic=MultiplierLogic(logic) if logic else None,
        )


@dataclass(frozen=True)
class ClientTaskOverride:
    """Client-specific replacement of multiplier, frequency and/or assignee."""
    task_id: str
    multiplier: Optional[float] = None
    frequency_per_year: Optional[float] = None
    assigned_staff_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict) -> "ClientTaskOverride":
        return cls(
            task_id=str(data.get('task_id', data.get('taskId'))),
            multiplier=optional_number(data.get('multiplier')),
            frequency_per_year=optional_number(
                data.get('frequency_per_year', data.get('frequencyPerYear'))
            ),
            assigned_staff_id=data.get('assigned_staff_id', data.get('assignedStaffId')) or None,
        )


@dataclass(frozen=True)
class ResponsibleStaff:
    """
    Normalized reference to a client's responsible staff member.

    Older records store the staff member's name instead of the id. The loader
    reconciles both forms once; `staff_id` is None when a legacy name matched
    nobody.
    """
    staff_id: Optional[str] = None
    legacy_name: Optional[str] = None

    @property
    def is_unmatched(self) -> bool:
        return self.staff_id is None and bool(self.legacy_name)

    @property
    def key(self) -> Optional[str]:
        """Owner key used in workload buckets."""
        return self.staff_id or self.legacy_name

    def refers_to(self, staff_id: Optional[str], staff_name: Optional[str] = None) -> bool:
        """
        True if this reference points at the given staff member.

        An unresolved raw value may hold either the id or the name.
        """
        if self.staff_id is not None and self.staff_id == staff_id:
            return True
        if self.legacy_name is None:
            return False
        return self.legacy_name in (staff_id, staff_name)

    def matches(self, staff: "Staff") -> bool:
        return self.refers_to(staff.id, staff.name)

    @classmethod
    def resolve(cls, raw: Optional[str], staff_list: List["Staff"]) -> "ResponsibleStaff":
        """Resolve a raw id-or-name value against the staff list."""
        if not raw:
            return cls()
        for s in staff_list:
            if s.id == raw:
                return cls(staff_id=s.id)
        for s in staff_list:
            if s.name == raw:
                return cls(staff_id=s.id, legacy_name=raw)
        return cls(legacy_name=raw)


@dataclass(frozen=True)
class Client:
    """Mandant (Buchhaltungskunde)."""
    id: str
    name: str
    monthly_fee: float = 0.0
    turnover: float = 0.0
    employee_count: float = 0.0
    document_count: float = 0.0
    establishments: float = 0.0
    banks: float = 0.0
    responsible: ResponsibleStaff = field(default_factory=ResponsibleStaff)
    call_time_balance: float = 0.0  # Minuten pro Monat
    travel_count: float = 0.0       # Besuche pro Monat
    tasks: List[ClientTaskOverride] = field(default_factory=list)

    # Meta
    status: str = 'active'
    contract_renewal_date: Optional[date] = None

    @classmethod
    def from_dict(cls, data: Dict, staff_list: Optional[List["Staff"]] = None) -> "Client":
        """Create from config dict; responsible staff is resolved against staff_list."""
        raw_responsible = data.get('responsible_staff', data.get('responsibleStaff'))
        return cls(
            id=str(data['id']),
            name=data.get('name', ''),
            monthly_fee=to_number(data.get('monthly_fee', data.get('monthlyFee'))),
            turnover=to_number(data.get('turnover')),
            employee_count=to_number(data.get('employee_count', data.get('employeeCount'))),
            document_count=to_number(data.get('document_count', data.get('documentCount'))),
            establishments=to_number(data.get('establishments')),
            banks=to_number(data.get('banks')),
            responsible=ResponsibleStaff.resolve(raw_responsible, staff_list or []),
            call_time_balance=to_number(data.get('call_time_balance', data.get('callTimeBalance'))),
            travel_count=to_number(data.get('travel_count', data.get('travelCount'))),
            tasks=[ClientTaskOverride.from_dict(t) for t in data.get('tasks') or []],
            status=data.get('status', 'active'),
            contract_renewal_date=_parse_date(
                data.get('contract_renewal_date', data.get('contractRenewalDate'))
            ),
        )


@dataclass(frozen=True)
class Staff:
    """Mitarbeiter mit Kosten- und Kapazitätsdaten."""
    id: str
    name: str
    role: str = ''
    base_salary: float = 0.0
    social_charges_percent: float = 0.0
    meal_allowance: float = 0.0
    other_monthly_costs: float = 0.0
    capacity_hours_per_month: float = 0.0
    hourly_cost: float = 0.0  # Cached; may be stale
    assigned_areas: frozenset = frozenset()

    @classmethod
    def from_dict(cls, data: Dict) -> "Staff":
        return cls(
            id=str(data['id']),
            name=data.get('name', ''),
            role=data.get('role', ''),
            base_salary=to_number(data.get('base_salary', data.get('baseSalary'))),
            social_charges_percent=to_number(
                data.get('social_charges_percent', data.get('socialChargesPercent'))
            ),
            meal_allowance=to_number(data.get('meal_allowance', data.get('mealAllowance'))),
            other_monthly_costs=to_number(
                data.get('other_monthly_costs', data.get('otherMonthlyCosts'))
            ),
            capacity_hours_per_month=to_number(
                data.get('capacity_hours_per_month', data.get('capacityHoursPerMonth'))
            ),
            hourly_cost=to_number(data.get('hourly_cost', data.get('hourlyCost'))),
            assigned_areas=frozenset(
                Area(a) for a in data.get('assigned_areas', data.get('assignedAreas')) or []
            ),
        )


@dataclass(frozen=True)
class TurnoverBracket:
    """Umsatzstaffel; percentages are fractions of turnover."""
    id: str
    min_turnover: float
    max_turnover: float
    min_percent: float
    max_percent: float

    @classmethod
    def from_dict(cls, data: Dict) -> "TurnoverBracket":
        """Create from config dict; max_turnover may be .inf for the top bracket."""
        return cls(
            id=str(data['id']),
            min_turnover=to_number(data.get('min_turnover', data.get('minTurnover'))),
            max_turnover=to_number(
                data.get('max_turnover', data.get('maxTurnover')), allow_inf=True
            ),
            min_percent=to_number(data.get('min_percent', data.get('minPercent'))),
            max_percent=to_number(data.get('max_percent', data.get('maxPercent'))),
        )
