"""
Unit Tests for common/models/

Tests:
- Numeric coercion
- from_dict constructors (snake_case and camelCase)
- Responsible staff reconciliation
"""

import math
from datetime import date

import pytest

from common.models import (
    Area,
    Client,
    ClientTaskOverride,
    MultiplierLogic,
    ResponsibleStaff,
    Staff,
    TaskDefinition,
    TaskType,
    TurnoverBracket,
    optional_number,
    to_number,
)


class TestNumberCoercion:
    """Invalid numbers become 0, never an exception."""

    @pytest.mark.parametrize("value", [None, "", "abc", float("nan"), float("inf"), -5, True, [1]])
    def test_invalid_values_are_zero(self, value):
        """Anything that is not a finite non-negative number should become 0."""
        assert to_number(value) == 0.0

    def test_valid_values(self):
        """Numbers and numeric strings should pass through."""
        assert to_number(3) == 3.0
        assert to_number("4.5") == 4.5
        assert to_number(0) == 0.0

    def test_allow_inf_keeps_positive_infinity(self):
        """allow_inf should keep +inf but still reject NaN and negatives."""
        assert to_number(float("inf"), allow_inf=True) == math.inf
        assert to_number(".inf", allow_inf=True) == 0.0  # not a float literal
        assert to_number("inf", allow_inf=True) == math.inf
        assert to_number(float("-inf"), allow_inf=True) == 0.0
        assert to_number(float("nan"), allow_inf=True) == 0.0

    def test_optional_number_keeps_none(self):
        """optional_number should keep 'not set' apart from 0."""
        assert optional_number(None) is None
        assert optional_number("") is None
        assert optional_number(0) == 0.0
        assert optional_number("nan") == 0.0


class TestTaskDefinition:
    """Test TaskDefinition parsing."""

    def test_from_dict_snake_case(self):
        """TaskDefinition should parse snake_case keys."""
        task = TaskDefinition.from_dict({
            "id": "t1", "name": "Book documents", "area": "Accounting", "type": "Obligation",
            "default_time_minutes": 4, "default_frequency_per_year": 12,
            "multiplier_logic": "documentCount",
        })
        assert task.area is Area.ACCOUNTING
        assert task.type is TaskType.OBLIGATION
        assert task.default_time_minutes == 4
        assert task.multiplier_logic is MultiplierLogic.DOCUMENT_COUNT

    def test_from_dict_camel_case(self):
        """TaskDefinition should parse camelCase keys."""
        task = TaskDefinition.from_dict({
            "id": "t30", "area": "HR", "defaultTimeMinutes": 15,
            "defaultFrequencyPerYear": 14, "multiplierLogic": "employeeCount",
        })
        assert task.default_frequency_per_year == 14
        assert task.multiplier_logic is MultiplierLogic.EMPLOYEE_COUNT

    def test_missing_logic_is_none(self):
        """Missing multiplier logic should mean manual (None)."""
        task = TaskDefinition.from_dict({"id": "t3", "area": "Accounting"})
        assert task.multiplier_logic is None

    def test_unknown_area_raises(self):
        """Unknown areas should be rejected."""
        with pytest.raises(ValueError):
            TaskDefinition.from_dict({"id": "t", "area": "Astrology"})

    def test_is_immutable(self):
        """Catalog entries should be frozen."""
        task = TaskDefinition(id="t", name="x", area=Area.HR)
        with pytest.raises(Exception):
            task.name = "y"


class TestClientTaskOverride:
    """Test ClientTaskOverride parsing."""

    def test_zero_multiplier_is_present(self):
        """An explicit 0 multiplier should be kept, not treated as unset."""
        ov = ClientTaskOverride.from_dict({"task_id": "t1", "multiplier": 0})
        assert ov.multiplier == 0.0
        assert ov.frequency_per_year is None

    def test_empty_assignee_is_none(self):
        """An empty assignee string should mean no assignee."""
        ov = ClientTaskOverride.from_dict({"taskId": "t1", "assignedStaffId": ""})
        assert ov.assigned_staff_id is None


class TestResponsibleStaff:
    """Responsible staff may be stored as id or as legacy name."""

    @pytest.fixture
    def team(self):
        return [Staff(id="s1", name="Ana"), Staff(id="s2", name="Bruno")]

    def test_resolve_by_id(self, team):
        """A raw id should resolve to the staff id."""
        ref = ResponsibleStaff.resolve("s1", team)
        assert ref.staff_id == "s1"
        assert ref.legacy_name is None
        assert not ref.is_unmatched

    def test_resolve_by_name(self, team):
        """A legacy name should resolve to the matching staff id."""
        ref = ResponsibleStaff.resolve("Bruno", team)
        assert ref.staff_id == "s2"
        assert ref.legacy_name == "Bruno"
        assert not ref.is_unmatched

    def test_unmatched_name(self, team):
        """A name matching nobody should stay as unmatched legacy name."""
        ref = ResponsibleStaff.resolve("Old Manager", team)
        assert ref.staff_id is None
        assert ref.is_unmatched
        assert ref.key == "Old Manager"

    def test_empty(self, team):
        """No raw value should give an empty reference."""
        ref = ResponsibleStaff.resolve(None, team)
        assert ref.key is None
        assert not ref.is_unmatched

    def test_matches_id_or_literal_name(self, team):
        """matches should accept the id or the literal name."""
        assert ResponsibleStaff(staff_id="s1").matches(team[0])
        assert ResponsibleStaff(legacy_name="Ana").matches(team[0])
        assert not ResponsibleStaff(staff_id="s1").matches(team[1])

    def test_unresolved_raw_id_matches(self, team):
        """A raw id parsed without a staff list should still match its owner."""
        ref = ResponsibleStaff.resolve("s1", [])
        assert ref.legacy_name == "s1"
        assert ref.matches(team[0])
        assert ref.refers_to("s1", "Ana")
        assert not ref.matches(team[1])


class TestClientAndStaff:
    """Test Client, Staff and TurnoverBracket parsing."""

    def test_client_from_dict(self):
        """Client should coerce bad numbers and resolve staff by name."""
        staff = [Staff(id="s1", name="Ana")]
        client = Client.from_dict({
            "id": "c1", "name": "Café", "responsibleStaff": "Ana",
            "monthlyFee": "250", "documentCount": None, "banks": float("nan"),
            "contractRenewalDate": "2024-12-01T00:00:00Z",
            "tasks": [{"taskId": "t1", "multiplier": 85}],
        }, staff)
        assert client.monthly_fee == 250.0
        assert client.document_count == 0.0
        assert client.banks == 0.0
        assert client.responsible.staff_id == "s1"
        assert client.contract_renewal_date == date(2024, 12, 1)
        assert client.tasks[0].multiplier == 85

    def test_client_with_empty_tasks_key(self):
        """A 'tasks:' key without value should give no overrides."""
        client = Client.from_dict({"id": "c1", "name": "Café", "tasks": None})
        assert client.tasks == []

    def test_staff_from_dict(self):
        """Staff should parse camelCase keys and assigned areas."""
        s = Staff.from_dict({
            "id": "s1", "name": "Ana", "baseSalary": 2000, "socialChargesPercent": 23.75,
            "capacityHoursPerMonth": 140, "hourlyCost": 35, "assignedAreas": ["Accounting", "Taxation"],
        })
        assert s.base_salary == 2000
        assert s.assigned_areas == frozenset({Area.ACCOUNTING, Area.TAXATION})

    def test_bracket_from_dict(self):
        """TurnoverBracket should parse camelCase keys."""
        b = TurnoverBracket.from_dict({
            "id": "tb2", "minTurnover": 25000, "maxTurnover": 49999.99,
            "minPercent": 0.08, "maxPercent": 0.15,
        })
        assert b.min_turnover == 25000
        assert math.isclose(b.max_percent, 0.15)

    def test_open_top_bracket(self):
        """An infinite upper bound should survive parsing."""
        b = TurnoverBracket.from_dict({
            "id": "top", "min_turnover": 2000000, "max_turnover": float("inf"),
            "min_percent": 0.01, "max_percent": 0.01,
        })
        assert b.max_turnover == math.inf
