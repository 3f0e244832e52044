"""
Cost & Profitability
====================
Hours, cost and margin for clients and staff members.
"""

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional

from common.models import Area, Client, Staff, TaskDefinition, to_number

from .defaults import CostingDefaults, DEFAULTS
from .workload import operational_minutes, staff_annual_minutes, task_contributions


class MarginBand(Enum):
    CRITICAL = 'critical'    # Neu verhandeln
    ATTENTION = 'attention'  # Beobachten
    HEALTHY = 'healthy'


@dataclass
class ClientProfitability:
    """Yearly figures for one client."""
    client_id: str
    total_annual_hours: float
    task_hours: float
    operational_hours: float
    total_annual_cost: float
    total_annual_revenue: float
    profitability: float
    hourly_return: float
    margin_band: MarginBand
    used_hourly_rate: float  # Responsible staff (or fallback) rate
    cost_by_owner: Dict[Optional[str], float] = field(default_factory=dict)

    @property
    def profit(self) -> float:
        return self.total_annual_revenue - self.total_annual_cost


@dataclass
class StaffStats:
    """Workload and portfolio figures for one staff member."""
    staff_id: str
    staff_name: str
    client_count: int
    allocated_hours_month: float
    capacity_utilization: float
    total_revenue: float
    total_cost: float
    profitability: float


def compute_staff_hourly_cost(staff: Staff) -> float:
    """Fully loaded hourly cost from salary, charges and capacity."""
    capacity = staff.capacity_hours_per_month
    if capacity <= 0:
        return 0.0
    monthly = (
        staff.base_salary
        + staff.base_salary * staff.social_charges_percent / 100
        + staff.meal_allowance
        + staff.other_monthly_costs
    )
    return round(monthly / capacity, 2)


def refresh_hourly_cost(staff: Staff) -> Staff:
    """Copy of staff with the cached hourly_cost recomputed."""
    return dataclasses.replace(staff, hourly_cost=compute_staff_hourly_cost(staff))


def effective_hourly_cost(staff: Staff) -> float:
    """Recomputed cost when salary data allows it, else the cached value."""
    computed = compute_staff_hourly_cost(staff)
    return computed if computed > 0 else staff.hourly_cost


def margin_band(profitability: float, defaults: Optional[CostingDefaults] = None) -> MarginBand:
    d = defaults or DEFAULTS
    if profitability < d.critical_margin:
        return MarginBand.CRITICAL
    if profitability < d.attention_margin:
        return MarginBand.ATTENTION
    return MarginBand.HEALTHY


def _margin(revenue: float, cost: float) -> float:
    return (revenue - cost) / revenue * 100 if revenue > 0 else 0.0


def area_rate(area: Area, area_costs: Mapping, defaults: CostingDefaults) -> float:
    rate = area_costs.get(area) or area_costs.get(area.value)
    return rate if rate else defaults.fallback_hourly_rate


def compute_client_profitability(
    client: Client,
    tasks: Iterable[TaskDefinition],
    area_costs: Mapping,
    staff_list: Iterable[Staff] = (),
    defaults: Optional[CostingDefaults] = None,
) -> ClientProfitability:
    """
    Cost and margin of a client over one year.

    Each task is costed at its owner's hourly cost; tasks whose owner is not
    in staff_list fall back to the area cost of the task. Call and travel
    time is costed at the responsible staff member's rate.

    Args:
        client: Client to evaluate
        tasks: Task catalog
        area_costs: Hourly cost per Area (enum or its value)
        staff_list: Known staff members
        defaults: Fallback configuration

    Returns:
        ClientProfitability
    """
    d = defaults or DEFAULTS
    area_costs = area_costs or {}
    rates = {s.id: effective_hourly_cost(s) for s in staff_list}

    manager_id = client.responsible.staff_id
    manager_rate = rates.get(manager_id) if manager_id else None
    base_rate = manager_rate if manager_rate is not None else area_rate(Area.ACCOUNTING, area_costs, d)

    cost_by_owner: Dict[Optional[str], float] = {}
    task_minutes = 0.0
    total_cost = 0.0

    for c in task_contributions(tasks, client):
        rate = rates.get(c.owner) if c.owner else None
        if rate is None:
            rate = area_rate(c.task.area, area_costs, d)
        cost = c.hours * rate
        task_minutes += c.minutes
        total_cost += cost
        cost_by_owner[c.owner] = cost_by_owner.get(c.owner, 0.0) + cost

    op_minutes = operational_minutes(client, d)
    if op_minutes > 0:
        op_cost = op_minutes / 60 * base_rate
        total_cost += op_cost
        owner = client.responsible.key
        cost_by_owner[owner] = cost_by_owner.get(owner, 0.0) + op_cost

    total_hours = (task_minutes + op_minutes) / 60
    revenue = to_number(client.monthly_fee) * d.months_per_year
    profitability = _margin(revenue, total_cost)

    return ClientProfitability(
        client_id=client.id,
        total_annual_hours=total_hours,
        task_hours=task_minutes / 60,
        operational_hours=op_minutes / 60,
        total_annual_cost=total_cost,
        total_annual_revenue=revenue,
        profitability=profitability,
        hourly_return=revenue / total_hours if total_hours > 0 else 0.0,
        margin_band=margin_band(profitability, d),
        used_hourly_rate=base_rate,
        cost_by_owner=cost_by_owner,
    )


def portfolio(staff: Staff, clients: Iterable[Client]) -> List[Client]:
    """Clients for which the staff member is responsible."""
    return [c for c in clients if c.responsible.matches(staff)]


def compute_staff_stats(
    staff_member: Staff,
    clients: Iterable[Client],
    tasks: Iterable[TaskDefinition],
    area_costs: Optional[Mapping] = None,
    staff_list: Optional[Iterable[Staff]] = None,
    defaults: Optional[CostingDefaults] = None,
) -> StaffStats:
    """
    Workload, utilization and portfolio margin of a staff member.

    Allocated hours cover every task the member owns across all clients plus
    the operational time of their own portfolio. Revenue and cost are those
    of the portfolio clients.
    """
    d = defaults or DEFAULTS
    clients = list(clients)
    tasks = list(tasks)
    staff_list = list(staff_list) if staff_list is not None else [staff_member]

    minutes = staff_annual_minutes(staff_member, clients, tasks, d)
    allocated_hours_month = minutes / 60 / d.months_per_year
    capacity = staff_member.capacity_hours_per_month
    utilization = allocated_hours_month / capacity * 100 if capacity > 0 else 0.0

    own_clients = portfolio(staff_member, clients)
    revenue = 0.0
    cost = 0.0
    for client in own_clients:
        result = compute_client_profitability(client, tasks, area_costs or {}, staff_list, d)
        revenue += result.total_annual_revenue
        cost += result.total_annual_cost

    return StaffStats(
        staff_id=staff_member.id,
        staff_name=staff_member.name,
        client_count=len(own_clients),
        allocated_hours_month=allocated_hours_month,
        capacity_utilization=utilization,
        total_revenue=revenue,
        total_cost=cost,
        profitability=_margin(revenue, cost),
    )
