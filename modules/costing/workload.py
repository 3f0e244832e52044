"""
Workload Aggregator
===================
Annual minutes per client, split by the staff member who owns each task.

Ownership: an override's assigned staff member owns that task; everything
else belongs to the client's responsible staff member. Call and travel time
(operational time) is always attributed to the responsible staff member.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from common.models import Client, Staff, TaskDefinition, to_number

from .defaults import CostingDefaults, DEFAULTS
from .resolver import Resolution, find_override, resolve_multiplier


@dataclass(frozen=True)
class TaskContribution:
    """One catalog task's annual workload for one client."""
    task: TaskDefinition
    resolution: Resolution
    owner: Optional[str]  # staff id, unmatched legacy name, or None
    minutes: float

    @property
    def hours(self) -> float:
        return self.minutes / 60


def _owns(owner: Optional[str], staff_id: Optional[str], staff_name: Optional[str] = None) -> bool:
    if owner is None:
        return False
    return owner == staff_id or (staff_name is not None and owner == staff_name)


def _is_responsible(client: Client, staff_id: Optional[str], staff_name: Optional[str] = None) -> bool:
    return client.responsible.refers_to(staff_id, staff_name)


def task_contributions(tasks: Iterable[TaskDefinition], client: Client) -> List[TaskContribution]:
    """All positive task contributions for a client, in catalog order."""
    contributions = []
    for task in tasks:
        override = find_override(client, task.id)
        resolution = resolve_multiplier(task, override, client)
        if resolution.multiplier <= 0:
            continue

        if override is not None and override.assigned_staff_id:
            owner = override.assigned_staff_id
        else:
            owner = client.responsible.key

        minutes = task.default_time_minutes * resolution.multiplier * resolution.frequency
        contributions.append(TaskContribution(
            task=task,
            resolution=resolution,
            owner=owner,
            minutes=max(0.0, minutes),
        ))
    return contributions


def operational_minutes(client: Client, defaults: Optional[CostingDefaults] = None) -> float:
    """Yearly call and travel minutes of a client."""
    d = defaults or DEFAULTS
    return (
        to_number(client.call_time_balance) * d.months_per_year
        + to_number(client.travel_count) * d.minutes_per_travel
    )


def aggregate_annual_minutes(
    tasks: Iterable[TaskDefinition],
    client: Client,
    target_staff_id: Optional[str] = None,
    include_operational: bool = False,
    target_staff_name: Optional[str] = None,
    defaults: Optional[CostingDefaults] = None,
) -> float:
    """
    Annual minutes of a client's tasks.

    Args:
        tasks: Task catalog
        client: Client to aggregate
        target_staff_id: Only count work owned by this staff member
            (None = whole client)
        include_operational: Add call/travel time for the responsible
            staff member (or always, for whole-client totals)
        target_staff_name: Also match owners recorded by legacy name

    Returns:
        Annual minutes (never negative)
    """
    total = 0.0
    for c in task_contributions(tasks, client):
        if target_staff_id is None and target_staff_name is None:
            total += c.minutes
        elif _owns(c.owner, target_staff_id, target_staff_name):
            total += c.minutes

    if include_operational:
        whole_client = target_staff_id is None and target_staff_name is None
        if whole_client or _is_responsible(client, target_staff_id, target_staff_name):
            total += operational_minutes(client, defaults)

    return total


def workload_by_owner(
    tasks: Iterable[TaskDefinition],
    client: Client,
    include_operational: bool = True,
    defaults: Optional[CostingDefaults] = None,
) -> Dict[Optional[str], float]:
    """
    Split a client's annual minutes by owner.

    Work without an owner lands in the None bucket, so the buckets always
    sum to the whole-client total.
    """
    buckets: Dict[Optional[str], float] = {}
    for c in task_contributions(tasks, client):
        buckets[c.owner] = buckets.get(c.owner, 0.0) + c.minutes

    if include_operational:
        minutes = operational_minutes(client, defaults)
        if minutes > 0:
            owner = client.responsible.key
            buckets[owner] = buckets.get(owner, 0.0) + minutes

    return buckets


def staff_annual_minutes(
    staff: Staff,
    clients: Iterable[Client],
    tasks: Iterable[TaskDefinition],
    defaults: Optional[CostingDefaults] = None,
) -> float:
    """A staff member's annual minutes over all clients, operational time included."""
    tasks = list(tasks)
    return sum(
        aggregate_annual_minutes(
            tasks,
            client,
            target_staff_id=staff.id,
            include_operational=True,
            target_staff_name=staff.name,
            defaults=defaults,
        )
        for client in clients
    )
