"""
Costing Loader
==============
Loads the task catalog, cost tables, staff and clients from YAML.

This is the data-load boundary of the costing engine: duplicate task
overrides are dropped here (first occurrence wins) and responsible staff
references are reconciled against the staff list once.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from common.models import Area, Client, Staff, TaskDefinition, TurnoverBracket, to_number

from .defaults import CostingDefaults

logger = logging.getLogger(__name__)

# Default config location
DEFAULT_CONFIG = Path(__file__).parent / "config.yaml"

# Cache for loaded config
_config_cache: Dict[str, Any] = {}


@dataclass
class Snapshot:
    """One consistent set of engine inputs."""
    tasks: List[TaskDefinition] = field(default_factory=list)
    staff: List[Staff] = field(default_factory=list)
    clients: List[Client] = field(default_factory=list)
    area_costs: Dict[Area, float] = field(default_factory=dict)
    brackets: List[TurnoverBracket] = field(default_factory=list)
    defaults: CostingDefaults = field(default_factory=CostingDefaults)

    def get_client(self, client_id: str) -> Client:
        for client in self.clients:
            if client.id == client_id:
                return client
        available = [c.id for c in self.clients]
        raise KeyError(f"Client '{client_id}' not found. Available: {available}")

    def get_staff(self, staff_id: str) -> Staff:
        for s in self.staff:
            if s.id == staff_id:
                return s
        available = [s.id for s in self.staff]
        raise KeyError(f"Staff '{staff_id}' not found. Available: {available}")


def _config_path(config_path: Optional[Path] = None) -> Path:
    if config_path:
        return Path(config_path)
    env = os.environ.get("COSTING_CONFIG")
    return Path(env) if env else DEFAULT_CONFIG


def _load_yaml(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load and cache YAML config."""
    path = _config_path(config_path)
    path_str = str(path)

    if path_str not in _config_cache:
        if not path.exists():
            raise FileNotFoundError(f"Costing config not found: {path}")

        with open(path, encoding="utf-8") as f:
            _config_cache[path_str] = yaml.safe_load(f) or {}
        logger.debug(f"Loaded costing config: {path}")

    return _config_cache[path_str]


def clear_cache():
    """Clear config cache (useful for testing)."""
    _config_cache.clear()


def load_tasks(config_path: Optional[Path] = None) -> List[TaskDefinition]:
    """Load the task catalog."""
    config = _load_yaml(config_path)
    return parse_tasks(config.get("tasks") or [])


def load_area_costs(config_path: Optional[Path] = None) -> Dict[Area, float]:
    """Load hourly cost per area."""
    config = _load_yaml(config_path)
    return parse_area_costs(config.get("area_costs") or {})


def load_brackets(config_path: Optional[Path] = None) -> List[TurnoverBracket]:
    """Load turnover brackets, sorted by lower bound."""
    config = _load_yaml(config_path)
    return parse_brackets(config.get("turnover_brackets") or [])


def load_defaults(config_path: Optional[Path] = None) -> CostingDefaults:
    config = _load_yaml(config_path)
    return CostingDefaults.from_dict(config.get("defaults") or {})


def parse_tasks(data: List[Dict]) -> List[TaskDefinition]:
    tasks = []
    seen = set()
    for entry in data:
        task = TaskDefinition.from_dict(entry)
        if task.id in seen:
            logger.warning(f"Duplicate task id in catalog: {task.id} (keeping first)")
            continue
        seen.add(task.id)
        tasks.append(task)
    return tasks


def parse_area_costs(data: Dict[str, Any]) -> Dict[Area, float]:
    return {Area(key): to_number(value) for key, value in data.items()}


def parse_brackets(data: List[Dict]) -> List[TurnoverBracket]:
    brackets = sorted(
        (TurnoverBracket.from_dict(entry) for entry in data),
        key=lambda b: b.min_turnover,
    )
    for prev, nxt in zip(brackets, brackets[1:]):
        if nxt.min_turnover <= prev.max_turnover:
            logger.warning(f"Turnover brackets overlap: {prev.id} / {nxt.id}")
    return brackets


def parse_staff(data: List[Dict]) -> List[Staff]:
    return [Staff.from_dict(entry) for entry in data]


def dedupe_overrides(client_data: Dict) -> Dict:
    """Drop repeated task overrides from a raw client record."""
    overrides = client_data.get("tasks") or []
    kept = []
    seen = set()
    for override in overrides:
        task_id = str(override.get("task_id", override.get("taskId")))
        if task_id in seen:
            logger.warning(
                f"Client {client_data.get('id')}: duplicate override for task {task_id} ignored"
            )
            continue
        seen.add(task_id)
        kept.append(override)

    if len(kept) == len(overrides):
        return client_data
    return {**client_data, "tasks": kept}


def parse_clients(data: List[Dict], staff: List[Staff]) -> List[Client]:
    """Create clients, reconciling responsible staff against the staff list."""
    clients = []
    for entry in data:
        client = Client.from_dict(dedupe_overrides(entry), staff)
        if client.responsible.is_unmatched:
            logger.warning(
                f"Client {client.id}: responsible staff '{client.responsible.legacy_name}' "
                f"matches no staff member"
            )
        clients.append(client)
    return clients


def parse_snapshot(
    data: Dict[str, Any],
    base: Optional[Dict[str, Any]] = None,
) -> Snapshot:
    """
    Build a Snapshot from a config dict.

    Args:
        data: Dict with any of 'tasks', 'staff', 'clients', 'area_costs',
            'turnover_brackets', 'defaults'
        base: Dict supplying sections missing from data

    Returns:
        Snapshot
    """
    merged = dict(base or {})
    merged.update({k: v for k, v in data.items() if v is not None})

    staff = parse_staff(merged.get("staff") or [])
    snapshot = Snapshot(
        tasks=parse_tasks(merged.get("tasks") or []),
        staff=staff,
        clients=parse_clients(merged.get("clients") or [], staff),
        area_costs=parse_area_costs(merged.get("area_costs") or {}),
        brackets=parse_brackets(merged.get("turnover_brackets") or []),
        defaults=CostingDefaults.from_dict(merged.get("defaults") or {}),
    )
    logger.info(
        f"Snapshot: {len(snapshot.tasks)} tasks, {len(snapshot.staff)} staff, "
        f"{len(snapshot.clients)} clients, {len(snapshot.brackets)} brackets"
    )
    return snapshot


def load_snapshot(
    data_path: Optional[Path] = None,
    config_path: Optional[Path] = None,
) -> Snapshot:
    """
    Load a snapshot.

    The data file (YAML or JSON) may contain any subset of sections; missing
    sections come from the costing config.
    """
    base = _load_yaml(config_path)
    if data_path is None:
        return parse_snapshot(base)

    path = Path(data_path)
    if not path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {path}")
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return parse_snapshot(data, base=base)
