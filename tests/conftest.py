"""
Backoffice Test Configuration

Shared fixtures for all tests.
"""
import pytest
import yaml
from typing import List

from common.models import Area, Client, MultiplierLogic, Staff, TaskDefinition, TurnoverBracket
from modules.costing import Snapshot, clear_cache, parse_snapshot
from tests.fixtures.costing import SAMPLE_SNAPSHOT


# =============================================================================
# FIXTURES: Sample Data
# =============================================================================

@pytest.fixture
def snapshot() -> Snapshot:
    """Parsed sample snapshot (see tests/fixtures/costing.py)."""
    return parse_snapshot(SAMPLE_SNAPSHOT)


@pytest.fixture
def tasks(snapshot) -> List[TaskDefinition]:
    return snapshot.tasks


@pytest.fixture
def staff(snapshot) -> List[Staff]:
    return snapshot.staff


@pytest.fixture
def clients(snapshot) -> List[Client]:
    return snapshot.clients


@pytest.fixture
def area_costs(snapshot):
    return snapshot.area_costs


@pytest.fixture
def brackets(snapshot) -> List[TurnoverBracket]:
    return snapshot.brackets


@pytest.fixture
def doc_task() -> TaskDefinition:
    """Document booking: 4 min per document, monthly."""
    return TaskDefinition(
        id="docs",
        name="Book documents",
        area=Area.ACCOUNTING,
        default_time_minutes=4,
        default_frequency_per_year=12,
        multiplier_logic=MultiplierLogic.DOCUMENT_COUNT,
    )


# =============================================================================
# FIXTURES: Config files
# =============================================================================

@pytest.fixture
def config_file(tmp_path):
    """Write the sample snapshot as costing config."""
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(SAMPLE_SNAPSHOT, allow_unicode=True), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _clear_costing_cache():
    """Loader caches by path; start every test clean."""
    clear_cache()
    yield
    clear_cache()
