"""
Costing Module
==============
Task costing and profitability engine for the accounting practice.

This module provides:
- Multiplier resolution for catalog tasks and client overrides
- Annual workload per client and per staff member
- Staff hourly cost, client profitability and staff statistics
- Turnover-bracket fee suggestions and quotes
- YAML-based loading of catalog, cost tables, staff and clients

Usage:
    from modules.costing import (
        load_snapshot,
        compute_client_profitability,
        compute_staff_stats,
        suggest_fee,
    )

    snap = load_snapshot()
    client = snap.get_client("c1")
    result = compute_client_profitability(
        client, snap.tasks, snap.area_costs, snap.staff
    )
    print(result.profitability, result.margin_band)

    fee = suggest_fee(37500, snap.brackets)
    print(fee.suggested_percent)  # 0.115

All computations are pure functions of their inputs; nothing here logs or
raises for bad numbers. Loading is the only place that touches files.
"""

from .defaults import CostingDefaults, DEFAULTS

from .resolver import Resolution, find_override, resolve_multiplier

from .workload import (
    TaskContribution,
    task_contributions,
    operational_minutes,
    aggregate_annual_minutes,
    workload_by_owner,
    staff_annual_minutes,
)

from .profitability import (
    MarginBand,
    ClientProfitability,
    StaffStats,
    compute_staff_hourly_cost,
    refresh_hourly_cost,
    effective_hourly_cost,
    compute_client_profitability,
    compute_staff_stats,
    portfolio,
)

from .brackets import (
    FeeStatus,
    FeeSuggestion,
    FeeAnalysis,
    find_bracket,
    suggest_fee,
    analyze_fee,
)

from .quotes import Quote, QuoteItem, build_quote, default_quote_items

from .loader import Snapshot, load_snapshot, parse_snapshot, clear_cache


__all__ = [
    "CostingDefaults",
    "DEFAULTS",
    # Resolver
    "Resolution",
    "find_override",
    "resolve_multiplier",
    # Workload
    "TaskContribution",
    "task_contributions",
    "operational_minutes",
    "aggregate_annual_minutes",
    "workload_by_owner",
    "staff_annual_minutes",
    # Profitability
    "MarginBand",
    "ClientProfitability",
    "StaffStats",
    "compute_staff_hourly_cost",
    "refresh_hourly_cost",
    "effective_hourly_cost",
    "compute_client_profitability",
    "compute_staff_stats",
    "portfolio",
    # Brackets
    "FeeStatus",
    "FeeSuggestion",
    "FeeAnalysis",
    "find_bracket",
    "suggest_fee",
    "analyze_fee",
    # Quotes
    "Quote",
    "QuoteItem",
    "build_quote",
    "default_quote_items",
    # Loader
    "Snapshot",
    "load_snapshot",
    "parse_snapshot",
    "clear_cache",
]
