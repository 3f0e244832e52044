"""
Costing Defaults
================
Every fallback value used by the costing engine, in one place.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict


@dataclass(frozen=True)
class CostingDefaults:
    """Fallback rates, unit conversions and thresholds."""
    # Hourly rate when neither staff nor area cost is resolvable
    fallback_hourly_rate: float = 25.0

    months_per_year: int = 12
    minutes_per_travel: float = 60.0

    # Client margin bands (percent)
    critical_margin: float = 10.0
    attention_margin: float = 30.0

    # Dashboard / alerts
    risk_margin: float = 15.0
    high_document_volume: float = 50.0
    high_volume_min_fee: float = 300.0
    renewal_window_days: int = 60
    expired_window_days: int = 30

    # Quotes
    target_margin: float = 30.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CostingDefaults":
        """Create from config dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in (data or {}).items() if k in known})


DEFAULTS = CostingDefaults()
