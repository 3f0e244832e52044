"""Controlling service."""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Dict

from modules.costing import (
    ClientProfitability,
    CostingDefaults,
    FeeStatus,
    Snapshot,
    StaffStats,
    analyze_fee,
    compute_client_profitability,
    compute_staff_stats,
    workload_by_owner,
)

logger = logging.getLogger(__name__)


@dataclass
class FinancialSummary:
    """Practice-wide figures over one year."""
    total_revenue: float
    total_cost: float
    margin: float

    profitable_clients: int
    risk_clients: int

    clients: List[ClientProfitability] = field(default_factory=list)
    staff: List[StaffStats] = field(default_factory=list)


@dataclass
class Alert:
    """Dashboard notification."""
    id: str
    type: str  # 'critical' | 'warning' | 'info'
    title: str
    message: str
    date: date
    client_id: Optional[str] = None


class ControllingService:
    """Service for profitability analysis and reporting."""

    def __init__(self, snapshot: Snapshot, defaults: Optional[CostingDefaults] = None):
        self.snapshot = snapshot
        self.defaults = defaults or snapshot.defaults

    def client_profitability(self, client) -> ClientProfitability:
        s = self.snapshot
        return compute_client_profitability(
            client, s.tasks, s.area_costs, s.staff, self.defaults
        )

    def client_overview(self) -> List[ClientProfitability]:
        """Profitability of every client, lowest margin first."""
        results = [self.client_profitability(c) for c in self.snapshot.clients]
        return sorted(results, key=lambda r: r.profitability)

    def staff_overview(self) -> List[StaffStats]:
        """Statistics for every staff member, lowest profitability first."""
        s = self.snapshot
        stats = [
            compute_staff_stats(member, s.clients, s.tasks, s.area_costs, s.staff, self.defaults)
            for member in s.staff
        ]
        return sorted(stats, key=lambda st: st.profitability)

    def get_summary(self) -> FinancialSummary:
        """Totals, margin and risk counts for the whole practice."""
        clients = self.client_overview()
        revenue = sum(c.total_annual_revenue for c in clients)
        cost = sum(c.total_annual_cost for c in clients)
        risk = sum(1 for c in clients if c.profitability < self.defaults.risk_margin)

        summary = FinancialSummary(
            total_revenue=revenue,
            total_cost=cost,
            margin=(revenue - cost) / revenue * 100 if revenue > 0 else 0.0,
            profitable_clients=len(clients) - risk,
            risk_clients=risk,
            clients=clients,
            staff=self.staff_overview(),
        )
        logger.info(
            f"Summary: {len(clients)} clients, revenue {revenue:.2f}, "
            f"cost {cost:.2f}, {risk} at risk"
        )
        return summary

    def staff_distribution(self, client_id: str) -> Dict[Optional[str], float]:
        """Annual hours per staff member for one client, largest first."""
        client = self.snapshot.get_client(client_id)
        minutes = workload_by_owner(self.snapshot.tasks, client, defaults=self.defaults)
        hours = {owner: m / 60 for owner, m in minutes.items() if m > 0}
        return dict(sorted(hours.items(), key=lambda kv: kv[1], reverse=True))

    def generate_alerts(self, today: Optional[date] = None) -> List[Alert]:
        """Margin, pricing, volume and contract renewal alerts."""
        today = today or date.today()
        d = self.defaults
        alerts: List[Alert] = []

        for client in self.snapshot.clients:
            result = self.client_profitability(client)
            if result.profitability < d.risk_margin:
                alerts.append(Alert(
                    id=f"prof-{client.id}",
                    type="critical",
                    title="Critical profitability",
                    message=f"{client.name} has a margin of {result.profitability:.1f}%.",
                    date=today,
                    client_id=client.id,
                ))

            analysis = analyze_fee(client, self.snapshot.brackets)
            if analysis is not None and analysis.status is FeeStatus.UNDERPRICED:
                alerts.append(Alert(
                    id=f"fair-{client.id}",
                    type="warning",
                    title="Fee below turnover bracket",
                    message=(
                        f"{client.name} pays {client.monthly_fee:.0f}, turnover suggests "
                        f"at least {analysis.min_recommended_fee:.0f} per month."
                    ),
                    date=today,
                    client_id=client.id,
                ))

        for client in self.snapshot.clients:
            renewal = client.contract_renewal_date
            if renewal is None:
                continue
            days = (renewal - today).days
            if 0 < days <= d.renewal_window_days:
                alerts.append(Alert(
                    id=f"renew-{client.id}",
                    type="info",
                    title="Contract renewal",
                    message=f"Contract of {client.name} renews in {days} days ({renewal.isoformat()}).",
                    date=today,
                    client_id=client.id,
                ))
            elif -d.expired_window_days < days <= 0:
                alerts.append(Alert(
                    id=f"expired-{client.id}",
                    type="warning",
                    title="Contract expired",
                    message=f"Contract of {client.name} expired on {renewal.isoformat()}.",
                    date=today,
                    client_id=client.id,
                ))

        for client in self.snapshot.clients:
            if (client.document_count > d.high_document_volume
                    and client.monthly_fee < d.high_volume_min_fee):
                alerts.append(Alert(
                    id=f"vol-{client.id}",
                    type="warning",
                    title="Volume vs. fee",
                    message=(
                        f"{client.name} has a high volume ({client.document_count:.0f} docs) "
                        f"but pays less than {d.high_volume_min_fee:.0f}."
                    ),
                    date=today,
                    client_id=client.id,
                ))

        logger.info(f"Generated {len(alerts)} alerts")
        return alerts
