"""
Unit Tests for modules/controlling/

Tests:
- Practice summary and sorting
- Staff distribution per client
- Alerts (margin, pricing, volume, renewal)
- CLI output
"""

from datetime import date

import pytest

from modules.controlling.service import ControllingService
from modules.costing import parse_snapshot
from tests.fixtures.costing import SAMPLE_SNAPSHOT

TODAY = date(2024, 11, 1)


@pytest.fixture
def service(snapshot):
    return ControllingService(snapshot)


class TestSummary:
    """Test practice-wide figures."""

    def test_totals(self, service):
        """Totals, margin and risk counts should match the sample."""
        summary = service.get_summary()
        assert summary.total_revenue == 7200
        assert summary.total_cost == pytest.approx(1770 + 80 + 280)
        assert summary.margin == pytest.approx((7200 - 2130) / 7200 * 100)
        assert summary.risk_clients == 1
        assert summary.profitable_clients == 2

    def test_clients_sorted_by_margin(self, service):
        """Client overview should list the lowest margin first."""
        assert [c.client_id for c in service.client_overview()] == ["c2", "c1", "c3"]

    def test_staff_sorted_by_profitability(self, service):
        """Staff overview should list the lowest profitability first."""
        stats = service.staff_overview()
        assert len(stats) == 3
        margins = [s.profitability for s in stats]
        assert margins == sorted(margins)

    def test_empty_snapshot(self):
        """An empty snapshot should give a zero margin."""
        summary = ControllingService(parse_snapshot({})).get_summary()
        assert summary.margin == 0
        assert summary.clients == []


class TestDistribution:
    """Test hours per staff member for one client."""

    def test_hours_per_staff(self, service):
        """Hours should be split by owner, operational time included."""
        assert service.staff_distribution("c1") == pytest.approx({"s1": 85.0, "s2": 7.0})

    def test_largest_first(self, service):
        """The largest share should come first."""
        assert list(service.staff_distribution("c3")) == ["Old Manager", "ghost"]

    def test_unknown_client(self, service):
        """An unknown client should raise KeyError."""
        with pytest.raises(KeyError):
            service.staff_distribution("nope")


class TestAlerts:
    """Test dashboard alerts on a fixed date."""

    @pytest.fixture
    def alerts(self, service):
        return {a.id: a for a in service.generate_alerts(TODAY)}

    def test_critical_margin(self, alerts):
        """Clients below the risk margin should get a critical alert."""
        assert alerts["prof-c2"].type == "critical"
        assert "prof-c1" not in alerts

    def test_underpriced(self, alerts):
        """Fees below the bracket minimum should be flagged."""
        # c3: 60000 * 0.07 / 12 = 350 > 100
        assert alerts["fair-c3"].type == "warning"
        assert "350" in alerts["fair-c3"].message
        assert "fair-c1" not in alerts

    def test_renewal_and_expiry(self, alerts):
        """Upcoming renewals and recent expiries should be reported."""
        assert alerts["renew-c1"].type == "info"
        assert "30 days" in alerts["renew-c1"].message
        assert alerts["expired-c3"].type == "warning"

    def test_high_volume_low_fee(self):
        """High document volume at a low fee should be flagged."""
        data = dict(SAMPLE_SNAPSHOT, clients=[
            {"id": "v1", "name": "Busy", "responsible_staff": "s1",
             "document_count": 120, "monthly_fee": 250},
        ])
        alerts = ControllingService(parse_snapshot(data)).generate_alerts(TODAY)
        assert "vol-v1" in {a.id for a in alerts}

    def test_all_alerts_dated(self, service):
        """Alerts should carry the reference date."""
        assert all(a.date == TODAY for a in service.generate_alerts(TODAY))


class TestCli:
    """Test command line output."""

    def test_controlling_summary(self, config_file, capsys):
        """summary should print margin and risk counts."""
        from modules.controlling.cli import main
        main(["summary", "--config", str(config_file)])
        out = capsys.readouterr().out
        assert "Margin" in out
        assert "1 at risk" in out

    def test_costing_fee(self, config_file, capsys):
        """fee should print the matching bracket."""
        from modules.costing.cli import main
        main(["fee", "--turnover", "37500", "--config", str(config_file)])
        assert "tb2" in capsys.readouterr().out

    def test_costing_clients_json(self, config_file, capsys):
        """clients --json should emit one row per client."""
        import json
        from modules.costing.cli import main
        main(["clients", "--json", "--config", str(config_file)])
        rows = json.loads(capsys.readouterr().out)
        assert {r["client_id"] for r in rows} == {"c1", "c2", "c3"}

    def test_missing_config_exits(self, tmp_path):
        """A missing config should exit with an error."""
        from modules.costing.cli import main
        with pytest.raises(SystemExit):
            main(["staff", "--config", str(tmp_path / "missing.yaml")])

    def test_malformed_yaml_exits(self, tmp_path, caplog):
        """Unparseable YAML should be logged and exit with status 1."""
        from modules.controlling.cli import main
        path = tmp_path / "broken.yaml"
        path.write_text("clients: [\n  - id: c1\n", encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            main(["summary", "--config", str(path)])
        assert exc.value.code == 1
        assert "Could not load snapshot" in caplog.text

    def test_client_without_tasks(self, tmp_path, capsys):
        """A client with an empty 'tasks:' key should not break the report."""
        from modules.costing.cli import main
        path = tmp_path / "config.yaml"
        path.write_text(
            "clients:\n"
            "  - id: c1\n"
            "    name: Empty\n"
            "    monthly_fee: 100\n"
            "    tasks:\n",
            encoding="utf-8",
        )
        main(["clients", "--config", str(path)])
        assert "Empty" in capsys.readouterr().out
