"""Controlling CLI."""
import argparse
import logging
import sys
from datetime import date
from pathlib import Path

import yaml

from modules.costing import load_snapshot

from .service import ControllingService

logger = logging.getLogger(__name__)

ICONS = {'critical': '🔴', 'warning': '🟠', 'info': '🔵'}


def main(argv=None):
    parser = argparse.ArgumentParser(description='Financial Controlling')
    parser.add_argument('command', choices=['summary', 'alerts', 'distribution'])
    parser.add_argument('--data', type=Path, help='Snapshot file (YAML/JSON)')
    parser.add_argument('--config', type=Path, help='Costing config (default: built-in)')
    parser.add_argument('--client', help='Client ID (distribution)')
    parser.add_argument('--date', help='Reference date (YYYY-MM-DD, alerts)')
    parser.add_argument('-v', '--verbose', action='store_true')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        service = ControllingService(load_snapshot(args.data, args.config))
    except (FileNotFoundError, KeyError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Could not load snapshot: {e}")
        sys.exit(1)

    if args.command == 'summary':
        summary = service.get_summary()
        print('📊 Controlling: summary')
        print(f'   Revenue/year: {summary.total_revenue:,.2f}')
        print(f'   Cost/year:    {summary.total_cost:,.2f}')
        print(f'   Margin:       {summary.margin:.1f}%')
        print(f'   Clients:      {summary.profitable_clients} profitable, {summary.risk_clients} at risk')
        for st in summary.staff:
            print(f'   {st.staff_name:<20} {st.capacity_utilization:6.1f}% util  {st.profitability:6.1f}% margin')

    elif args.command == 'alerts':
        today = date.fromisoformat(args.date) if args.date else None
        alerts = service.generate_alerts(today)
        print(f'🔔 Alerts ({len(alerts)})')
        for alert in alerts:
            print(f"   {ICONS.get(alert.type, '•')} {alert.title}: {alert.message}")

    elif args.command == 'distribution':
        if not args.client:
            parser.error('distribution requires --client')
        try:
            hours = service.staff_distribution(args.client)
        except KeyError as e:
            logger.error(str(e))
            sys.exit(1)
        names = {s.id: s.name for s in service.snapshot.staff}
        print(f'👥 Distribution: {args.client}')
        for owner, h in hours.items():
            label = names.get(owner, owner or '(unassigned)')
            print(f'   {label:<20} {h:7.1f} h/year')


if __name__ == '__main__':
    main()
