"""Costing CLI.

Usage:
    python -m modules.costing.cli staff
    python -m modules.costing.cli clients --data snapshot.yaml
    python -m modules.costing.cli fee --turnover 37500
    python -m modules.costing.cli quote --employees 4 --documents 85 --turnover 150000
"""
import argparse
import json
import logging
import sys
from dataclasses import asdict
from enum import Enum
from pathlib import Path

import yaml

from .brackets import suggest_fee
from .loader import load_snapshot
from .profitability import compute_client_profitability, compute_staff_stats
from .quotes import build_quote, default_quote_items

logger = logging.getLogger(__name__)


def _jsonable(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def _dump(obj) -> str:
    return json.dumps(_jsonable(obj), indent=2, ensure_ascii=False, default=str)


def cmd_staff(snap, args):
    rows = [
        compute_staff_stats(s, snap.clients, snap.tasks, snap.area_costs, snap.staff, snap.defaults)
        for s in snap.staff
    ]
    if args.json:
        print(_dump([asdict(r) for r in rows]))
        return
    print(f"👥 Staff ({len(rows)})")
    for r in rows:
        print(
            f"  {r.staff_name:<20} {r.client_count:>3} clients  "
            f"{r.allocated_hours_month:7.1f} h/month  {r.capacity_utilization:6.1f}% util  "
            f"{r.profitability:6.1f}% margin"
        )


def cmd_clients(snap, args):
    rows = [
        (c, compute_client_profitability(c, snap.tasks, snap.area_costs, snap.staff, snap.defaults))
        for c in snap.clients
    ]
    if args.json:
        print(_dump([{"name": c.name, **asdict(r)} for c, r in rows]))
        return
    print(f"📊 Clients ({len(rows)})")
    for c, r in sorted(rows, key=lambda row: row[1].profitability):
        print(
            f"  {c.name:<28} {r.total_annual_hours:7.1f} h  cost {r.total_annual_cost:9.2f}  "
            f"revenue {r.total_annual_revenue:9.2f}  {r.profitability:6.1f}% ({r.margin_band.value})"
        )


def cmd_fee(snap, args):
    suggestion = suggest_fee(args.turnover, snap.brackets)
    if suggestion is None:
        logger.warning(f"No turnover bracket for {args.turnover}")
        print(_dump(None) if args.json else "   No suggestion")
        return
    if args.json:
        print(_dump({**asdict(suggestion), "suggested_fee_monthly": suggestion.suggested_fee_monthly}))
        return
    print(f"💶 Turnover {args.turnover:,.2f} → bracket {suggestion.bracket.id}")
    print(f"   Suggested: {suggestion.suggested_percent * 100:.2f}% = "
          f"{suggestion.suggested_fee_annual:,.2f}/year ({suggestion.suggested_fee_monthly:,.2f}/month)")


def cmd_quote(snap, args):
    attributes = {
        "employee_count": args.employees,
        "document_count": args.documents,
        "establishments": args.establishments,
        "banks": args.banks,
    }
    items = default_quote_items(snap.tasks, attributes)
    quote = build_quote(
        items, snap.tasks, snap.area_costs,
        target_margin=args.margin,
        turnover=args.turnover,
        brackets=snap.brackets,
        defaults=snap.defaults,
    )
    if args.json:
        print(_dump({**asdict(quote), "recommended_monthly_fee": quote.recommended_monthly_fee}))
        return
    print(f"🧾 Quote ({len(items)} tasks, margin {quote.target_margin:.0f}%)")
    print(f"   Hours/year: {quote.total_annual_hours:,.1f}")
    print(f"   Cost/year:  {quote.total_annual_cost:,.2f}")
    print(f"   Fee/month:  {quote.recommended_monthly_fee:,.2f}")
    if quote.fee_suggestion is not None:
        print(f"   Turnover-based: {quote.fee_suggestion.suggested_fee_monthly:,.2f}/month")


COMMANDS = {
    "staff": cmd_staff,
    "clients": cmd_clients,
    "fee": cmd_fee,
    "quote": cmd_quote,
}


def main(argv=None):
    parser = argparse.ArgumentParser(description='Task Costing & Profitability')
    parser.add_argument('command', choices=list(COMMANDS))
    parser.add_argument('--data', type=Path, help='Snapshot file (YAML/JSON)')
    parser.add_argument('--config', type=Path, help='Costing config (default: built-in)')
    parser.add_argument('--turnover', type=float, default=0.0, help='Annual turnover')
    parser.add_argument('--employees', type=float, default=0, help='Employee count (quote)')
    parser.add_argument('--documents', type=float, default=0, help='Documents per month (quote)')
    parser.add_argument('--establishments', type=float, default=1, help='Establishments (quote)')
    parser.add_argument('--banks', type=float, default=1, help='Bank accounts (quote)')
    parser.add_argument('--margin', type=float, default=None, help='Target margin %% (quote)')
    parser.add_argument('--json', action='store_true', help='JSON output')
    parser.add_argument('-v', '--verbose', action='store_true')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        snap = load_snapshot(args.data, args.config)
    except (FileNotFoundError, KeyError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Could not load snapshot: {e}")
        sys.exit(1)

    COMMANDS[args.command](snap, args)


if __name__ == '__main__':
    main()
