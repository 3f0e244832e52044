#!/usr/bin/env python3
"""Unified CLI for the practice back office.

Usage:
    python cli.py costing --help
    python cli.py controlling --help
"""
import sys
import argparse


def main():
    parser = argparse.ArgumentParser(
        description='Practice Back Office - Costing & Controlling',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modules:
  costing       Task costing, staff workload, fee suggestions, quotes
  controlling   Practice summary, alerts, staff distribution

Examples:
  python cli.py costing staff
  python cli.py costing clients --data snapshot.yaml
  python cli.py costing fee --turnover 37500
  python cli.py costing quote --employees 4 --documents 85 --margin 30
  python cli.py controlling summary
  python cli.py controlling alerts --date 2024-11-15
  python cli.py controlling distribution --client c1
"""
    )

    parser.add_argument(
        'module',
        choices=['costing', 'controlling'],
        help='Module to run'
    )

    # Parse just the module, pass rest to submodule
    args, remaining = parser.parse_known_args()

    if args.module == 'costing':
        from modules.costing.cli import main as costing_main
        costing_main(remaining)

    elif args.module == 'controlling':
        from modules.controlling.cli import main as ctrl_main
        ctrl_main(remaining)


if __name__ == '__main__':
    sys.exit(main())
