"""
Orchard EMR CLI.

Usage:
    orchard-emr <command> [args]
"""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from orchard.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="orchard-emr", description="Provision, poll and terminate EMR cluster resources"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    plan_parser = subparsers.add_parser("plan", help="Show the launch request without creating")
    plan_parser.add_argument("conf", help="Path to resource conf (YAML or JSON)")

    create_parser = subparsers.add_parser("create", help="Launch the cluster")
    create_parser.add_argument("conf", help="Path to resource conf (YAML or JSON)")

    for name, help_text in (
        ("status", "Show the cluster's lifecycle status"),
        ("terminate", "Terminate the cluster"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("conf", help="Path to resource conf (YAML or JSON)")
        sub.add_argument(
            "--instance-spec",
            required=True,
            help='Instance spec returned by create, e.g. \'{"clusterId": "j-..."}\'',
        )

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    if args.command == "plan":
        from orchard.cli.commands import plan_command

        return plan_command(args.conf)

    if args.command == "create":
        from orchard.cli.commands import create_command

        return create_command(args.conf)

    if args.command == "status":
        from orchard.cli.commands import status_command

        return status_command(args.conf, args.instance_spec)

    if args.command == "terminate":
        from orchard.cli.commands import terminate_command

        return terminate_command(args.conf, args.instance_spec)

    parser.print_help()
    return 1
