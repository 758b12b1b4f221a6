"""
CLI commands for Orchard EMR.
"""

from orchard.cli.commands import (
    create_command,
    plan_command,
    status_command,
    terminate_command,
)

__all__ = [
    "plan_command",
    "create_command",
    "status_command",
    "terminate_command",
]
