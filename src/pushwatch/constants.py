"""Global constants for pushwatch."""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "BRANCH_SEPARATOR",
    "BRANCH_WILDCARD",
    "CONFIGURATION_PATH",
    "NO_BRANCH_DISPLAY",
    "TRIGGER_HISTORY_LENGTH",
]

CONFIGURATION_PATH = Path("/etc/pushwatch/config.yaml")
"""Default path to the pushwatch configuration file."""

BRANCH_SEPARATOR = ","
"""Separator between branch patterns in a match target."""

BRANCH_WILDCARD = "*"
"""Wildcard in a branch pattern matching any sequence of characters."""

NO_BRANCH_DISPLAY = "(none)"
"""Displayed in place of the branch of a cause that names no branch."""

TRIGGER_HISTORY_LENGTH = 100
"""Default number of trigger records retained per action."""
