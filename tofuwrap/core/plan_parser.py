"""
Scraping of `tofu plan` output.
"""

import re
from dataclasses import dataclass

ANSI_ESCAPE_RE = re.compile(r'\x1b\[[0-9;]*m')

# "Plan: 1 to add, 2 to change, 3 to destroy."
PLAN_SUMMARY_RE = re.compile(
    r'Plan:\s*(\d+)\s+to\s+add,\s*(\d+)\s+to\s+change,\s*(\d+)\s+to\s+destroy\.'
)


@dataclass
class PlanChanges:
    """Resource counts from a plan summary line."""
    add: int = 0
    change: int = 0
    destroy: int = 0


@dataclass
class PlanResult:
    """Result of a successful `tofu plan`."""
    summary: str
    changes: PlanChanges
    raw: str  # stdout as returned by tofu, colors included

    @property
    def has_changes(self) -> bool:
        return bool(self.changes.add or self.changes.change or self.changes.destroy)


def strip_ansi(text: str) -> str:
    """Remove color escape sequences."""
    return ANSI_ESCAPE_RE.sub('', text)


def parse_plan_changes(output: str) -> PlanChanges:
    """
    Extract add/change/destroy counts from plan output.

    Counts default to 0 when there is no summary line, e.g. for
    "No changes. Your infrastructure matches the configuration."
    """
    match = PLAN_SUMMARY_RE.search(strip_ansi(output))
    if not match:
        return PlanChanges()

    return PlanChanges(
        add=int(match.group(1)),
        change=int(match.group(2)),
        destroy=int(match.group(3)),
    )
