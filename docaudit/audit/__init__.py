"""Instruction document parsing and audit rules."""

from .engine import AuditReport, run_audit
from .parser import extract_tree_paths, heading_level, is_link_bullet, is_list_context
from .rules import (
    LINE_BUDGET,
    check_actionable,
    check_line_budget,
    check_staleness,
    check_tree_paths,
)

__all__ = [
    "AuditReport",
    "run_audit",
    "extract_tree_paths",
    "heading_level",
    "is_link_bullet",
    "is_list_context",
    "LINE_BUDGET",
    "check_actionable",
    "check_line_budget",
    "check_staleness",
    "check_tree_paths",
]
