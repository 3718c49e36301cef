"""Audit command implementation."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.table import Table

from ..audit.engine import AuditReport, run_audit
from ..audit.rules import RULE_EXPLANATIONS, RULE_SEVERITIES, get_rule_ids
from ..config import AuditConfig, is_agent_file
from ..discovery import find_instruction_files, load_documents
from ..models import Issue

ERROR_MARK = "✗"
WARNING_MARK = "⚠"
OK_MARK = "✓"


def run_audit_command(
    root: Path,
    config: AuditConfig,
    output_json: bool = False,
    fail_on: str = "warning",
    console: Console | None = None,
) -> int:
    """Audit the instruction files of a project.

    Args:
        root: Project root directory
        config: Audit configuration
        output_json: Output results as JSON instead of human-readable
        fail_on: Exit with error if this level or higher found ("error" or "warning")
        console: Console to print to (defaults to stdout)

    Returns:
        Exit code (0 = success, 1 = issues found)
    """
    console = console or Console(highlight=False, soft_wrap=True)

    files = find_instruction_files(root, config)
    documents = load_documents(files, root)
    report = run_audit(root, config, documents)

    if output_json:
        _output_json(report)
    else:
        _print_human_output(console, report)

    if fail_on == "warning":
        return 1 if report.has_issues else 0
    return 1 if report.errors else 0


def _output_json(report: AuditReport) -> None:
    output = {
        "root": str(report.root),
        "errors": [i.to_dict() for i in report.errors],
        "warnings": [i.to_dict() for i in report.warnings],
        "line_counts": {rel: n for rel, n in report.counts},
        "summary": {
            "files": len(report.documents),
            "total_lines": report.total,
            "line_budget": report.budget,
            "errors": len(report.errors),
            "warnings": len(report.warnings),
        },
    }
    print(json.dumps(output, indent=2))


def _format_issue(issue: Issue) -> str:
    marker = WARNING_MARK if issue.is_warning else ERROR_MARK
    return f"  {issue.location:<48} {marker} {issue.message}"


def _print_human_output(console: Console, report: AuditReport) -> None:
    console.print("Auditing docs...\n")

    for issue in report.issues:
        style = "yellow" if issue.is_warning else "bold red"
        console.print(escape(_format_issue(issue)), style=style)

    mark = OK_MARK if report.within_budget else ERROR_MARK
    console.print(
        f"\nCombined instruction files: {report.total} lines "
        f"(budget: {report.budget}) {mark}",
        style=None if report.within_budget else "bold red",
    )
    for rel, n in report.counts:
        console.print(f"  {escape(rel)}: {n}", style="dim")

    n = len(report.issues)
    if n:
        console.print(f"\nFound {n} issue(s)", style="bold red")
    else:
        console.print(f"\nNo issues found {OK_MARK}", style="bold green")


def run_files(root: Path, config: AuditConfig, console: Console | None = None) -> int:
    """List discovered instruction files with their line counts."""
    console = console or Console(highlight=False, soft_wrap=True)

    files = find_instruction_files(root, config)
    documents = load_documents(files, root)

    if not documents:
        console.print(f"No instruction files found under {escape(str(root))}", style="yellow")
        return 0

    table = Table(title="Instruction Files")
    table.add_column("File", style="cyan")
    table.add_column("Lines", justify="right")
    table.add_column("Agent file", justify="center")

    total = 0
    for doc in documents:
        n = len(doc.lines)
        total += n
        table.add_row(escape(doc.rel), str(n), OK_MARK if is_agent_file(doc.rel, config) else "")
    table.add_row("Total", str(total), "", style="bold")

    console.print(table)
    return 0


def run_rules(console: Console | None = None) -> int:
    """List every rule id with its severity."""
    console = console or Console(highlight=False, soft_wrap=True)

    table = Table(title="Audit Rules", show_header=True)
    table.add_column("Rule", style="cyan")
    table.add_column("Severity")
    for rule_id in get_rule_ids():
        severity = RULE_SEVERITIES[rule_id]
        table.add_row(rule_id, severity, style="red" if severity == "error" else "yellow")

    console.print(table)
    return 0


def run_explain(rule_id: str, console: Console | None = None) -> int:
    """Explain a specific audit rule.

    Returns:
        Exit code (0 = success, 1 = rule not found)
    """
    console = console or Console()

    rule_id = rule_id.lower().strip()

    if rule_id not in RULE_EXPLANATIONS:
        console.print(f"Unknown rule: {escape(rule_id)}", style="bold red")
        console.print()
        console.print("Known rules:", style="bold")
        for rid in get_rule_ids():
            console.print(f"  - {rid}")
        return 1

    console.print(Markdown(RULE_EXPLANATIONS[rule_id]))
    return 0
