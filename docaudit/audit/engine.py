"""Run every audit rule over a set of loaded documents."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..config import AuditConfig
from ..models import Document, Issue
from .rules import (
    LINE_BUDGET,
    check_actionable,
    check_line_budget,
    check_staleness,
    check_tree_paths,
)

logger = logging.getLogger(__name__)


@dataclass
class AuditReport:
    """Findings of one audit run plus the line counts for reporting."""

    root: Path
    documents: list[Document]
    issues: list[Issue] = field(default_factory=list)
    counts: list[tuple[str, int]] = field(default_factory=list)
    total: int = 0
    budget: int = LINE_BUDGET

    @property
    def errors(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def has_issues(self) -> bool:
        return bool(self.issues)

    @property
    def within_budget(self) -> bool:
        return self.total <= self.budget


def run_audit(root: Path, config: AuditConfig, documents: list[Document]) -> AuditReport:
    """Audit documents and return findings in rule order.

    Per document: tree paths, then actionability. Then the combined line
    budget, then staleness.
    """
    report = AuditReport(root=root, documents=list(documents))

    for doc in documents:
        report.issues.extend(check_tree_paths(doc.rel, doc.text, root))
        report.issues.extend(check_actionable(doc.rel, doc.text, config))

    budget_issues, report.counts, report.total = check_line_budget(documents)
    report.issues.extend(budget_issues)
    report.issues.extend(check_staleness(documents, root, config))

    logger.debug(
        "Audited %d documents: %d error(s), %d warning(s)",
        len(documents),
        len(report.errors),
        len(report.warnings),
    )
    return report
