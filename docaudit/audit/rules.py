"""Audit rules for instruction documents."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from ..config import AuditConfig, is_agent_file
from ..discovery import relative_name
from ..models import ALL_FILES, Document, Issue, split_lines
from .parser import (
    extract_tree_paths,
    heading_level,
    is_fence,
    is_link_bullet,
    is_list_context,
    is_table_row,
    is_table_separator,
)

logger = logging.getLogger(__name__)

LINE_BUDGET = 1000

# Gitignored files expected to be absent
SKIP_PATHS = frozenset({".env"})

PLACEHOLDER_PATTERN = re.compile(r"\[.*?]")

IMPERATIVE_PATTERN = re.compile(
    r"\b(use|add|create|run|do|don't|never|must|should|avoid|prefer|ensure|keep|set)\b",
    re.I,
)

INFORMATIONAL_HEADINGS = (
    "project structure",
    "directory layout",
    "architecture",
    "overview",
    "tech stack",
    "sources",
    "bibliography",
    "references",
    "available tools",
    "resources",
)

MAX_CODE_BLOCK_LINES = 8
MAX_TABLE_ROWS = 5
MAX_LINK_BULLETS = 10

RULE_SEVERITIES = {
    "missing-path": "error",
    "stale-doc": "error",
    "line-budget": "error",
    "informational-section": "warning",
    "large-code-block": "warning",
    "large-table": "warning",
    "link-heavy-list": "warning",
}

RULE_EXPLANATIONS = {
    "missing-path": """
# missing-path

Every file listed in the fenced tree under a `## Project Structure` heading
must exist relative to the project root.

Entries ending in `/` are directories and prefix the entries indented below
them. `name -> target` entries are treated as directories. Entries containing
a `[placeholder]` and `.env` are never checked.
""",
    "stale-doc": """
# stale-doc

An instruction file is reported when it was last modified before the newest
source file under the configured source directories. Nothing is reported when
none of the source directories exist.
""",
    "line-budget": f"""
# line-budget

All discovered instruction files together must stay within {LINE_BUDGET} lines.
Agents load these files into every session; large files crowd out the task.
""",
    "informational-section": f"""
# informational-section

Agent files should tell an agent what to do. Sections titled
{", ".join(f'"{h}"' for h in INFORMATIONAL_HEADINGS)} describe the project
instead and belong in README.md.
""",
    "large-code-block": f"""
# large-code-block

A fenced code block longer than {MAX_CODE_BLOCK_LINES} lines is reported unless
one of the two lines before it contains an imperative ("use", "run", "never",
"prefer", ...) that tells the agent what to do with it.
""",
    "large-table": f"""
# large-table

Tables with more than {MAX_TABLE_ROWS} rows (separator rows not counted) are
reference material and belong in README.md.
""",
    "link-heavy-list": f"""
# link-heavy-list

Lists of more than {MAX_LINK_BULLETS} bullets that only hold a link or an
inline code span are indexes, not instructions. Sub-headings and blank lines
inside the list do not end it.
""",
}


def get_rule_ids() -> list[str]:
    return sorted(RULE_EXPLANATIONS)


# --- Path existence ---


def check_tree_paths(rel: str, content: str, root: Path) -> list[Issue]:
    """Check that paths listed in the Project Structure tree exist on disk."""
    issues = []
    for line_no, path in extract_tree_paths(content):
        if PLACEHOLDER_PATTERN.search(path):
            continue
        if path in SKIP_PATHS:
            continue
        if not (root / path).exists():
            issues.append(
                Issue(
                    file=rel,
                    line=line_no,
                    end_line=0,
                    message=f"Referenced path does not exist: {path}",
                    severity="error",
                    rule="missing-path",
                )
            )
    return issues


# --- Actionability ---


def check_informational_sections(rel: str, lines: list[str]) -> list[Issue]:
    """Flag sections whose heading names descriptive rather than actionable content."""
    issues = []
    for i, line in enumerate(lines):
        heading = heading_level(line)
        if not heading:
            continue
        level, title = heading
        if title.lower() not in INFORMATIONAL_HEADINGS:
            continue

        end = len(lines)
        for j in range(i + 1, len(lines)):
            next_heading = heading_level(lines[j])
            if next_heading and next_heading[0] <= level:
                end = j
                break
        while end > i + 1 and not lines[end - 1].strip():
            end -= 1

        issues.append(
            Issue(
                file=rel,
                line=i + 1,
                end_line=end,
                message=f'Informational section "{title}" - consider moving to README.md',
                severity="warning",
                rule="informational-section",
            )
        )
    return issues


def check_large_code_blocks(rel: str, lines: list[str]) -> list[Issue]:
    """Flag long fenced blocks not introduced by an imperative."""
    issues = []
    i = 0
    while i < len(lines):
        if is_fence(lines[i]):
            start = i
            i += 1
            while i < len(lines) and not is_fence(lines[i]):
                i += 1
            close = i
            block_lines = close - start - 1
            if block_lines > MAX_CODE_BLOCK_LINES:
                preceding = lines[max(0, start - 2):start]
                if not any(IMPERATIVE_PATTERN.search(p) for p in preceding):
                    issues.append(
                        Issue(
                            file=rel,
                            line=start + 1,
                            # Unterminated blocks run to the end of the document
                            end_line=close + 1 if close < len(lines) else close,
                            message=(
                                f"Large code block ({block_lines} lines) without imperative "
                                "context - consider moving to README.md"
                            ),
                            severity="warning",
                            rule="large-code-block",
                        )
                    )
        i += 1
    return issues


def check_large_tables(rel: str, lines: list[str]) -> list[Issue]:
    """Flag tables with too many rows."""
    issues = []
    i = 0
    while i < len(lines):
        if not is_table_row(lines[i]):
            i += 1
            continue
        start = i
        rows = 0
        while i < len(lines) and is_table_row(lines[i]):
            if not is_table_separator(lines[i]):
                rows += 1
            i += 1
        if rows > MAX_TABLE_ROWS:
            issues.append(
                Issue(
                    file=rel,
                    line=start + 1,
                    end_line=i,
                    message=f"Large table ({rows} rows) - consider moving to README.md",
                    severity="warning",
                    rule="large-table",
                )
            )
    return issues


def check_link_heavy_lists(rel: str, lines: list[str]) -> list[Issue]:
    """Flag long runs of link or code-span bullets."""
    issues = []
    i = 0
    while i < len(lines):
        if not is_link_bullet(lines[i]):
            i += 1
            continue
        start = i
        count = 0
        while i < len(lines) and is_list_context(lines[i]):
            if is_link_bullet(lines[i]):
                count += 1
            i += 1
        end = i
        while end > start and not lines[end - 1].strip():
            end -= 1
        if count > MAX_LINK_BULLETS:
            issues.append(
                Issue(
                    file=rel,
                    line=start + 1,
                    end_line=end,
                    message=f"Link-heavy list ({count} items) - consider moving to README.md",
                    severity="warning",
                    rule="link-heavy-list",
                )
            )
    return issues


def check_actionable(rel: str, content: str, config: AuditConfig) -> list[Issue]:
    """Check that agent files hold instructions rather than reference material.

    Non-agent files (README.md, SPECS.md, ...) are not checked. The passes are
    independent, so one block may be reported by more than one of them.
    """
    if not is_agent_file(rel, config):
        return []

    lines = split_lines(content)
    issues = []
    issues.extend(check_informational_sections(rel, lines))
    issues.extend(check_large_code_blocks(rel, lines))
    issues.extend(check_large_tables(rel, lines))
    issues.extend(check_link_heavy_lists(rel, lines))
    return issues


# --- Line budget ---


def check_line_budget(
    documents: list[Document],
) -> tuple[list[Issue], list[tuple[str, int]], int]:
    """Check the combined line count of all documents against LINE_BUDGET.

    Returns:
        (issues, per-document line counts, total line count)
    """
    counts = []
    total = 0
    for doc in documents:
        n = len(doc.lines)
        counts.append((doc.rel, n))
        total += n

    issues = []
    if total > LINE_BUDGET:
        issues.append(
            Issue(
                file=ALL_FILES,
                line=0,
                end_line=0,
                message=f"Over line budget: {total} lines (max {LINE_BUDGET})",
                severity="error",
                rule="line-budget",
            )
        )
    return issues, counts, total


# --- Staleness ---


def _newest_source(
    directory: Path,
    extensions: frozenset[str],
    skip_dirs: frozenset[str],
    newest: tuple[int, Path] | None,
) -> tuple[int, Path] | None:
    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        logger.debug("Cannot list %s: %s", directory, e)
        return newest

    for path in entries:
        try:
            if path.is_dir():
                if path.name in skip_dirs:
                    continue
                newest = _newest_source(path, extensions, skip_dirs, newest)
            elif path.suffix and path.suffix[1:] in extensions:
                mtime = path.stat().st_mtime_ns
                if newest is None or mtime > newest[0]:
                    newest = (mtime, path)
        except OSError as e:
            logger.debug("Skipping %s: %s", path, e)
    return newest


def find_newest_source(root: Path, config: AuditConfig) -> tuple[int, Path] | None:
    """Find the most recently modified source file under the configured source dirs.

    Returns:
        (mtime in nanoseconds, path), or None when no source dir exists or no
        source file was found
    """
    newest = None
    for source_dir in config.source_dirs:
        directory = root / source_dir
        if directory.exists():
            newest = _newest_source(directory, config.source_extensions, config.skip_dirs, newest)
    return newest


def check_staleness(documents: list[Document], root: Path, config: AuditConfig) -> list[Issue]:
    """Check whether instruction files are older than the newest source file."""
    newest = find_newest_source(root, config)
    if newest is None:
        return []

    newest_mtime, newest_path = newest
    src_rel = relative_name(newest_path, root)

    issues = []
    for doc in documents:
        if doc.mtime_ns < newest_mtime:
            issues.append(
                Issue(
                    file=doc.rel,
                    line=0,
                    end_line=0,
                    message=f"Older than {src_rel} - may be stale",
                    severity="error",
                    rule="stale-doc",
                )
            )
    return issues
