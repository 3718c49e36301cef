"""Tests for the actionability heuristics applied to agent files."""

from docaudit.audit.rules import (
    check_actionable,
    check_informational_sections,
    check_large_code_blocks,
    check_large_tables,
    check_link_heavy_lists,
)
from docaudit.config import AuditConfig


def _code_block(interior: int, intro: list[str] | None = None, closed: bool = True) -> list[str]:
    lines = ["# Doc", ""] + (intro or [])
    lines.append("```rust")
    lines.extend(f"let x{i} = {i};" for i in range(interior))
    if closed:
        lines.append("```")
    return lines


def _table(rows: int) -> list[str]:
    lines = ["# Doc", "", "| Col A | Col B |", "|-------|-------|"]
    lines.extend(f"| row{i} | val{i} |" for i in range(rows - 1))
    return lines


def _links(count: int) -> list[str]:
    return ["# Doc", ""] + [f"- [link{i}](https://example.com/{i})" for i in range(count)]


def test_skips_non_agent_files(broad_config):
    assert check_actionable("README.md", "## Overview\n\nSome overview.\n", broad_config) == []


def test_claude_md_skipped_without_claude_inclusion():
    content = "# Doc\n\n## Overview\n\nSome overview.\n"
    assert check_actionable("CLAUDE.md", content, AuditConfig.cargo()) == []
    assert len(check_actionable("CLAUDE.md", content, AuditConfig.broad())) == 1


def test_agent_file_in_subdirectory(broad_config):
    content = "## Architecture\n\nLayers.\n"
    issues = check_actionable(".claude/skills/email/SKILL.md", content, broad_config)
    assert [i.rule for i in issues] == ["informational-section"]



def test_line_numbers_ignore_unicode_line_separator(broad_config):
    content = "# Doc\u2028still line one\n\n## Overview\n\nText.\n"

    issues = check_actionable("AGENTS.md", content, broad_config)

    assert [(i.line, i.end_line) for i in issues] == [(3, 5)]


# --- informational sections ---


def test_informational_heading():
    lines = "# Doc\n\n## Overview\n\nSome overview text.\n\n## Rules\n\nDo this.\n".splitlines()

    issues = check_informational_sections("CLAUDE.md", lines)

    assert len(issues) == 1
    assert issues[0].severity == "warning"
    assert issues[0].message == 'Informational section "Overview" - consider moving to README.md'
    # Trailing blank line before "## Rules" is trimmed
    assert (issues[0].line, issues[0].end_line) == (3, 5)


def test_informational_heading_extends_over_deeper_headings():
    lines = ["## Architecture", "Text", "### Layers", "More", "", "", "# Next"]

    issues = check_informational_sections("AGENTS.md", lines)

    assert (issues[0].line, issues[0].end_line) == (1, 4)


def test_informational_heading_runs_to_end_of_document():
    lines = ["# Doc", "## References", "- a", "- b", ""]

    issues = check_informational_sections("AGENTS.md", lines)

    assert (issues[0].line, issues[0].end_line) == (2, 4)


def test_informational_heading_requires_exact_title():
    lines = ["## Overview of rules", "## Conventions", "## TECH STACK"]

    issues = check_informational_sections("AGENTS.md", lines)

    assert [i.line for i in issues] == [3]


def test_no_informational_heading(broad_config):
    assert check_actionable("AGENTS.md", "# Doc\n\n## Conventions\n\nUse serde.\n", broad_config) == []


# --- large code blocks ---


def test_code_block_of_eight_lines_is_fine():
    assert check_large_code_blocks("AGENTS.md", _code_block(8)) == []


def test_code_block_of_nine_lines_without_context():
    lines = _code_block(9)

    issues = check_large_code_blocks("AGENTS.md", lines)

    assert len(issues) == 1
    assert issues[0].rule == "large-code-block"
    assert "(9 lines)" in issues[0].message
    assert (issues[0].line, issues[0].end_line) == (3, 13)


def test_code_block_with_imperative():
    assert check_large_code_blocks("AGENTS.md", _code_block(10, intro=["Use the following pattern:"])) == []


def test_code_block_imperative_two_lines_above():
    lines = _code_block(10, intro=["Never edit generated code.", "Example:"])
    assert check_large_code_blocks("AGENTS.md", lines) == []


def test_code_block_imperative_three_lines_above_does_not_count():
    lines = _code_block(10, intro=["Never edit generated code.", "", "Example:"])
    assert len(check_large_code_blocks("AGENTS.md", lines)) == 1


def test_code_block_imperative_is_whole_word():
    lines = _code_block(10, intro=["Useful reference output:"])
    assert len(check_large_code_blocks("AGENTS.md", lines)) == 1


def test_unterminated_code_block_runs_to_end():
    lines = _code_block(9, closed=False)

    issues = check_large_code_blocks("AGENTS.md", lines)

    assert len(issues) == 1
    assert (issues[0].line, issues[0].end_line) == (3, len(lines))


# --- large tables ---


def test_table_of_five_rows_is_fine():
    assert check_large_tables("SKILL.md", _table(5)) == []


def test_table_of_six_rows():
    lines = _table(6)

    issues = check_large_tables("SKILL.md", lines)

    assert len(issues) == 1
    assert issues[0].message == "Large table (6 rows) - consider moving to README.md"
    assert (issues[0].line, issues[0].end_line) == (3, 9)


def test_separator_rows_do_not_count():
    lines = ["| a |", "|---|", "| b |", "| :-: |", "| c |", "| d |", "| e |"]
    assert check_large_tables("SKILL.md", lines) == []


def test_tables_split_by_text_are_separate():
    lines = _table(4) + ["", "Text"] + _table(4)
    assert check_large_tables("SKILL.md", lines) == []


# --- link-heavy lists ---


def test_link_heavy_list(broad_config):
    content = "\n".join(_links(12))

    issues = check_actionable("CLAUDE.md", content, broad_config)

    assert len(issues) == 1
    assert issues[0].severity == "warning"
    assert issues[0].message == "Link-heavy list (12 items) - consider moving to README.md"
    assert (issues[0].line, issues[0].end_line) == (3, 14)


def test_ten_links_is_fine():
    assert check_link_heavy_lists("AGENTS.md", _links(10)) == []


def test_link_list_spans_subheadings_and_blank_lines():
    lines = ["# Tools", ""]
    for group in range(3):
        lines.append(f"### Group {group}")
        lines.extend(f"- `tool{group}_{i}` does a thing" for i in range(4))
        lines.append("")
    lines.append("")

    issues = check_link_heavy_lists("AGENTS.md", lines)

    assert len(issues) == 1
    assert "(12 items)" in issues[0].message
    # Starts at the first bullet, trailing blank lines trimmed
    assert issues[0].line == 4
    assert issues[0].end_line == len(lines) - 2


def test_plain_bullet_breaks_link_list():
    lines = _links(6) + ["- plain bullet"] + [f"- [more{i}](u)" for i in range(6)]
    assert check_link_heavy_lists("AGENTS.md", lines) == []


# --- independent passes ---


def test_overlapping_findings_are_all_reported(broad_config):
    lines = ["## Resources", ""] + _table(7)[2:]
    content = "\n".join(lines)

    issues = check_actionable("AGENTS.md", content, broad_config)

    assert [i.rule for i in issues] == ["informational-section", "large-table"]
