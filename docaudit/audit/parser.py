"""Line-level markdown scanning and project structure tree parsing."""

from __future__ import annotations

import re

from ..models import split_lines

FENCE = "```"

# Heading text that introduces the tree listing of the repository layout
STRUCTURE_HEADING = "Project Structure"

# Header separator row, e.g. |---|:---:|
TABLE_SEPARATOR_PATTERN = re.compile(r"^\|[\s:]*-+[\s:]*(\|[\s:]*-+[\s:]*)*\|?\s*$")

SYMLINK_ARROW = " -> "


def heading_level(line: str) -> tuple[int, str] | None:
    """Return the heading level (1-6) and trimmed title of a markdown heading.

    The line must start with 1-6 `#` characters followed by a space.
    """
    hashes = len(line) - len(line.lstrip("#"))
    if hashes == 0 or hashes > 6:
        return None
    rest = line[hashes:]
    if not rest.startswith(" "):
        return None
    return hashes, rest.strip()


def is_fence(line: str) -> bool:
    return line.strip().startswith(FENCE)


def is_table_row(line: str) -> bool:
    return line.lstrip().startswith("|")


def is_table_separator(line: str) -> bool:
    return TABLE_SEPARATOR_PATTERN.match(line.strip()) is not None


def is_link_bullet(line: str) -> bool:
    """A bullet whose payload starts with a link or an inline code span."""
    for marker in ("- ", "* "):
        if line.startswith(marker):
            rest = line[len(marker):]
            return rest.startswith("[") or rest.startswith("`")
    return False


def is_list_context(line: str) -> bool:
    """A line that may appear inside a link-heavy list without ending it."""
    return (
        not line.strip()
        or line.startswith("### ")
        or line.startswith("#### ")
        or is_link_bullet(line)
    )


def extract_tree_paths(content: str) -> list[tuple[int, str]]:
    """Parse file paths from the fenced tree under a "Project Structure" heading.

    Directory entries end with `/` and nest the entries indented below them.
    `name -> target` entries are treated as directories. Anything after `#`
    on a line is a comment.

    Args:
        content: Markdown content

    Returns:
        List of (line number, path relative to the project root) tuples
    """
    results: list[tuple[int, str]] = []
    section_level: int | None = None
    in_block = False
    stack: list[tuple[int, str]] = []  # (indent, dirname with trailing slash)

    for line_no, line in enumerate(split_lines(content), start=1):
        if section_level is None:
            heading = heading_level(line)
            if heading and heading[1].startswith(STRUCTURE_HEADING):
                section_level = heading[0]
            continue

        if not in_block:
            if is_fence(line):
                in_block = True
                continue
            heading = heading_level(line)
            if heading and heading[0] <= section_level:
                break
            continue

        if is_fence(line):
            break

        stripped = line.rstrip()
        if not stripped:
            continue
        indent = len(stripped) - len(stripped.lstrip())
        name = stripped.strip().split("#", 1)[0].strip()
        if not name:
            continue

        if SYMLINK_ARROW in name:
            name = name.split(SYMLINK_ARROW, 1)[0].strip() + "/"

        while stack and stack[-1][0] >= indent:
            stack.pop()

        if name.endswith("/"):
            stack.append((indent, name))
        else:
            full = "".join(d for _, d in stack) + name
            results.append((line_no, full))

    return results
