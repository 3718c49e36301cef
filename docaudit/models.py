"""Data models for audit findings and instruction documents."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

Severity = Literal["error", "warning"]

# File sentinel for findings that concern the whole project
ALL_FILES = "(all)"


def split_lines(text: str) -> list[str]:
    r"""Split text on `\n` only, dropping a trailing `\r` from each line.

    A final newline does not start an extra empty line. Other separators that
    `str.splitlines` honours (form feed, U+2028, ...) stay inside the line.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


@dataclass(frozen=True)
class Issue:
    """A single audit finding.

    `line` and `end_line` are 1-based; 0 means the finding is not tied to a
    line (or, for `end_line`, not a range).
    """

    file: str
    line: int
    end_line: int
    message: str
    severity: Severity
    rule: str

    def __post_init__(self) -> None:
        if not self.message:
            raise ValueError("Issue message must not be empty")
        if self.end_line and self.end_line < self.line:
            raise ValueError(f"end_line {self.end_line} precedes line {self.line}")

    @property
    def is_warning(self) -> bool:
        return self.severity == "warning"

    @property
    def location(self) -> str:
        """`file`, `file:line` or `file:line-end_line`."""
        loc = self.file
        if self.line > 0:
            if self.end_line > self.line:
                loc += f":{self.line}-{self.end_line}"
            else:
                loc += f":{self.line}"
        return loc

    def to_dict(self) -> dict:
        return {
            "file": self.file,
            "line": self.line,
            "end_line": self.end_line,
            "severity": self.severity,
            "rule": self.rule,
            "message": self.message,
        }


@dataclass(frozen=True)
class Document:
    """An instruction file as observed once at the start of a run."""

    path: Path  # absolute
    rel: str  # posix path relative to the project root
    text: str
    mtime_ns: int

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def lines(self) -> list[str]:
        return split_lines(self.text)
