"""Project root detection and instruction file loading."""

from __future__ import annotations

import logging
from pathlib import Path

from .config import CLAUDE_FILE_NAME, AuditConfig
from .models import Document

logger = logging.getLogger(__name__)

ROOT_FILES = ("AGENTS.md", "README.md", "SPECS.md")

GLOB_PATTERNS = (
    ".claude/**/SKILL.md",
    ".agents/**/SKILL.md",
    ".agents/**/AGENTS.md",
    "src/**/AGENTS.md",
)

CLAUDE_GLOB_PATTERNS = (
    ".claude/**/CLAUDE.md",
    "src/**/CLAUDE.md",
)


def find_root(config: AuditConfig, start: Path | None = None) -> Path:
    """Find the project root by walking up from `start` (default: CWD).

    1. The nearest directory holding one of `config.root_markers`
    2. The nearest directory holding `.git`
    3. `start` itself
    """
    cur = (start or Path.cwd()).resolve()

    for p in (cur, *cur.parents):
        for marker in config.root_markers:
            if (p / marker).exists():
                return p

    for p in (cur, *cur.parents):
        if (p / ".git").exists():
            return p

    logger.warning("No project root marker found, using %s", cur)
    return cur


def find_instruction_files(root: Path, config: AuditConfig) -> list[Path]:
    """Discover instruction files under `root`, deduplicated and sorted."""
    root_files = list(ROOT_FILES)
    patterns = list(GLOB_PATTERNS)
    if config.include_claude_md:
        root_files.append(CLAUDE_FILE_NAME)
        patterns.extend(CLAUDE_GLOB_PATTERNS)

    found: set[Path] = set()
    for name in root_files:
        path = root / name
        if path.exists():
            found.add(path)

    for pattern in patterns:
        found.update(p for p in root.glob(pattern) if p.is_file())

    return sorted(found)


def relative_name(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def load_document(path: Path, root: Path) -> Document | None:
    """Read a document's text and modification time, or None if unreadable."""
    try:
        # read_text would translate \r and \r\n line endings
        text = path.read_bytes().decode("utf-8")
        mtime_ns = path.stat().st_mtime_ns
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Skipping %s: %s", path, e)
        return None

    return Document(path=path, rel=relative_name(path, root), text=text, mtime_ns=mtime_ns)


def load_documents(paths: list[Path], root: Path) -> list[Document]:
    """Load every readable document, preserving order."""
    documents = []
    for path in paths:
        doc = load_document(path, root)
        if doc is not None:
            documents.append(doc)
    logger.debug("Loaded %d of %d instruction files", len(documents), len(paths))
    return documents
