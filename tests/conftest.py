"""Pytest configuration and fixtures."""

import os
from pathlib import Path
from typing import Callable

import pytest

from docaudit.config import AuditConfig
from docaudit.discovery import load_document
from docaudit.models import Document


@pytest.fixture
def broad_config() -> AuditConfig:
    return AuditConfig.broad()


@pytest.fixture
def cargo_config() -> AuditConfig:
    return AuditConfig.cargo()


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[..., Path]:
    """Write a file under tmp_path, creating parents, optionally pinning its mtime."""

    def _write(rel: str, content: str = "", mtime_ns: int | None = None) -> Path:
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        if mtime_ns is not None:
            os.utime(path, ns=(mtime_ns, mtime_ns))
        return path

    return _write


@pytest.fixture
def make_document(tmp_path: Path, write_file) -> Callable[..., Document]:
    """Write a file and load it as a Document."""

    def _make(rel: str, content: str = "", mtime_ns: int | None = None) -> Document:
        path = write_file(rel, content, mtime_ns)
        doc = load_document(path, tmp_path)
        assert doc is not None
        return doc

    return _make
