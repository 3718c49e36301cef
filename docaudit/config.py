"""Audit configuration: named profiles and TOML overrides."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path, PurePosixPath
from typing import Any

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when an audit configuration file is invalid."""


@dataclass(frozen=True)
class AuditConfig:
    """How instruction files are discovered and audited for one project."""

    root_markers: tuple[str, ...]  # checked in order
    include_claude_md: bool  # CLAUDE.md is discovered and treated as an agent file
    source_extensions: frozenset[str]  # without the leading dot
    source_dirs: tuple[str, ...]  # relative to the project root
    skip_dirs: frozenset[str]

    @classmethod
    def broad(cls) -> AuditConfig:
        """Multi-ecosystem projects: many root markers and source languages."""
        return cls(
            root_markers=(
                "Cargo.toml",
                "package.json",
                "pyproject.toml",
                "setup.py",
                "go.mod",
                "Gemfile",
                "pom.xml",
                "build.gradle",
                "CMakeLists.txt",
                "Makefile",
                "flake.nix",
                "deno.json",
                "composer.json",
            ),
            include_claude_md=True,
            source_extensions=frozenset(
                {
                    "rs", "ts", "tsx", "js", "jsx", "py", "go", "rb", "java", "kt",
                    "c", "cpp", "h", "hpp", "cs", "swift", "zig", "hs", "ml", "ex",
                    "exs", "clj", "scala", "lua", "php", "sh", "bash", "zsh",
                }
            ),
            source_dirs=("src", "lib", "app", "pkg", "cmd", "internal"),
            skip_dirs=frozenset(
                {
                    "node_modules",
                    "target",
                    "build",
                    "dist",
                    ".git",
                    "__pycache__",
                    ".venv",
                    "vendor",
                    ".next",
                    "out",
                }
            ),
        )

    @classmethod
    def cargo(cls) -> AuditConfig:
        """Single-crate Rust projects: Cargo.toml root, .rs sources, no CLAUDE.md."""
        return cls(
            root_markers=("Cargo.toml",),
            include_claude_md=False,
            source_extensions=frozenset({"rs"}),
            source_dirs=("src",),
            skip_dirs=frozenset({"target", ".git"}),
        )


PROFILES = {
    "broad": AuditConfig.broad,
    "cargo": AuditConfig.cargo,
}

AGENT_FILE_NAMES = frozenset({"AGENTS.md", "SKILL.md"})
CLAUDE_FILE_NAME = "CLAUDE.md"

CONFIG_KEYS = frozenset(
    {"profile", "root_markers", "include_claude_md", "source_extensions", "source_dirs", "skip_dirs"}
)


def is_agent_file(rel: str, config: AuditConfig) -> bool:
    """Whether a document must contain actionable instructions for agents."""
    name = PurePosixPath(rel.replace("\\", "/")).name
    if name in AGENT_FILE_NAMES:
        return True
    return config.include_claude_md and name == CLAUDE_FILE_NAME


def get_profile(name: str) -> AuditConfig:
    factory = PROFILES.get(name)
    if factory is None:
        raise ConfigError(f"Unknown profile '{name}' (available: {', '.join(sorted(PROFILES))})")
    return factory()


def _string_list(data: dict[str, Any], key: str) -> list[str] | None:
    if key not in data:
        return None
    value = data[key]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{key} must be a list of strings")
    return [v.strip() for v in value if v.strip()]


def load_config(path: Path | None = None, profile: str = "broad") -> AuditConfig:
    """
    Build an audit configuration from a profile and an optional TOML file.

    The file may hold the settings at top level or under `[tool.docaudit]`
    (so a project's pyproject.toml can be passed directly). A `profile` key in
    the file takes precedence over the `profile` argument.
    """
    if path is None:
        return get_profile(profile)

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    tool = data.get("tool", {})
    if not isinstance(tool, dict):
        raise ConfigError("tool must be a table")
    if "docaudit" in tool:
        data = tool["docaudit"]
        if not isinstance(data, dict):
            raise ConfigError("tool.docaudit must be a table")

    unknown = sorted(set(data) - CONFIG_KEYS - {"tool"})
    if unknown:
        logger.warning("Ignoring unknown keys in %s: %s", path, ", ".join(unknown))

    profile_name = data.get("profile", profile)
    if not isinstance(profile_name, str):
        raise ConfigError("profile must be a string")
    config = get_profile(profile_name.strip())

    overrides: dict[str, Any] = {}

    root_markers = _string_list(data, "root_markers")
    if root_markers is not None:
        overrides["root_markers"] = tuple(root_markers)

    if "include_claude_md" in data:
        include = data["include_claude_md"]
        if not isinstance(include, bool):
            raise ConfigError("include_claude_md must be a boolean")
        overrides["include_claude_md"] = include

    extensions = _string_list(data, "source_extensions")
    if extensions is not None:
        overrides["source_extensions"] = frozenset(e.lstrip(".") for e in extensions)

    source_dirs = _string_list(data, "source_dirs")
    if source_dirs is not None:
        overrides["source_dirs"] = tuple(source_dirs)

    skip_dirs = _string_list(data, "skip_dirs")
    if skip_dirs is not None:
        overrides["skip_dirs"] = frozenset(skip_dirs)

    return replace(config, **overrides)
