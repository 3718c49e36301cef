"""CLI entrypoint for docaudit."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import PROFILES, ConfigError, load_config


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(__version__, prog_name="docaudit")
@click.option(
    "--root",
    "-r",
    type=click.Path(exists=False, file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Project root (defaults to the nearest directory with a root marker)",
)
@click.option(
    "--profile",
    "-p",
    type=click.Choice(sorted(PROFILES)),
    default="broad",
    show_default=True,
    help="Configuration profile",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="TOML file overriding the profile (top-level keys or [tool.docaudit])",
)
@click.option("--verbose", is_flag=True, help="Log debug output")
@click.pass_context
def cli(
    ctx: click.Context,
    root: Path | None,
    profile: str,
    config_path: Path | None,
    verbose: bool,
) -> None:
    """docaudit - Audit agent instruction files.

    Checks AGENTS.md, CLAUDE.md, SKILL.md, README.md and SPECS.md for paths
    that no longer exist, staleness against source code, a combined line
    budget, and content that belongs in README.md rather than agent files.
    """
    _configure_logging(verbose)
    ctx.ensure_object(dict)

    try:
        config = load_config(config_path, profile)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    if root is not None and not root.is_dir():
        raise click.BadParameter(f"Directory '{root}' does not exist.", param_hint="--root / -r")

    ctx.obj["config"] = config
    ctx.obj["root"] = root.resolve() if root is not None else None


def _project_root(ctx: click.Context) -> Path:
    from .discovery import find_root

    root = ctx.obj.get("root")
    if root is None:
        root = find_root(ctx.obj["config"])
    return root


@cli.command()
@click.option(
    "--fail-on",
    type=click.Choice(["error", "warning"]),
    default="warning",
    show_default=True,
    help="Exit with error if this level or higher found",
)
@click.option(
    "--json",
    "output_json",
    is_flag=True,
    help="Output results as JSON",
)
@click.option(
    "--explain",
    "explain_rule",
    type=str,
    default=None,
    metavar="RULE_ID",
    help="Explain a specific rule and exit (e.g., --explain large-table)",
)
@click.pass_context
def audit(ctx: click.Context, fail_on: str, output_json: bool, explain_rule: str | None) -> None:
    """Audit instruction files for stale references, size and filler.

    Use --explain RULE_ID to see what a rule checks.
    """
    from .commands.audit import run_audit_command, run_explain

    if explain_rule:
        sys.exit(run_explain(explain_rule))

    exit_code = run_audit_command(_project_root(ctx), ctx.obj["config"], output_json, fail_on)
    sys.exit(exit_code)


@cli.command()
@click.pass_context
def files(ctx: click.Context) -> None:
    """List discovered instruction files and their line counts."""
    from .commands.audit import run_files

    sys.exit(run_files(_project_root(ctx), ctx.obj["config"]))


@cli.command()
def rules() -> None:
    """List audit rules and their severities."""
    from .commands.audit import run_rules

    sys.exit(run_rules())


def main() -> None:
    """Main entrypoint."""
    cli()


if __name__ == "__main__":
    main()
