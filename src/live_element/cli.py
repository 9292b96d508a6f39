"""Command-line interface for live-element."""

from __future__ import annotations

import sys
from typing import Optional

import click
import yaml

from live_element import __version__
from live_element.config import ConfigStore
from live_element.core.errors import EXIT_DOCTOR_FAILURE, EXIT_OK, ConfigError
from live_element.doctor import run_doctor


@click.group()
@click.version_option(version=__version__, prog_name="live-element")
def main() -> None:
    """live-element: wait-and-retry assertions for live browser elements."""


@main.command()
@click.option(
    "--config",
    "config_path",
    default=None,
    metavar="FILE",
    help="Path to live-element.yaml (defaults to the project root).",
)
def doctor(config_path: Optional[str]) -> None:
    """Validate the environment setup for live-element.

    Checks the Python version, Selenium, browser drivers on PATH, the
    configuration file and the upload resource directories.

    Exits with code 0 when all required checks pass, or 10 when one or
    more required checks fail.
    """
    report = run_doctor(config_path=config_path)

    _print_report(report)

    if report.passed:
        click.echo("\n✅  All checks passed — environment is ready.")
        sys.exit(EXIT_OK)
    else:
        click.echo(
            "\n❌  One or more checks failed. Fix the issues above and re-run "
            "`live-element doctor`.",
            err=True,
        )
        sys.exit(EXIT_DOCTOR_FAILURE)


@main.group()
def config() -> None:
    """Inspect or change the wait configuration."""


@config.command("show")
@click.option("--config", "config_path", default=None, metavar="FILE")
def config_show(config_path: Optional[str]) -> None:
    """Print the effective configuration (file + environment)."""
    try:
        cfg = ConfigStore(config_path).load()
    except ConfigError as exc:
        click.echo(str(exc), err=True)
        sys.exit(exc.exit_code)
    click.echo(yaml.safe_dump(cfg.model_dump(), sort_keys=False).rstrip())


@config.command("set-timeout")
@click.argument("timeout_ms", type=click.IntRange(min=0))
@click.option("--config", "config_path", default=None, metavar="FILE")
def config_set_timeout(timeout_ms: int, config_path: Optional[str]) -> None:
    """Set the default wait timeout used when callers omit one."""
    store = ConfigStore(config_path)
    try:
        cfg = store.set_timeout(timeout_ms)
    except ConfigError as exc:
        click.echo(str(exc), err=True)
        sys.exit(exc.exit_code)
    click.echo(f"Default timeout set to {cfg.timeout_ms} ms in {store.path}")


def _print_report(report) -> None:
    """Pretty-print the doctor report to stdout."""
    click.echo(f"live-element doctor — environment check\n{'─' * 45}")
    for check in report.checks:
        icon = "✓" if check.passed else "✗"
        click.echo(f"  [{icon}] {check.name}: {check.message}")
        if check.hint:
            click.echo(f"       ↳ {check.hint}")
