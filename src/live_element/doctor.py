"""Doctor command: validates the runtime environment for live-element."""

from __future__ import annotations

import importlib.metadata
import shutil
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from live_element.config import ConfigStore, WaitConfig
from live_element.core.errors import ConfigError

MIN_PYTHON = (3, 10)

# Browser drivers; Selenium Manager downloads them on demand, so optional.
OPTIONAL_DRIVERS = ["chromedriver", "geckodriver", "msedgedriver"]


@dataclass
class CheckResult:
    name: str
    passed: bool
    message: str
    hint: Optional[str] = None


@dataclass
class DoctorReport:
    checks: List[CheckResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(c.passed for c in self.checks)

    def add(self, result: CheckResult) -> None:
        self.checks.append(result)


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def check_python_version() -> CheckResult:
    """Verify that the running Python meets the minimum version requirement."""
    current = sys.version_info[:2]
    ver_str = f"{current[0]}.{current[1]}"
    min_str = f"{MIN_PYTHON[0]}.{MIN_PYTHON[1]}"
    if current >= MIN_PYTHON:
        return CheckResult(
            name="Python version",
            passed=True,
            message=f"Python {ver_str} ✓ (>= {min_str} required)",
        )
    return CheckResult(
        name="Python version",
        passed=False,
        message=f"Python {ver_str} is too old (need >= {min_str})",
        hint=f"Install Python {min_str}+ from https://python.org/downloads/",
    )


def check_selenium() -> CheckResult:
    """Selenium must be installed for the bundled WebDriver adapter."""
    try:
        version = importlib.metadata.version("selenium")
    except importlib.metadata.PackageNotFoundError:
        return CheckResult(
            name="Selenium",
            passed=False,
            message="selenium is not installed",
            hint="pip install 'selenium>=4.11'",
        )
    return CheckResult(name="Selenium", passed=True, message=f"selenium {version} ✓")


def check_browser_drivers() -> List[CheckResult]:
    """Report browser driver binaries on PATH (never fails the doctor run)."""
    results = []
    for tool in OPTIONAL_DRIVERS:
        path = shutil.which(tool)
        if path:
            results.append(
                CheckResult(
                    name=f"Browser driver: {tool}",
                    passed=True,
                    message=f"'{tool}' found at {path} ✓",
                )
            )
        else:
            results.append(
                CheckResult(
                    name=f"Browser driver: {tool}",
                    passed=True,
                    message=f"'{tool}' not found (optional)",
                    hint="Selenium Manager will download a matching driver on first use.",
                )
            )
    return results


def check_config(config_path: Optional[str] = None) -> tuple[CheckResult, Optional[WaitConfig]]:
    """Validate the configuration file and environment override."""
    store = ConfigStore(config_path)
    try:
        config = store.load()
    except ConfigError as exc:
        return (
            CheckResult(
                name="Configuration",
                passed=False,
                message=str(exc).splitlines()[0],
                hint=f"Fix {store.path} or remove it to use the defaults.",
            ),
            None,
        )
    source = store.path if store.path.exists() else "defaults"
    return (
        CheckResult(
            name="Configuration",
            passed=True,
            message=f"{source}: timeout {config.timeout_ms} ms, poll {config.poll_ms} ms ✓",
        ),
        config,
    )


def check_resource_dirs(config: WaitConfig) -> List[CheckResult]:
    """Every configured upload resource directory must exist."""
    results = []
    for raw in config.resource_dirs:
        p = Path(raw)
        if p.is_dir():
            results.append(
                CheckResult(name=f"Resource dir: {p}", passed=True, message=f"'{p}' exists ✓")
            )
        else:
            results.append(
                CheckResult(
                    name=f"Resource dir: {p}",
                    passed=False,
                    message=f"'{p}' is not a directory",
                    hint=f"Create it (mkdir -p \"{p}\") or drop it from resource_dirs.",
                )
            )
    return results


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def run_doctor(config_path: Optional[str] = None) -> DoctorReport:
    """Run all environment checks and return a :class:`DoctorReport`."""
    report = DoctorReport()

    report.add(check_python_version())
    report.add(check_selenium())
    for result in check_browser_drivers():
        report.add(result)
    config_result, config = check_config(config_path)
    report.add(config_result)
    if config is not None:
        for result in check_resource_dirs(config):
            report.add(result)

    return report
