"""Global constants."""

import pathlib


def _find_project_root() -> pathlib.Path:
    """Find the project root (directory containing live-element.yaml or .git).

    Search order:
      1. Walk up from cwd
      2. Walk up from the package source directory (editable install)
    Fallback: cwd
    """
    markers = ("live-element.yaml", ".git")

    def _search(start: pathlib.Path) -> pathlib.Path | None:
        for d in [start, *start.parents]:
            if any((d / m).exists() for m in markers):
                return d
        return None

    found = _search(pathlib.Path.cwd())
    if found:
        return found

    pkg_dir = pathlib.Path(__file__).resolve().parent  # src/live_element/
    found = _search(pkg_dir)
    if found:
        return found

    return pathlib.Path.cwd()


PROJECT_ROOT = _find_project_root()

DEFAULT_TIMEOUT_MS = 4000
POLL_INTERVAL_MS = 100
CONFIG_FILE = str(PROJECT_ROOT / "live-element.yaml")
TIMEOUT_ENV_VAR = "LIVE_ELEMENT_TIMEOUT_MS"
JOURNAL_TAIL = 200
DESCRIBE_TEXT_LIMIT = 60
DESCRIBED_ATTRIBUTES = ("id", "name", "class", "type", "value", "href", "src")
