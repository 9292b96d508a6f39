"""Exception hierarchy, exit codes and driver message cleanup."""

from __future__ import annotations

import re

# Exit codes
EXIT_OK = 0
EXIT_GENERAL_ERROR = 1
EXIT_ELEMENT_NOT_FOUND = 2
EXIT_INVALID_TARGET = 3
EXIT_TIMEOUT = 6
EXIT_CONFIG_ERROR = 7
EXIT_DOCTOR_FAILURE = 10

_EXIT_DESCRIPTIONS = {
    EXIT_OK: "Success",
    EXIT_GENERAL_ERROR: "General error",
    EXIT_ELEMENT_NOT_FOUND: "Element not found",
    EXIT_INVALID_TARGET: "Element cannot be used for the requested operation",
    EXIT_TIMEOUT: "Timed out waiting for an element condition",
    EXIT_CONFIG_ERROR: "Invalid live-element configuration",
    EXIT_DOCTOR_FAILURE: "Environment check failed (run `live-element doctor` for details)",
}

_NOISE_MARKERS = ("(Session info:", "Stacktrace:", "Build info:", "System info:", "Driver info:")


def exit_description(code: int) -> str:
    """Return a human-readable description for *code*."""
    return _EXIT_DESCRIPTIONS.get(code, f"Unknown error (code {code})")


def clean_message(exc: BaseException) -> str:
    """Reduce a driver exception to its first meaningful line.

    Selenium messages carry a ``Message:`` prefix, session/build info and a
    remote stack trace; none of that helps a failing assertion.
    """
    text = getattr(exc, "msg", None) or str(exc)
    text = re.sub(r"^\s*Message:\s*", "", text)
    for marker in _NOISE_MARKERS:
        pos = text.find(marker)
        if pos >= 0:
            text = text[:pos]
    text = text.strip().splitlines()[0] if text.strip() else ""
    if not text:
        return type(exc).__name__
    return f"{type(exc).__name__}: {text.strip()}"


class LiveElementError(Exception):
    """Base exception; carries an exit code and an actionable message."""

    def __init__(self, message: str, exit_code: int = EXIT_GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


# ── Transient: "not ready yet", retried by the polling engine ─────


class TransientNotReadyError(LiveElementError):
    """The element is not (yet) in a usable state; try again."""


class ElementNotFoundError(TransientNotReadyError):
    """No element currently matches the locator."""

    def __init__(self, target: str, reason: str = ""):
        reason_part = f" ({reason})" if reason else ""
        super().__init__(f"Element not found: {target}{reason_part}", EXIT_ELEMENT_NOT_FOUND)
        self.target = target


class ElementIndexError(TransientNotReadyError, IndexError):
    """Fewer elements match the locator than the requested index needs."""

    def __init__(self, target: str, index: int, count: int):
        super().__init__(
            f"Element index {index} out of range for {target}: {count} matched",
            EXIT_ELEMENT_NOT_FOUND,
        )
        self.target = target
        self.index = index
        self.count = count


class StaleElementError(TransientNotReadyError):
    """A previously obtained handle is detached from the document."""


# ── Fatal: propagated to the caller as the final outcome ──────────


class FatalError(LiveElementError):
    """Anything that must abort the current operation."""


class ElementWaitTimeoutError(FatalError):
    """A condition did not reach the expected state before the deadline."""

    def __init__(
        self,
        target: str,
        condition: str,
        timeout_ms: int,
        actual_value: str,
        element_details: str | None = None,
        still_holds: bool = False,
    ):
        verb = "still has" if still_holds else "hasn't"
        msg = (
            f"Element {target} {verb} {condition} in {timeout_ms} ms;"
            f" actual value: '{actual_value}'"
        )
        if element_details:
            msg += f"; element details: '{element_details}'"
        hint = (
            "  Hint: Increase the timeout, or check that the page reaches the"
            " expected state and the locator matches the intended element."
        )
        super().__init__(f"{msg}\n{hint}", EXIT_TIMEOUT)
        self.target = target
        self.condition = condition
        self.timeout_ms = timeout_ms
        self.actual_value = actual_value
        self.element_details = element_details
        self.still_holds = still_holds


class ElementUnavailableError(FatalError):
    """An immediate operation found no element to act on."""

    def __init__(self, target: str, reason: str = ""):
        reason_part = f": {reason}" if reason else ""
        hint = (
            "  Hint: Use should(exist) or wait_until() first if the element"
            " appears asynchronously."
        )
        super().__init__(
            f"Element {target} is not available{reason_part}\n{hint}",
            EXIT_ELEMENT_NOT_FOUND,
        )
        self.target = target
        self.reason = reason


class ElementActionError(FatalError):
    """The driver rejected an action on a resolved element."""

    def __init__(self, action: str, target: str, cause: BaseException):
        super().__init__(f"Cannot {action} on {target}: {clean_message(cause)}")
        self.action = action
        self.target = target


class InvalidTargetError(FatalError):
    """The resolved element cannot be used for the requested operation."""

    def __init__(self, message: str):
        super().__init__(message, EXIT_INVALID_TARGET)


class ResourceNotFoundError(FatalError):
    """A named upload resource is missing from every resource directory."""

    def __init__(self, name: str, searched: list[str]):
        where = ", ".join(searched) or "(no resource directories configured)"
        super().__init__(
            f"File not found in resource directories: {name}\n"
            f"  Hint: Searched {where}; add the directory to resource_dirs.",
            EXIT_INVALID_TARGET,
        )
        self.name = name
        self.searched = searched


class UploadFileNotFoundError(FatalError):
    """An explicit upload path does not point at a file."""

    def __init__(self, path: str):
        super().__init__(
            f"File not found: {path}\n"
            "  Hint: Relative paths are resolved against the working directory.",
            EXIT_INVALID_TARGET,
        )
        self.path = path


class ConfigError(FatalError):
    """Configuration file or override could not be parsed."""

    def __init__(self, message: str):
        super().__init__(message, EXIT_CONFIG_ERROR)
