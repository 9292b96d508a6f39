"""Deadline-bounded polling of a condition against a live target."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from live_element.config import WaitConfig
from live_element.core.classify import is_transient
from live_element.core.errors import ElementWaitTimeoutError, clean_message
from live_element.core.target import Present, Resolution, TargetDescriptor
from live_element.driver.describe import describe_element
from live_element.journal import WaitJournal
from live_element.wait.conditions import Condition
from live_element.wait.resolver import Resolver


@dataclass(frozen=True)
class Satisfied:
    handle: Any = None


@dataclass(frozen=True)
class TimedOut:
    last: Resolution
    elapsed_ms: float
    attempts: int


PollOutcome = Union[Satisfied, TimedOut]


class PollingEngine:
    """Re-resolve the target every attempt and evaluate a condition on it.

    ``clock`` must be monotonic and return seconds; ``sleep`` takes seconds.
    Both are injectable so timing can be simulated.
    """

    def __init__(
        self,
        resolver: Resolver,
        config: WaitConfig | None = None,
        journal: WaitJournal | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.resolver = resolver
        self.config = config or WaitConfig()
        self.journal = journal or WaitJournal.from_config(self.config)
        self.clock = clock
        self.sleep = sleep

    @property
    def driver(self):
        return self.resolver.driver

    @property
    def classifier(self):
        return self.resolver.classifier

    # ------------------------------------------------------------------
    # Public waits
    # ------------------------------------------------------------------

    def wait_until(
        self,
        target: TargetDescriptor,
        condition: Condition,
        timeout_ms: Optional[int] = None,
    ) -> Any:
        """Return the element once *condition* holds, or None if it holds by absence.

        Raises ElementWaitTimeoutError when the deadline passes first.
        """
        timeout = self._timeout(timeout_ms)
        outcome = self.poll(target, condition, timeout, expected=True)
        return self._finish("wait_until", target, condition, timeout, outcome)

    def wait_while(
        self,
        target: TargetDescriptor,
        condition: Condition,
        timeout_ms: Optional[int] = None,
    ) -> None:
        """Return as soon as *condition* stops holding."""
        timeout = self._timeout(timeout_ms)
        outcome = self.poll(target, condition, timeout, expected=False)
        self._finish("wait_while", target, condition, timeout, outcome)

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def poll(
        self,
        target: TargetDescriptor,
        condition: Condition,
        timeout_ms: int,
        expected: bool = True,
    ) -> PollOutcome:
        """Poll until the condition evaluates to *expected* or time runs out.

        At least one attempt is always made; a zero timeout means exactly one.
        """
        start = self.clock()
        attempts = 0
        while True:
            attempts += 1
            resolution = self.resolver.resolve(target)
            if isinstance(resolution, Present):
                if self._evaluate(condition, resolution.handle) is expected:
                    return Satisfied(resolution.handle)
            elif bool(condition.apply_on_absent()) is expected:
                return Satisfied(None)

            elapsed_ms = (self.clock() - start) * 1000.0
            if elapsed_ms >= timeout_ms:
                return TimedOut(resolution, elapsed_ms, attempts)
            self.sleep(self.config.poll_ms / 1000.0)

    def _evaluate(self, condition: Condition, handle: Any) -> bool | None:
        """Apply *condition*; None when a transient error interrupted the read."""
        try:
            return bool(condition.apply(self.driver, handle))
        except Exception as exc:
            if not is_transient(self.classifier, exc):
                raise
            return None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _timeout(self, timeout_ms: Optional[int]) -> int:
        if timeout_ms is None:
            return self.config.timeout_ms
        if timeout_ms < 0:
            raise ValueError(f"timeout_ms must be >= 0, got {timeout_ms}")
        return timeout_ms

    def _finish(
        self,
        action: str,
        target: TargetDescriptor,
        condition: Condition,
        timeout_ms: int,
        outcome: PollOutcome,
    ) -> Any:
        args = {"condition": condition.name, "timeout_ms": timeout_ms}
        if isinstance(outcome, Satisfied):
            self.journal.record(
                action, target.describe(), args,
                result="element" if outcome.handle is not None else "absent",
            )
            return outcome.handle

        error = self._timeout_error(target, condition, timeout_ms, outcome, action == "wait_while")
        self.journal.record(
            action, target.describe(), {**args, "attempts": outcome.attempts},
            error=str(error).splitlines()[0], elapsed_ms=outcome.elapsed_ms,
        )
        raise error

    def _timeout_error(
        self,
        target: TargetDescriptor,
        condition: Condition,
        timeout_ms: int,
        outcome: TimedOut,
        still_holds: bool,
    ) -> ElementWaitTimeoutError:
        actual = condition.diagnose(self.driver, outcome.last, self.classifier)
        details = None
        if isinstance(outcome.last, Present):
            try:
                details = describe_element(self.driver, outcome.last.handle)
            except Exception as exc:
                if not is_transient(self.classifier, exc):
                    raise
                details = clean_message(exc)
        return ElementWaitTimeoutError(
            target.describe(), condition.name, timeout_ms, actual, details, still_holds
        )
