"""Tests for the polling engine (simulated clock unless stated)."""

import time

import pytest

from live_element.config import WaitConfig
from live_element.core.errors import ElementWaitTimeoutError, StaleElementError
from live_element.core.target import target_for
from live_element.element import build_engine
from live_element.wait.conditions import (
    Condition,
    Not,
    absent,
    exact_text,
    exist,
    hidden,
    text,
    visible,
)
from live_element.wait.engine import Satisfied, TimedOut

from conftest import FakeElement


class Flaky(Condition):
    """Raises *exc* on the first *failures* evaluations, then returns True."""

    def __init__(self, exc: Exception, failures: int = 2):
        super().__init__("flaky")
        self.exc = exc
        self.failures = failures
        self.calls = 0

    def apply(self, driver, handle):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc
        return True


def test_wait_until_immediate_returns_handle_without_sleeping(driver, engine, clock):
    el = FakeElement(text="ready")
    driver.add("#status", el)
    assert engine.wait_until(target_for("#status"), exact_text("ready"), 1000) is el
    assert clock.sleeps == []


def test_wait_until_zero_timeout_makes_one_attempt(driver, engine, clock):
    driver.add("#status", FakeElement(text="busy"))
    with pytest.raises(ElementWaitTimeoutError):
        engine.wait_until(target_for("#status"), exact_text("ready"), 0)
    assert driver.lookups == 1
    assert clock.sleeps == []


def test_text_appears_after_150ms(driver, engine, clock):
    el = FakeElement(tag="input", text=lambda now: "" if now < 0.15 else "456")
    driver.add("#id1", el)

    assert engine.wait_until(target_for("#id1"), exact_text("456"), 1000) is el
    assert 0.15 <= clock.now <= 0.25
    assert clock.sleeps == [0.1, 0.1]


def test_always_absent_times_out_with_absence_in_message(engine, clock):
    with pytest.raises(ElementWaitTimeoutError) as exc_info:
        engine.wait_until(target_for("#missing"), exact_text("456"), 300)

    err = exc_info.value
    assert clock.now >= 0.3
    assert clock.now <= 0.3 + 0.1 + 1e-9
    assert err.timeout_ms == 300
    assert err.condition == "exact text '456'"
    assert "not found" in err.actual_value
    assert err.element_details is None
    assert "hasn't exact text '456' in 300 ms" in str(err)
    assert "Hint" in str(err)


def test_out_of_range_index_is_retried_until_elements_render(driver, engine, clock):
    first, second = FakeElement(tag="li"), FakeElement(tag="li")
    driver.dom["li"] = lambda now: [first] if now < 0.5 else [first, second]

    assert engine.wait_until(target_for("li", 1), exist, 1000) is second
    assert 0.4 < clock.now < 0.7


def test_timeout_reports_last_value_and_element_details(driver, engine):
    driver.add("#name", FakeElement(tag="span", text="Bob", attrs={"id": "name"}))

    with pytest.raises(ElementWaitTimeoutError) as exc_info:
        engine.wait_until(target_for("#name"), exact_text("Alice"), 200)

    err = exc_info.value
    assert err.actual_value == "Bob"
    assert err.element_details == '<span id="name">Bob</span>'
    assert "actual value: 'Bob'" in str(err)
    assert "element details: '<span" in str(err)


def test_element_is_re_resolved_every_attempt(driver, engine):
    old = FakeElement(text="old")
    new = FakeElement(text="new")
    driver.dom["#row"] = lambda now: [old] if now < 0.2 else [new]

    assert engine.wait_until(target_for("#row"), exact_text("new"), 1000) is new
    assert driver.lookups == 3


def test_transient_error_during_apply_keeps_polling(driver, engine, clock):
    el = FakeElement()
    driver.add("#x", el)
    cond = Flaky(StaleElementError("stale"), failures=2)

    assert engine.wait_until(target_for("#x"), cond, 1000) is el
    assert cond.calls == 3
    assert len(clock.sleeps) == 2


def test_fatal_error_during_apply_aborts_immediately(driver, engine, clock):
    driver.add("#x", FakeElement())
    cond = Flaky(ValueError("bad selector syntax"), failures=5)

    with pytest.raises(ValueError, match="bad selector"):
        engine.wait_until(target_for("#x"), cond, 1000)
    assert cond.calls == 1
    assert clock.sleeps == []


def test_fatal_lookup_error_propagates(driver, engine):
    def broken(now):
        raise RuntimeError("session deleted")

    driver.dom["#x"] = broken
    with pytest.raises(RuntimeError, match="session deleted"):
        engine.wait_until(target_for("#x"), exist, 1000)


def test_absent_condition_satisfied_by_absence_without_sleeping(engine, clock):
    assert engine.wait_until(target_for("#gone"), absent, 1000) is None
    assert clock.sleeps == []


def test_wait_while_absent_condition_times_out_on_absent_target(engine, clock):
    with pytest.raises(ElementWaitTimeoutError) as exc_info:
        engine.wait_while(target_for("#gone"), absent, 300)
    assert exc_info.value.still_holds is True
    assert "still has absent" in str(exc_info.value)
    assert clock.now >= 0.3


def test_wait_while_returns_once_condition_stops_holding(driver, engine, clock):
    spinner = FakeElement(displayed=True)
    driver.dom["#spinner"] = lambda now: [spinner] if now < 0.3 else []

    assert engine.wait_while(target_for("#spinner"), visible, 1000) is None
    assert 0.3 <= clock.now < 0.4 + 1e-9


def test_wait_while_transient_read_is_not_success(driver, engine, clock):
    el = FakeElement()
    driver.add("#x", el)

    class StaleThenTrue(Flaky):
        def apply(self, driver, handle):
            super().apply(driver, handle)
            return self.calls < 4

    cond = StaleThenTrue(StaleElementError("stale"), failures=2)
    engine.wait_while(target_for("#x"), cond, 1000)
    assert cond.calls == 4


@pytest.mark.parametrize("condition", [exist, absent, visible, hidden, text("ok")])
@pytest.mark.parametrize("state", ["absent", "visible", "hidden", "stale"])
def test_wait_while_is_dual_of_wait_until_negated(driver, engine, condition, state):
    el = FakeElement(text="ok", displayed=(state != "hidden"))
    el.stale = state == "stale"
    if state != "absent":
        driver.add("#t", el)

    def succeeds(fn, cond):
        try:
            fn(target_for("#t"), cond, 0)
            return True
        except ElementWaitTimeoutError:
            return False

    assert succeeds(engine.wait_while, condition) == succeeds(engine.wait_until, Not(condition))


def test_default_timeout_comes_from_config(driver, clock):
    engine = build_engine(
        driver, config=WaitConfig(timeout_ms=500), clock=clock.monotonic, sleep=clock.sleep
    )
    with pytest.raises(ElementWaitTimeoutError) as exc_info:
        engine.wait_until(target_for("#never"), exist)
    assert exc_info.value.timeout_ms == 500
    assert clock.now >= 0.5


def test_poll_interval_comes_from_config(driver, clock):
    engine = build_engine(
        driver, config=WaitConfig(poll_ms=50), clock=clock.monotonic, sleep=clock.sleep
    )
    with pytest.raises(ElementWaitTimeoutError):
        engine.wait_until(target_for("#never"), exist, 100)
    assert set(clock.sleeps) == {0.05}


def test_negative_timeout_rejected(engine):
    with pytest.raises(ValueError):
        engine.wait_until(target_for("#x"), exist, -1)


def test_poll_outcome_values(driver, engine):
    el = FakeElement()
    driver.add("#x", el)
    assert engine.poll(target_for("#x"), exist, 0) == Satisfied(el)

    outcome = engine.poll(target_for("#y"), exist, 0)
    assert isinstance(outcome, TimedOut)
    assert outcome.attempts == 1


def test_waits_are_journaled(driver, engine):
    driver.add("#x", FakeElement())
    engine.wait_until(target_for("#x"), exist, 0)
    with pytest.raises(ElementWaitTimeoutError):
        engine.wait_until(target_for("#y"), exist, 0)

    first, second = engine.journal.read_last_n(2)
    assert first["action"] == "wait_until"
    assert first["result"] == "element"
    assert second["error"].startswith("Element #y hasn't exist")
    assert second["args"]["attempts"] == 1


def test_real_clock_blocks_for_timeout_plus_at_most_one_interval(driver):
    engine = build_engine(driver)
    start = time.monotonic()
    with pytest.raises(ElementWaitTimeoutError):
        engine.wait_until(target_for("#never"), exist, 200)
    elapsed = time.monotonic() - start
    assert elapsed >= 0.2
    assert elapsed < 0.2 + 0.1 + 0.25
