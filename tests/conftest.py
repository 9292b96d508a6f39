"""Shared fixtures: an in-memory element driver and a simulated clock."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from live_element.core.errors import ElementNotFoundError, StaleElementError
from live_element.core.target import Locator, target_for
from live_element.element import LiveElement, build_engine

STALE_MESSAGE = (
    "Message: stale element reference: element is not attached to the page document\n"
    "  (Session info: chrome=120.0)\nStacktrace:\n#0 0x55d4 <unknown>"
)


class FakeClock:
    """Monotonic clock where sleeping advances time instantly."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeElement:
    """A DOM node. ``text`` may be a callable of the current time."""

    def __init__(
        self,
        tag: str = "div",
        text: str | Callable[[float], str] = "",
        attrs: dict[str, str] | None = None,
        displayed: bool = True,
        children: dict[str, Any] | None = None,
    ):
        self.tag = tag
        self.text = text
        self.attrs = dict(attrs or {})
        self.displayed = displayed
        self.children = children or {}
        self.stale = False
        self.clicks = 0

    def click(self) -> str:
        self.clicks += 1
        return "clicked"


class FakeDriver:
    """Element driver over a dict of selector -> elements.

    A dict value may be a list of elements or a callable of the current
    time returning one, which simulates a DOM that changes while waiting.
    """

    ENTER = "\ue007"

    def __init__(self, clock: FakeClock | None = None):
        self.clock = clock or FakeClock()
        self.dom: dict[str, Any] = {}
        self.lookups = 0
        self.selected: list[tuple[str, str]] = []

    def add(self, selector: str, *elements: FakeElement) -> None:
        self.dom[selector] = list(elements)

    def _matches(self, locator: Locator, within: FakeElement | None) -> list[FakeElement]:
        if within is not None:
            self._check(within)
            source = within.children
        else:
            source = self.dom
        entry = source.get(locator.value, [])
        if callable(entry):
            entry = entry(self.clock.now)
        return list(entry)

    def _check(self, handle: FakeElement) -> None:
        if handle.stale:
            raise StaleElementError(STALE_MESSAGE)

    def find_one(self, locator: Locator, within: FakeElement | None = None) -> FakeElement:
        self.lookups += 1
        matches = self._matches(locator, within)
        if not matches:
            raise ElementNotFoundError(locator.describe())
        return matches[0]

    def find_all(self, locator: Locator, within: FakeElement | None = None) -> list[FakeElement]:
        self.lookups += 1
        return self._matches(locator, within)

    def get_attribute(self, handle: FakeElement, name: str) -> str | None:
        self._check(handle)
        return handle.attrs.get(name)

    def get_text(self, handle: FakeElement) -> str:
        self._check(handle)
        if callable(handle.text):
            return handle.text(self.clock.now)
        return handle.text

    def get_tag_name(self, handle: FakeElement) -> str:
        self._check(handle)
        return handle.tag

    def is_displayed(self, handle: FakeElement) -> bool:
        self._check(handle)
        return handle.displayed

    def clear(self, handle: FakeElement) -> None:
        self._check(handle)
        handle.attrs["value"] = ""

    def send_keys(self, handle: FakeElement, text: str) -> None:
        self._check(handle)
        handle.attrs["value"] = handle.attrs.get("value", "") + text

    def select_by_visible_text(self, handle: FakeElement, text: str) -> None:
        self._select(handle, "text", text, lambda o: o.text == text)

    def select_by_value(self, handle: FakeElement, value: str) -> None:
        self._select(handle, "value", value, lambda o: o.attrs.get("value") == value)

    def _select(self, handle, kind, wanted, match) -> None:
        self._check(handle)
        for option in handle.children.get("option", []):
            if match(option):
                self.selected.append((kind, wanted))
                return
        raise ValueError(f"Cannot locate option with {kind}: {wanted}")

    def invoke(self, handle: FakeElement, name: str, *args: Any) -> Any:
        self._check(handle)
        return getattr(handle, name)(*args)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def driver(clock) -> FakeDriver:
    return FakeDriver(clock)


@pytest.fixture
def engine(driver, clock):
    return build_engine(driver, clock=clock.monotonic, sleep=clock.sleep)


@pytest.fixture
def live(driver, engine):
    """Factory: live("#id") -> LiveElement sharing the fake engine."""

    def _make(selector: str, index: int = 0) -> LiveElement:
        return LiveElement(target_for(selector, index), engine)

    return _make
