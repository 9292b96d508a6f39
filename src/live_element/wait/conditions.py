"""Element conditions: named predicates with defined absence behaviour.

A condition answers two questions for the polling engine:

* ``apply(driver, handle)`` -- does the element, as currently resolved,
  satisfy the condition?  May raise transient driver errors when the DOM
  mutates mid-read; the engine treats those as "not yet".
* ``apply_on_absent()`` -- does a missing element satisfy it?

``actual_value`` is only used to build failure messages.
"""

from __future__ import annotations

from typing import Any

from live_element.core.classify import FailureClassifier, is_transient
from live_element.core.errors import clean_message
from live_element.core.target import Absent, Resolution
from live_element.driver.capability import ElementDriver


class Condition:
    """Base condition. Subclasses override :meth:`apply`."""

    def __init__(self, name: str):
        self.name = name

    def apply(self, driver: ElementDriver, handle: Any) -> bool:
        raise NotImplementedError

    def apply_on_absent(self) -> bool:
        return False

    def actual_value(self, driver: ElementDriver, handle: Any) -> str:
        return driver.get_text(handle)

    def diagnose(
        self,
        driver: ElementDriver,
        resolution: Resolution,
        classifier: FailureClassifier,
    ) -> str:
        """Best-effort actual value for *resolution*; never raises for absence."""
        if isinstance(resolution, Absent):
            return resolution.reason or "element not found"
        try:
            return str(self.actual_value(driver, resolution.handle))
        except Exception as exc:
            if not is_transient(classifier, exc):
                raise
            return clean_message(exc)

    def __invert__(self) -> Condition:
        return Not(self)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class Not(Condition):
    def __init__(self, condition: Condition):
        super().__init__(f"not {condition.name}")
        self.condition = condition

    def apply(self, driver: ElementDriver, handle: Any) -> bool:
        return not self.condition.apply(driver, handle)

    def apply_on_absent(self) -> bool:
        return not self.condition.apply_on_absent()

    def actual_value(self, driver: ElementDriver, handle: Any) -> str:
        return self.condition.actual_value(driver, handle)


class Exist(Condition):
    def __init__(self):
        super().__init__("exist")

    def apply(self, driver: ElementDriver, handle: Any) -> bool:
        return True

    def actual_value(self, driver: ElementDriver, handle: Any) -> str:
        return "exists"


class Absence(Condition):
    def __init__(self):
        super().__init__("absent")

    def apply(self, driver: ElementDriver, handle: Any) -> bool:
        return False

    def apply_on_absent(self) -> bool:
        return True

    def actual_value(self, driver: ElementDriver, handle: Any) -> str:
        return "exists"


class Visible(Condition):
    def __init__(self):
        super().__init__("visible")

    def apply(self, driver: ElementDriver, handle: Any) -> bool:
        return bool(driver.is_displayed(handle))

    def actual_value(self, driver: ElementDriver, handle: Any) -> str:
        return "visible" if driver.is_displayed(handle) else "hidden"


class Hidden(Condition):
    """Not displayed, or not in the document at all."""

    def __init__(self):
        super().__init__("hidden")

    def apply(self, driver: ElementDriver, handle: Any) -> bool:
        return not driver.is_displayed(handle)

    def apply_on_absent(self) -> bool:
        return True

    def actual_value(self, driver: ElementDriver, handle: Any) -> str:
        return "visible" if driver.is_displayed(handle) else "hidden"


class Text(Condition):
    """Visible text contains *expected*, ignoring case."""

    def __init__(self, expected: str):
        super().__init__(f"text '{expected}'")
        self.expected = expected

    def apply(self, driver: ElementDriver, handle: Any) -> bool:
        return self.expected.lower() in (driver.get_text(handle) or "").lower()


class ExactText(Condition):
    def __init__(self, expected: str):
        super().__init__(f"exact text '{expected}'")
        self.expected = expected

    def apply(self, driver: ElementDriver, handle: Any) -> bool:
        return (driver.get_text(handle) or "") == self.expected


class Attribute(Condition):
    """Attribute *attr* is set, or equals *expected* when one is given."""

    def __init__(self, attr: str, expected: str | None = None):
        label = f"attribute {attr}" if expected is None else f"{attr} '{expected}'"
        super().__init__(label)
        self.attr = attr
        self.expected = expected

    def apply(self, driver: ElementDriver, handle: Any) -> bool:
        actual = driver.get_attribute(handle, self.attr)
        if self.expected is None:
            return actual is not None
        return (actual or "") == self.expected

    def actual_value(self, driver: ElementDriver, handle: Any) -> str:
        actual = driver.get_attribute(handle, self.attr)
        return "" if actual is None else actual


exist = present = Exist()
absent = Absence()
visible = appear = Visible()
hidden = disappear = Hidden()


def text(expected: str) -> Condition:
    return Text(expected)


def exact_text(expected: str) -> Condition:
    return ExactText(expected)


def value(expected: str) -> Condition:
    return Attribute("value", expected)


def attribute(name: str, expected: str | None = None) -> Condition:
    return Attribute(name, expected)


def not_(condition: Condition) -> Condition:
    return Not(condition)

