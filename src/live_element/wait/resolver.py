"""Turn a target descriptor into a fresh Present/Absent result."""

from __future__ import annotations

from typing import Any

from live_element.core.classify import FailureClassifier, TypeClassifier, is_transient
from live_element.core.errors import ElementIndexError, clean_message
from live_element.core.target import (
    Absent,
    ByHandle,
    ByLocator,
    Present,
    Resolution,
    TargetDescriptor,
)
from live_element.driver.capability import ElementDriver


class Resolver:
    """One lookup per descriptor level per call. Nothing is cached."""

    def __init__(self, driver: ElementDriver, classifier: FailureClassifier | None = None):
        self.driver = driver
        self.classifier = classifier or getattr(driver, "classifier", None) or TypeClassifier()

    def resolve(self, target: TargetDescriptor) -> Resolution:
        """Return Present(handle) or Absent(reason).

        Transient lookup failures become Absent; anything the classifier
        considers fatal propagates.
        """
        try:
            return Present(self._lookup(target))
        except Exception as exc:
            if not is_transient(self.classifier, exc):
                raise
            return Absent(clean_message(exc))

    def _lookup(self, target: TargetDescriptor) -> Any:
        if isinstance(target, ByHandle):
            # Any property read raises for a detached element.
            self.driver.get_tag_name(target.handle)
            return target.handle

        within = None
        if target.parent is not None:
            within = self._lookup(target.parent)

        if target.index == 0:
            return self.driver.find_one(target.locator, within)

        matches = self.driver.find_all(target.locator, within)
        if target.index >= len(matches):
            raise ElementIndexError(target.describe(), target.index, len(matches))
        return matches[target.index]
