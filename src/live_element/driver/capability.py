"""Capability interface the wait engine drives elements through."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from live_element.core.target import Locator


class ElementDriver(Protocol):
    """Element lookup and interaction primitives of an automation backend.

    Handles are opaque to the engine; every property read goes through the
    driver so that stale handles surface as driver errors the failure
    classifier can recognise.
    """

    ENTER: str

    def find_one(self, locator: Locator, within: Any = None) -> Any: ...

    def find_all(self, locator: Locator, within: Any = None) -> Sequence[Any]: ...

    def get_attribute(self, handle: Any, name: str) -> str | None: ...

    def get_text(self, handle: Any) -> str: ...

    def get_tag_name(self, handle: Any) -> str: ...

    def is_displayed(self, handle: Any) -> bool: ...

    def clear(self, handle: Any) -> None: ...

    def send_keys(self, handle: Any, text: str) -> None: ...

    def select_by_visible_text(self, handle: Any, text: str) -> None: ...

    def select_by_value(self, handle: Any, value: str) -> None: ...

    def invoke(self, handle: Any, name: str, *args: Any) -> Any: ...
