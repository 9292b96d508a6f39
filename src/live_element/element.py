"""LiveElement: element operations over a re-resolvable target."""

from __future__ import annotations

import contextlib
import pathlib
import time
from typing import Any, Callable, Iterator, Optional

from live_element import operations as ops
from live_element.config import WaitConfig
from live_element.core.classify import FailureClassifier, is_transient
from live_element.core.errors import (
    ElementActionError,
    ElementUnavailableError,
    FatalError,
    InvalidTargetError,
    ResourceNotFoundError,
    UploadFileNotFoundError,
    clean_message,
)
from live_element.core.target import (
    Absent,
    ByHandle,
    ByLocator,
    Locator,
    TargetDescriptor,
    target_for,
)
from live_element.driver.capability import ElementDriver
from live_element.driver.describe import describe_element
from live_element.journal import WaitJournal
from live_element.wait.conditions import Condition, exist
from live_element.wait.engine import PollingEngine
from live_element.wait.resolver import Resolver


class LiveElement:
    """A logical element that is looked up again for every operation.

    Immediate operations (text, set_value, append, ...) resolve once and
    fail straight away if the element is missing. ``should*`` and
    ``wait_*`` operations poll until the condition holds or the timeout
    (``config.timeout_ms`` unless given) expires.
    """

    def __init__(self, target: TargetDescriptor, engine: PollingEngine):
        self.target = target
        self.engine = engine

    @classmethod
    def locate(
        cls,
        driver: ElementDriver,
        selector: str | tuple[str, str] | Locator,
        index: int = 0,
        **engine_kw: Any,
    ) -> LiveElement:
        return cls(target_for(selector, index), build_engine(driver, **engine_kw))

    @classmethod
    def wrap(cls, driver: ElementDriver, handle: Any, **engine_kw: Any) -> LiveElement:
        return cls(ByHandle(handle), build_engine(driver, **engine_kw))

    @property
    def driver(self) -> ElementDriver:
        return self.engine.driver

    @property
    def config(self) -> WaitConfig:
        return self.engine.config

    @property
    def journal(self) -> WaitJournal:
        return self.engine.journal

    # ------------------------------------------------------------------
    # Assertions and waits
    # ------------------------------------------------------------------

    def should(self, *conditions: Condition, timeout_ms: Optional[int] = None) -> LiveElement:
        for condition in conditions:
            self.engine.wait_until(self.target, condition, timeout_ms)
        return self

    should_have = should_be = should

    def should_not(self, *conditions: Condition, timeout_ms: Optional[int] = None) -> LiveElement:
        for condition in conditions:
            self.engine.wait_while(self.target, condition, timeout_ms)
        return self

    should_not_have = should_not_be = should_not

    def wait_until(self, condition: Condition, timeout_ms: Optional[int] = None) -> LiveElement:
        self.engine.wait_until(self.target, condition, timeout_ms)
        return self

    def wait_while(self, condition: Condition, timeout_ms: Optional[int] = None) -> LiveElement:
        self.engine.wait_while(self.target, condition, timeout_ms)
        return self

    # ------------------------------------------------------------------
    # Immediate accessors and mutators
    # ------------------------------------------------------------------

    def text(self) -> str:
        handle = self._resolve_now("text")
        with self._acting("text"):
            return self.driver.get_text(handle)

    def value(self) -> str | None:
        handle = self._resolve_now("value")
        with self._acting("value"):
            return self.driver.get_attribute(handle, "value")

    def val(self, text: str | None = None) -> Any:
        """Read the value, or set it when *text* is given."""
        if text is None:
            return self.value()
        return self.set_value(text)

    def set_value(self, text: str) -> LiveElement:
        handle = self._resolve_now("set_value")
        with self._acting("set_value", {"text": text}):
            self.driver.clear(handle)
            self.driver.send_keys(handle, text)
        return self

    def append(self, text: str) -> LiveElement:
        handle = self._resolve_now("append")
        with self._acting("append", {"text": text}):
            self.driver.send_keys(handle, text)
        return self

    def press_enter(self) -> LiveElement:
        handle = self._resolve_now("press_enter")
        with self._acting("press_enter"):
            self.driver.send_keys(handle, self.driver.ENTER)
        return self

    def select_option(self, text: str) -> None:
        # TODO wait for an option with this text, not just any option
        self._wait_for_options()
        handle = self._resolve_now("select_option")
        with self._acting("select_option", {"text": text}):
            self.driver.select_by_visible_text(handle, text)

    def select_option_by_value(self, value: str) -> None:
        # TODO wait for an option with this value, not just any option
        self._wait_for_options()
        handle = self._resolve_now("select_option_by_value")
        with self._acting("select_option_by_value", {"value": value}):
            self.driver.select_by_value(handle, value)

    def upload_file(self, path: str | pathlib.Path) -> pathlib.Path:
        """Type the absolute path of *path* into a file ``<input>``."""
        file = pathlib.Path(path).resolve()
        handle = self._upload_input("upload_file")
        if not file.is_file():
            raise UploadFileNotFoundError(str(file))
        return self._send_file("upload_file", handle, file)

    def upload_resource(self, name: str) -> pathlib.Path:
        """Upload *name* found in the first matching configured resource dir."""
        handle = self._upload_input("upload_resource")
        searched = []
        for directory in self.config.resource_dirs:
            base = pathlib.Path(directory).resolve()
            searched.append(str(base))
            candidate = base / name
            if candidate.is_file():
                return self._send_file("upload_resource", handle, candidate)
        raise ResourceNotFoundError(name, searched)

    def invoke(self, name: str, *args: Any) -> Any:
        """Call driver method *name* on the current element; errors propagate."""
        handle = self._resolve_now(name)
        result = self.driver.invoke(handle, name, *args)
        self.journal.record("invoke", self.target.describe(), {"name": name})
        return result

    # ------------------------------------------------------------------
    # Lookup and introspection
    # ------------------------------------------------------------------

    def find(self, selector: str | tuple[str, str] | Locator, index: int = 0) -> LiveElement:
        return LiveElement(target_for(selector, index, parent=self.target), self.engine)

    def exists(self) -> bool:
        return not isinstance(self.engine.resolver.resolve(self.target), Absent)

    def to_handle(self) -> Any:
        return self._resolve_now("to_handle")

    def describe(self) -> str:
        resolution = self.engine.resolver.resolve(self.target)
        if isinstance(resolution, Absent):
            return resolution.reason or f"{self.target.describe()} not found"
        return self._describe_handle(resolution.handle)

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return f"LiveElement({self.target.describe()})"

    # ------------------------------------------------------------------
    # Operation dispatch
    # ------------------------------------------------------------------

    def execute(self, op: ops.Operation) -> Any:
        handler = _DISPATCH.get(type(op))
        if handler is None:
            raise TypeError(f"Unsupported operation: {op!r}")
        return handler(self, op)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve_now(self, action: str) -> Any:
        resolution = self.engine.resolver.resolve(self.target)
        if isinstance(resolution, Absent):
            self.journal.record(action, self.target.describe(), error=resolution.reason)
            raise ElementUnavailableError(self.target.describe(), resolution.reason)
        return resolution.handle

    @contextlib.contextmanager
    def _acting(self, action: str, args: dict[str, Any] | None = None) -> Iterator[None]:
        start = time.monotonic()
        try:
            yield
        except FatalError:
            raise
        except Exception as exc:
            self.journal.record(
                action, self.target.describe(), args, error=clean_message(exc)
            )
            raise ElementActionError(action, self.target.describe(), exc) from exc
        self.journal.record(
            action, self.target.describe(), args, result="ok",
            elapsed_ms=(time.monotonic() - start) * 1000.0,
        )

    def _describe_handle(self, handle: Any) -> str:
        try:
            return describe_element(self.driver, handle)
        except Exception as exc:
            if not is_transient(self.engine.classifier, exc):
                raise
            return clean_message(exc)

    def _upload_input(self, action: str) -> Any:
        handle = self._resolve_now(action)
        with self._acting(action):
            tag = self.driver.get_tag_name(handle)
        if (tag or "").lower() != "input":
            raise InvalidTargetError(
                f"Cannot upload file because {self._describe_handle(handle)} is not an INPUT"
            )
        return handle

    def _send_file(self, action: str, handle: Any, file: pathlib.Path) -> pathlib.Path:
        with self._acting(action, {"path": str(file)}):
            self.driver.send_keys(handle, str(file))
        return file

    def _wait_for_options(self) -> None:
        options = ByLocator(Locator.tag("option"), 0, parent=self.target)
        self.engine.wait_until(options, exist, timeout_ms=0)


def build_engine(
    driver: ElementDriver,
    config: WaitConfig | None = None,
    classifier: FailureClassifier | None = None,
    journal: WaitJournal | None = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> PollingEngine:
    return PollingEngine(Resolver(driver, classifier), config, journal, clock, sleep)


_DISPATCH: dict[type, Callable[[LiveElement, Any], Any]] = {
    ops.SetValue: lambda el, op: el.set_value(op.text),
    ops.ReadValue: lambda el, op: el.value(),
    ops.Append: lambda el, op: el.append(op.text),
    ops.PressEnter: lambda el, op: el.press_enter(),
    ops.ReadText: lambda el, op: el.text(),
    ops.Should: lambda el, op: el.should(*op.conditions, timeout_ms=op.timeout_ms),
    ops.ShouldNot: lambda el, op: el.should_not(*op.conditions, timeout_ms=op.timeout_ms),
    ops.Find: lambda el, op: el.find(op.selector, op.index),
    ops.Exists: lambda el, op: el.exists(),
    ops.Describe: lambda el, op: el.describe(),
    ops.UploadFile: lambda el, op: el.upload_file(op.path),
    ops.UploadResource: lambda el, op: el.upload_resource(op.name),
    ops.SelectOption: lambda el, op: el.select_option(op.text),
    ops.SelectOptionByValue: lambda el, op: el.select_option_by_value(op.value),
    ops.ToHandle: lambda el, op: el.to_handle(),
    ops.WaitUntil: lambda el, op: el.wait_until(op.condition, op.timeout_ms),
    ops.WaitWhile: lambda el, op: el.wait_while(op.condition, op.timeout_ms),
    ops.Invoke: lambda el, op: el.invoke(op.name, *op.args),
}
