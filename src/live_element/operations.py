"""Operation variants accepted by :meth:`LiveElement.execute`."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from live_element.core.target import Locator
from live_element.wait.conditions import Condition


@dataclass(frozen=True)
class SetValue:
    text: str


@dataclass(frozen=True)
class ReadValue:
    pass


@dataclass(frozen=True)
class Append:
    text: str


@dataclass(frozen=True)
class PressEnter:
    pass


@dataclass(frozen=True)
class ReadText:
    pass


@dataclass(frozen=True)
class Should:
    conditions: tuple[Condition, ...]
    timeout_ms: Optional[int] = None


@dataclass(frozen=True)
class ShouldNot:
    conditions: tuple[Condition, ...]
    timeout_ms: Optional[int] = None


@dataclass(frozen=True)
class Find:
    selector: Union[str, tuple[str, str], Locator]
    index: int = 0


@dataclass(frozen=True)
class Exists:
    pass


@dataclass(frozen=True)
class Describe:
    pass


@dataclass(frozen=True)
class UploadFile:
    path: str


@dataclass(frozen=True)
class UploadResource:
    name: str


@dataclass(frozen=True)
class SelectOption:
    text: str


@dataclass(frozen=True)
class SelectOptionByValue:
    value: str


@dataclass(frozen=True)
class ToHandle:
    pass


@dataclass(frozen=True)
class WaitUntil:
    condition: Condition
    timeout_ms: Optional[int] = None


@dataclass(frozen=True)
class WaitWhile:
    condition: Condition
    timeout_ms: Optional[int] = None


@dataclass(frozen=True)
class Invoke:
    """Call a driver-level method on the freshly resolved element."""
    name: str
    args: tuple[Any, ...] = field(default_factory=tuple)


Operation = Union[
    SetValue, ReadValue, Append, PressEnter, ReadText, Should, ShouldNot,
    Find, Exists, Describe, UploadFile, UploadResource, SelectOption,
    SelectOptionByValue, ToHandle, WaitUntil, WaitWhile, Invoke,
]
