"""Logical element targets and per-attempt resolution results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

CSS = "css selector"
TAG_NAME = "tag name"


class Locator(BaseModel):
    """Identifies elements on a page.

    ``by`` uses the WebDriver strategy names ("css selector", "xpath",
    "tag name", ...); a bare string selector is treated as CSS.
    """
    model_config = ConfigDict(frozen=True)

    by: str = CSS
    value: str = Field(min_length=1)

    @classmethod
    def parse(cls, selector: str | tuple[str, str] | Locator) -> Locator:
        if isinstance(selector, Locator):
            return selector
        if isinstance(selector, str):
            return cls(by=CSS, value=selector)
        if isinstance(selector, tuple) and len(selector) == 2:
            return cls(by=selector[0], value=selector[1])
        raise TypeError(f"Unsupported selector: {selector!r}")

    @classmethod
    def tag(cls, name: str) -> Locator:
        return cls(by=TAG_NAME, value=name)

    def describe(self) -> str:
        if self.by == CSS:
            return self.value
        return f"By.{self.by}: {self.value}"

    def as_tuple(self) -> tuple[str, str]:
        return self.by, self.value


@dataclass(frozen=True)
class ByLocator:
    """The *index*-th match of *locator*, searched inside *parent* if given."""
    locator: Locator
    index: int = 0
    parent: Optional[TargetDescriptor] = None

    def __post_init__(self):
        if self.index < 0:
            raise ValueError(f"index must be >= 0, got {self.index}")

    def describe(self) -> str:
        own = self.locator.describe()
        if self.index:
            own = f"{own}[{self.index}]"
        if self.parent is not None:
            return f"{self.parent.describe()} > {own}"
        return own


@dataclass(frozen=True)
class ByHandle:
    """An element handle obtained elsewhere; checked for staleness on use."""
    handle: Any

    def describe(self) -> str:
        return f"<handle {getattr(self.handle, 'id', None) or hex(id(self.handle))}>"


TargetDescriptor = Union[ByLocator, ByHandle]


def target_for(
    selector: str | tuple[str, str] | Locator,
    index: int = 0,
    parent: TargetDescriptor | None = None,
) -> ByLocator:
    return ByLocator(Locator.parse(selector), index, parent)


@dataclass(frozen=True)
class Present:
    handle: Any


@dataclass(frozen=True)
class Absent:
    reason: str = ""


Resolution = Union[Present, Absent]
