"""Selenium WebDriver implementation of the element capability interface."""

from __future__ import annotations

from typing import Any, Sequence

from selenium.common.exceptions import (
    InvalidArgumentException,
    InvalidSelectorException,
    InvalidSessionIdException,
    NoSuchDriverException,
    NoSuchWindowException,
    UnexpectedTagNameException,
    WebDriverException,
)
from selenium.webdriver.common.keys import Keys
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support.select import Select

from live_element.core.classify import TypeClassifier
from live_element.core.target import Locator


class SeleniumDriver:
    """Stateless element operations against a live WebDriver session."""

    ENTER = Keys.ENTER

    def __init__(self, webdriver: WebDriver):
        self.webdriver = webdriver
        self.classifier = SeleniumClassifier()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find_one(self, locator: Locator, within: WebElement | None = None) -> WebElement:
        root = within if within is not None else self.webdriver
        return root.find_element(*locator.as_tuple())

    def find_all(
        self, locator: Locator, within: WebElement | None = None
    ) -> Sequence[WebElement]:
        root = within if within is not None else self.webdriver
        return root.find_elements(*locator.as_tuple())

    # ------------------------------------------------------------------
    # State retrieval
    # ------------------------------------------------------------------

    def get_attribute(self, handle: WebElement, name: str) -> str | None:
        return handle.get_attribute(name)

    def get_text(self, handle: WebElement) -> str:
        return handle.text

    def get_tag_name(self, handle: WebElement) -> str:
        return handle.tag_name

    def is_displayed(self, handle: WebElement) -> bool:
        return handle.is_displayed()

    # ------------------------------------------------------------------
    # Element actions
    # ------------------------------------------------------------------

    def clear(self, handle: WebElement) -> None:
        handle.clear()

    def send_keys(self, handle: WebElement, text: str) -> None:
        handle.send_keys(text)

    def select_by_visible_text(self, handle: WebElement, text: str) -> None:
        Select(handle).select_by_visible_text(text)

    def select_by_value(self, handle: WebElement, value: str) -> None:
        Select(handle).select_by_value(value)

    def invoke(self, handle: WebElement, name: str, *args: Any) -> Any:
        attr = getattr(handle, name)
        if callable(attr):
            return attr(*args)
        if args:
            raise TypeError(f"WebElement.{name} is not callable")
        return attr


class SeleniumClassifier(TypeClassifier):
    """Lookup races and stale references are transient; misuse is fatal."""

    def __init__(self):
        super().__init__(
            transient=(WebDriverException,),
            fatal=(
                InvalidSelectorException,
                InvalidArgumentException,
                InvalidSessionIdException,
                NoSuchWindowException,
                NoSuchDriverException,
                UnexpectedTagNameException,
            ),
        )
