from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pytest

from webstep.webdriver.protocol import NoSuchElementError


class FakeElement:
    def __init__(
        self,
        session: FakeSession,
        selector: str,
        text: str = "",
        attributes: dict[str, str] | None = None,
    ) -> None:
        self.session = session
        self.selector = selector
        self.text_value = text
        self.attributes = dict(attributes or {})
        self.children: dict[str, FakeElement] = {}

    def __repr__(self) -> str:
        return f"FakeElement({self.selector!r})"

    def add_child(self, selector: str, **kwargs: Any) -> FakeElement:
        child = FakeElement(self.session, selector, **kwargs)
        self.children[selector] = child
        return child

    async def click(self) -> None:
        self.session.calls.append(("click", self.selector))

    async def send_keys(self, text: str) -> None:
        self.session.calls.append(("send_keys", self.selector, text))

    async def press(self, keys: Sequence[str], modifiers: Sequence[str] = ()) -> None:
        self.session.calls.append(("press", self.selector, tuple(keys), tuple(modifiers)))

    async def clear(self) -> None:
        self.session.calls.append(("clear", self.selector))

    async def text(self) -> str:
        return self.text_value

    async def get_attribute(self, name: str) -> str:
        return self.attributes[name]

    async def find_element(self, selector: str) -> FakeElement:
        self.session.calls.append(("find_child", self.selector, selector))
        try:
            return self.children[selector]
        except KeyError:
            raise NoSuchElementError("no such element", f"no child matching {selector}") from None

    async def move_to(self, x: int = 0, y: int = 0) -> None:
        self.session.calls.append(("move_to", self.selector, x, y))


class FakeSession:
    """In-memory Session: elements keyed by exact selector, every call recorded."""

    def __init__(self) -> None:
        self.elements: dict[str, FakeElement] = {}
        self.missing_until: dict[str, int] = {}
        self.lookups: list[str] = []
        self.calls: list[tuple[Any, ...]] = []
        self.page_title = ""
        self.script_result: Any = None
        self.screenshot_bytes = b"\x89PNG fake"

    def add_element(self, selector: str, appear_after: int = 0, **kwargs: Any) -> FakeElement:
        element = FakeElement(self, selector, **kwargs)
        self.elements[selector] = element
        if appear_after:
            self.missing_until[selector] = appear_after
        return element

    async def navigate(self, url: str) -> None:
        self.calls.append(("navigate", url))

    async def find_element(self, selector: str) -> FakeElement:
        self.lookups.append(selector)
        remaining = self.missing_until.get(selector, 0)
        if remaining:
            self.missing_until[selector] = remaining - 1
        elif selector in self.elements:
            return self.elements[selector]
        raise NoSuchElementError("no such element", f"Unable to locate element: {selector}")

    async def execute_script(self, script: str, args: Sequence[Any] = ()) -> Any:
        self.calls.append(("execute_script", script, list(args)))
        return self.script_result

    async def screenshot(self) -> bytes:
        self.calls.append(("screenshot",))
        return self.screenshot_bytes

    async def resize_window(self, width: int, height: int) -> None:
        self.calls.append(("resize_window", width, height))

    async def set_implicit_wait(self, seconds: float) -> None:
        self.calls.append(("set_implicit_wait", seconds))

    async def switch_frame(self, element: FakeElement | None) -> None:
        self.calls.append(("switch_frame", element))

    async def title(self) -> str:
        return self.page_title

    async def double_click(self) -> None:
        self.calls.append(("double_click",))

    async def close(self) -> None:
        self.calls.append(("close",))

    async def quit(self) -> None:
        self.calls.append(("quit",))

    async def aclose(self) -> None:
        self.calls.append(("aclose",))


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
