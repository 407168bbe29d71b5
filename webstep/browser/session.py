from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol


class Element(Protocol):
    async def click(self) -> None: ...

    async def send_keys(self, text: str) -> None: ...

    async def press(self, keys: Sequence[str], modifiers: Sequence[str] = ()) -> None: ...

    async def clear(self) -> None: ...

    async def text(self) -> str: ...

    async def get_attribute(self, name: str) -> str: ...

    async def find_element(self, selector: str) -> Element: ...

    async def move_to(self, x: int = 0, y: int = 0) -> None: ...


class Session(Protocol):
    """One live connection to a running browser.

    ``find_element`` raises ``NoSuchElementError`` when nothing matches; every
    other driver failure surfaces as ``WebDriverError`` or a transport error.
    """

    async def navigate(self, url: str) -> None: ...

    async def find_element(self, selector: str) -> Element: ...

    async def execute_script(self, script: str, args: Sequence[Any] = ()) -> Any: ...

    async def screenshot(self) -> bytes: ...

    async def resize_window(self, width: int, height: int) -> None: ...

    async def set_implicit_wait(self, seconds: float) -> None: ...

    async def switch_frame(self, element: Element | None) -> None: ...

    async def title(self) -> str: ...

    async def double_click(self) -> None: ...

    async def close(self) -> None: ...

    async def quit(self) -> None: ...
