from __future__ import annotations

import base64
import logging
from collections.abc import Sequence
from typing import Any
from urllib.parse import quote

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_delay, wait_fixed

from .keys import chord
from .protocol import (
    CSS_SELECTOR,
    WebDriverCommand,
    WebDriverError,
    command,
    element_id_from,
    element_ref,
    extract_value,
)

logger = logging.getLogger(__name__)


class DriverNotReadyError(Exception):
    pass


class WebElement:
    def __init__(self, session: WebDriverSession, element_id: str) -> None:
        self.session = session
        self.element_id = element_id

    def __repr__(self) -> str:
        return f"WebElement({self.element_id!r})"

    def to_json(self) -> dict[str, str]:
        return element_ref(self.element_id)

    async def _call(self, method: str, suffix: str, body: dict[str, Any] | None = None) -> Any:
        return await self.session.session_request(method, f"/element/{self.element_id}{suffix}", body)

    async def click(self) -> None:
        await self._call("POST", "/click")

    async def send_keys(self, text: str) -> None:
        await self._call("POST", "/value", {"text": text})

    async def press(self, keys: Sequence[str], modifiers: Sequence[str] = ()) -> None:
        await self.send_keys(chord(keys, modifiers))

    async def clear(self) -> None:
        await self._call("POST", "/clear")

    async def text(self) -> str:
        return str(await self._call("GET", "/text"))

    async def get_attribute(self, name: str) -> str:
        value = await self._call("GET", f"/attribute/{quote(name, safe='')}")
        if value is None:
            raise WebDriverError("no such attribute", f"element has no attribute '{name}'")
        return str(value)

    async def find_element(self, selector: str) -> WebElement:
        value = await self._call("POST", "/element", {"using": CSS_SELECTOR, "value": selector})
        return WebElement(self.session, element_id_from(value))

    async def move_to(self, x: int = 0, y: int = 0) -> None:
        await self.session.perform_pointer_actions(
            [{"type": "pointerMove", "duration": 0, "origin": self.to_json(), "x": x, "y": y}]
        )


class WebDriverSession:
    """W3C WebDriver client for one browser session on a running driver service."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.session_id: str | None = None
        self.capabilities: dict[str, Any] = {}
        self._client = client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout_seconds)

    async def request(self, cmd: WebDriverCommand) -> Any:
        logger.debug("-> %s %s %s", cmd.method, cmd.path, cmd.body if cmd.body else "")
        response = await self._client.request(**cmd.to_request())
        try:
            payload = response.json()
        except ValueError:
            response.raise_for_status()
            raise WebDriverError(
                "unknown error", f"non-JSON driver response: {response.text[:200]}", response.status_code
            ) from None
        logger.debug("<- %s %s", response.status_code, str(payload)[:500])
        return extract_value(payload, response.status_code)

    async def session_request(self, method: str, suffix: str, body: dict[str, Any] | None = None) -> Any:
        if self.session_id is None:
            raise WebDriverError("invalid session id", "no active session")
        return await self.request(command(method, f"/session/{self.session_id}{suffix}", body))

    @retry(
        stop=stop_after_delay(20),
        wait=wait_fixed(0.25),
        retry=retry_if_exception_type((httpx.TransportError, DriverNotReadyError)),
        reraise=True,
    )
    async def wait_until_ready(self) -> dict[str, Any]:
        status = await self.request(command("GET", "/status"))
        if isinstance(status, dict) and status.get("ready") is False:
            raise DriverNotReadyError(str(status.get("message", "driver not ready")))
        return status if isinstance(status, dict) else {}

    async def start(self, capabilities: dict[str, Any]) -> None:
        value = await self.request(
            command("POST", "/session", {"capabilities": {"alwaysMatch": capabilities}})
        )
        self.session_id = str(value["sessionId"])
        self.capabilities = dict(value.get("capabilities") or {})
        logger.info(
            "Started %s session %s",
            self.capabilities.get("browserName", "browser"),
            self.session_id,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def navigate(self, url: str) -> None:
        await self.session_request("POST", "/url", {"url": url})

    async def find_element(self, selector: str) -> WebElement:
        value = await self.session_request("POST", "/element", {"using": CSS_SELECTOR, "value": selector})
        return WebElement(self, element_id_from(value))

    async def execute_script(self, script: str, args: Sequence[Any] = ()) -> Any:
        encoded = [arg.to_json() if isinstance(arg, WebElement) else arg for arg in args]
        return await self.session_request("POST", "/execute/sync", {"script": script, "args": encoded})

    async def screenshot(self) -> bytes:
        return base64.b64decode(await self.session_request("GET", "/screenshot"))

    async def resize_window(self, width: int, height: int) -> None:
        await self.session_request("POST", "/window/rect", {"width": width, "height": height})

    async def set_implicit_wait(self, seconds: float) -> None:
        await self.session_request("POST", "/timeouts", {"implicit": int(seconds * 1000)})

    async def switch_frame(self, element: WebElement | None) -> None:
        frame_id = element.to_json() if element is not None else None
        await self.session_request("POST", "/frame", {"id": frame_id})

    async def title(self) -> str:
        return str(await self.session_request("GET", "/title"))

    async def perform_pointer_actions(self, steps: list[dict[str, Any]]) -> None:
        await self.session_request(
            "POST",
            "/actions",
            {
                "actions": [
                    {
                        "type": "pointer",
                        "id": "mouse",
                        "parameters": {"pointerType": "mouse"},
                        "actions": steps,
                    }
                ]
            },
        )
        await self.session_request("DELETE", "/actions")

    async def double_click(self) -> None:
        press = [{"type": "pointerDown", "button": 0}, {"type": "pointerUp", "button": 0}]
        await self.perform_pointer_actions(press * 2)

    async def close(self) -> None:
        await self.session_request("DELETE", "/window")

    async def quit(self) -> None:
        await self.session_request("DELETE", "")
        logger.info("Ended session %s", self.session_id)
        self.session_id = None
