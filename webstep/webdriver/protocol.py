from __future__ import annotations

from dataclasses import dataclass
from typing import Any


ELEMENT_KEY = "element-6066-11e4-a52e-4f735466cecf"
CSS_SELECTOR = "css selector"


@dataclass(slots=True)
class WebDriverCommand:
    method: str
    path: str
    body: dict[str, Any] | None = None

    def to_request(self) -> dict[str, Any]:
        request: dict[str, Any] = {"method": self.method, "url": self.path}
        if self.method == "POST":
            request["json"] = self.body if self.body is not None else {}
        return request


class WebDriverError(Exception):
    def __init__(self, error: str, message: str, status: int | None = None, stacktrace: str = "") -> None:
        self.error = error
        self.message = message
        self.status = status
        self.stacktrace = stacktrace
        super().__init__(f"{error}: {message}" if message else error)


class NoSuchElementError(WebDriverError):
    pass


class NoSuchWindowError(WebDriverError):
    pass


class InvalidSessionIdError(WebDriverError):
    pass


_ERROR_TYPES: dict[str, type[WebDriverError]] = {
    "no such element": NoSuchElementError,
    "no such window": NoSuchWindowError,
    "invalid session id": InvalidSessionIdError,
}


def command(method: str, path: str, body: dict[str, Any] | None = None) -> WebDriverCommand:
    return WebDriverCommand(method=method, path=path, body=body)


def is_error(payload: Any) -> bool:
    value = payload.get("value") if isinstance(payload, dict) else None
    return isinstance(value, dict) and isinstance(value.get("error"), str)


def extract_value(payload: Any, status: int | None = None) -> Any:
    if not isinstance(payload, dict) or "value" not in payload:
        raise WebDriverError("unknown error", f"malformed driver response: {payload!r}", status)
    if is_error(payload):
        value = payload["value"]
        error = value["error"]
        raise _ERROR_TYPES.get(error, WebDriverError)(
            error,
            str(value.get("message", "")),
            status,
            str(value.get("stacktrace", "")),
        )
    return payload["value"]


def element_ref(element_id: str) -> dict[str, str]:
    return {ELEMENT_KEY: element_id}


def element_id_from(value: Any) -> str:
    if isinstance(value, dict):
        element_id = value.get(ELEMENT_KEY) or value.get("ELEMENT")
        if isinstance(element_id, str) and element_id:
            return element_id
    raise WebDriverError("unknown error", f"response is not an element reference: {value!r}")
