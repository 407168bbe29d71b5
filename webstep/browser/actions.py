from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from webstep.runner.errors import ActionFormatError

logger = logging.getLogger(__name__)

_STRING_FIELDS = (
    "action",
    "selector",
    "url",
    "text",
    "value",
    "expected_value",
    "message",
    "filename",
    "script",
    "store_result_as",
    "element_selector",
)
_INT_FIELDS = ("timeout", "wait_duration")
_KEY_LIST_FIELDS = ("keys", "other_keys")


@dataclass(frozen=True, slots=True)
class ActionRecord:
    action: str
    selector: str = ""
    url: str = ""
    text: str = ""
    value: str = ""
    expected_value: str = ""
    message: str = ""
    filename: str = ""
    script: str = ""
    store_result_as: str = ""
    element_selector: str = ""
    timeout: int = 0
    wait_duration: int = 0
    keys: tuple[str, ...] = ()
    other_keys: tuple[str, ...] = ()
    params: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


def parse_action(step: Any, index: int = 0) -> ActionRecord:
    """Decode one JSON object into an ActionRecord.

    Absent and ``null`` fields take their zero value, matching the recorder's
    output where optional keys are frequently written as ``null``.
    """
    where = f"action #{index}" if index else "action"
    if not isinstance(step, dict):
        raise ActionFormatError(f"{where} must be a JSON object, got {type(step).__name__}")

    action = step.get("action")
    if not isinstance(action, str) or not action:
        raise ActionFormatError(f"{where} requires a non-empty string 'action'")

    kwargs: dict[str, Any] = {}
    for name in _STRING_FIELDS:
        raw = step.get(name)
        if raw is None:
            continue
        if not isinstance(raw, str):
            raise ActionFormatError(f"{where}: '{name}' should be a string")
        kwargs[name] = raw

    for name in _INT_FIELDS:
        raw = step.get(name)
        if raw is None:
            continue
        # bool is an int subclass; JSON true/false is not a duration
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise ActionFormatError(f"{where}: '{name}' should be an integer number of seconds")
        kwargs[name] = raw

    for name in _KEY_LIST_FIELDS:
        raw = step.get(name)
        if raw is None:
            continue
        if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
            raise ActionFormatError(f"{where}: '{name}' should be a list of strings")
        kwargs[name] = tuple(raw)

    params = step.get("params")
    if params is not None:
        if not isinstance(params, dict):
            raise ActionFormatError(f"{where}: 'params' should be an object")
        kwargs["params"] = MappingProxyType(dict(params))

    known = {"params", *_STRING_FIELDS, *_INT_FIELDS, *_KEY_LIST_FIELDS}
    ignored = sorted(key for key in step if key not in known)
    if ignored:
        logger.debug("%s: ignoring unknown fields %s", where, ", ".join(ignored))

    return ActionRecord(**kwargs)


def parse_actions(document: str) -> list[ActionRecord]:
    try:
        data = json.loads(document)
    except json.JSONDecodeError as exc:
        raise ActionFormatError(f"error parsing JSON: {exc}") from exc

    if not isinstance(data, list):
        raise ActionFormatError("input must be a JSON array of actions")

    return [parse_action(step, index) for index, step in enumerate(data, start=1)]
