from __future__ import annotations

from collections.abc import Sequence

NULL = "\ue000"

NAMED_KEYS: dict[str, str] = {
    "cancel": "\ue001",
    "help": "\ue002",
    "backspace": "\ue003",
    "tab": "\ue004",
    "clear": "\ue005",
    "return": "\ue006",
    "enter": "\ue007",
    "shift": "\ue008",
    "control": "\ue009",
    "alt": "\ue00a",
    "pause": "\ue00b",
    "escape": "\ue00c",
    "space": "\ue00d",
    "pageup": "\ue00e",
    "pagedown": "\ue00f",
    "end": "\ue010",
    "home": "\ue011",
    "arrowleft": "\ue012",
    "arrowup": "\ue013",
    "arrowright": "\ue014",
    "arrowdown": "\ue015",
    "insert": "\ue016",
    "delete": "\ue017",
    "f1": "\ue031",
    "f2": "\ue032",
    "f3": "\ue033",
    "f4": "\ue034",
    "f5": "\ue035",
    "f6": "\ue036",
    "f7": "\ue037",
    "f8": "\ue038",
    "f9": "\ue039",
    "f10": "\ue03a",
    "f11": "\ue03b",
    "f12": "\ue03c",
    "meta": "\ue03d",
}

MODIFIERS = frozenset({"shift", "control", "alt", "meta"})

_ALIASES = {
    "esc": "escape",
    "ctrl": "control",
    "command": "meta",
    "cmd": "meta",
    "left": "arrowleft",
    "right": "arrowright",
    "up": "arrowup",
    "down": "arrowdown",
    "del": "delete",
}


def key_code(name: str) -> str:
    """Map a DOM ``KeyboardEvent.key`` style name to the code WebDriver expects.

    Single characters are typed literally.
    """
    if len(name) == 1:
        return NAMED_KEYS.get(name, name)
    normalized = name.strip().lower()
    normalized = _ALIASES.get(normalized, normalized)
    try:
        return NAMED_KEYS[normalized]
    except KeyError:
        raise ValueError(f"unknown key name: {name!r}") from None


def modifier_code(name: str) -> str:
    normalized = name.strip().lower()
    normalized = _ALIASES.get(normalized, normalized)
    if normalized not in MODIFIERS:
        raise ValueError(f"not a modifier key: {name!r}")
    return NAMED_KEYS[normalized]


def chord(keys: Sequence[str], modifiers: Sequence[str] = ()) -> str:
    """Modifiers stay pressed until the trailing NULL releases them."""
    held = "".join(modifier_code(name) for name in modifiers)
    typed = "".join(key_code(name) for name in keys)
    return f"{held}{typed}{NULL}" if held else typed
