from __future__ import annotations

import re
from dataclasses import dataclass, field

from webstep.browser.session import Session

_PLACEHOLDER = re.compile(r"\{\{([^{}]*)\}\}")


class VariableStore:
    """Run-scoped name -> string mapping; last write wins, nothing is removed."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def set(self, name: str, value: str) -> None:
        self._values[name] = value

    def get(self, name: str) -> str | None:
        return self._values.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def as_dict(self) -> dict[str, str]:
        return dict(self._values)

    def render(self, message: str) -> str:
        """Replace each ``{{name}}`` with its stored value, leaving unknown names as written."""

        def _substitute(match: re.Match[str]) -> str:
            value = self._values.get(match.group(1))
            return match.group(0) if value is None else value

        return _PLACEHOLDER.sub(_substitute, message)


@dataclass(slots=True)
class RunContext:
    session: Session
    variables: VariableStore = field(default_factory=VariableStore)
    session_ended: bool = False
