from __future__ import annotations


class ConfigurationError(Exception):
    """Raised before any step runs: bad browser choice, unreadable input, missing driver."""


class ActionFormatError(ConfigurationError):
    pass


class StepError(Exception):
    pass


class ValidationError(StepError):
    pass


class UnknownActionError(StepError):
    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(f"unknown action: {action}")


class ResolutionTimeoutError(StepError):
    def __init__(self, selector: str, timeout: int) -> None:
        self.selector = selector
        self.timeout = timeout
        super().__init__(f"element with selector '{selector}' not found after {timeout} seconds")


class AssertionFailedError(StepError):
    pass
