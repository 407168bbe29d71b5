from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import shutil
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from webstep.runner.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BrowserSpec:
    name: str
    driver_command: str
    browser_name: str
    options_key: str
    headless_arg: str
    port_args: tuple[str, ...] = field(default=("--port={port}",))

    def capabilities(self, headless: bool) -> dict[str, Any]:
        args = [self.headless_arg] if headless else []
        return {"browserName": self.browser_name, self.options_key: {"args": args}}

    def driver_args(self, port: int) -> list[str]:
        return [arg.format(port=port) for arg in self.port_args]


BROWSERS: dict[str, BrowserSpec] = {
    "firefox": BrowserSpec(
        name="firefox",
        driver_command="geckodriver",
        browser_name="firefox",
        options_key="moz:firefoxOptions",
        headless_arg="-headless",
        port_args=("--port", "{port}"),
    ),
    "chrome": BrowserSpec(
        name="chrome",
        driver_command="chromedriver",
        browser_name="chrome",
        options_key="goog:chromeOptions",
        headless_arg="--headless",
    ),
    "edge": BrowserSpec(
        name="edge",
        driver_command="msedgedriver",
        browser_name="MicrosoftEdge",
        options_key="ms:edgeOptions",
        headless_arg="--headless",
    ),
}


def browser_spec(name: str) -> BrowserSpec:
    try:
        return BROWSERS[name.strip().lower()]
    except KeyError:
        supported = ", ".join(BROWSERS)
        raise ConfigurationError(
            f"Unsupported browser: {name}. Supported browsers are: {supported}."
        ) from None


def resolve_driver_command(command: str) -> str:
    candidate = command.strip().strip('"')
    if os.path.sep in candidate and os.path.exists(candidate):
        return candidate
    resolved = shutil.which(candidate)
    if resolved:
        return resolved
    if os.name == "nt" and not candidate.lower().endswith(".exe"):
        resolved_exe = shutil.which(f"{candidate}.exe")
        if resolved_exe:
            return resolved_exe
    raise ConfigurationError(
        f"WebDriver executable not found: {command}. Install it or pass --webdriver-path."
    )


class DriverService:
    """Runs a WebDriver server process; both of its output streams go to our stderr."""

    def __init__(self, command: str, args: list[str], cwd: str | None = None) -> None:
        self.command = command
        self.args = args
        self.cwd = cwd
        self._process: asyncio.subprocess.Process | None = None

    @classmethod
    def for_browser(cls, spec: BrowserSpec, port: int, webdriver_path: str = "") -> DriverService:
        command = resolve_driver_command(webdriver_path or spec.driver_command)
        return cls(command, spec.driver_args(port))

    async def start(self) -> None:
        logger.info("Starting %s %s", self.command, " ".join(self.args))
        self._process = await asyncio.create_subprocess_exec(
            self.command,
            *self.args,
            cwd=self.cwd or str(Path.cwd()),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=sys.stderr,
        )

    async def stop(self) -> None:
        if self._process is None:
            return
        process = self._process
        if process.returncode is None:
            process.terminate()
            with contextlib.suppress(asyncio.CancelledError, TimeoutError):
                await asyncio.wait_for(process.wait(), timeout=5)
            if process.returncode is None:
                process.kill()
                with contextlib.suppress(asyncio.CancelledError, TimeoutError):
                    await asyncio.wait_for(process.wait(), timeout=5)
        logger.info("Stopped %s (exit code %s)", self.command, process.returncode)
        self._process = None
