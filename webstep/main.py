from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import os
import sys

from dotenv import load_dotenv
from rich import print as console_print
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from webstep.browser.actions import ActionRecord, parse_actions
from webstep.runner.context import RunContext
from webstep.runner.errors import ConfigurationError
from webstep.runner.loop import RunReport, StepRunner
from webstep.webdriver.service import BrowserSpec, DriverService, browser_spec
from webstep.webdriver.session import WebDriverSession

logger = logging.getLogger("webstep")

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str) -> bool:
    return os.getenv(name, "0").strip().lower() in _TRUTHY


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="webstep",
        description="Run a JSON array of browser actions against a WebDriver session",
    )
    parser.add_argument(
        "--browser",
        default=os.getenv("WEBSTEP_BROWSER", "firefox"),
        help="Browser to use (firefox, chrome, edge)",
    )
    parser.add_argument(
        "--webdriver-path",
        default=os.getenv("WEBDRIVER_PATH", ""),
        help="Path to the WebDriver executable (overrides default PATH lookup)",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        default=_env_flag("WEBSTEP_HEADLESS"),
        help="Run browser in headless mode",
    )
    parser.add_argument("--window-width", type=int, default=1280, help="Width of the browser window")
    parser.add_argument("--window-height", type=int, default=800, help="Height of the browser window")
    parser.add_argument(
        "--default-timeout",
        type=int,
        default=_env_int("WEBSTEP_DEFAULT_TIMEOUT", 30),
        help="Implicit wait in seconds applied by the driver to element lookups",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=_env_int("WEBSTEP_PORT", 13337),
        help="Port for the WebDriver service",
    )
    parser.add_argument("--close", action="store_true", help="Close the browser after execution")
    parser.add_argument("--input", default="-", help="Read actions from this file instead of stdin")
    parser.add_argument("--verbose", action="store_true", default=_env_flag("VERBOSE"))
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def _read_document(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    try:
        with open(path, encoding="utf-8") as handle:
            return handle.read()
    except OSError as exc:
        raise ConfigurationError(f"Failed to read actions from {path}: {exc}") from exc


async def _open_session(
    spec: BrowserSpec, args: argparse.Namespace
) -> tuple[DriverService, WebDriverSession]:
    service = DriverService.for_browser(spec, args.port, args.webdriver_path)
    await service.start()
    session = WebDriverSession(f"http://127.0.0.1:{args.port}")
    try:
        await session.wait_until_ready()
        await session.start(spec.capabilities(args.headless))
        try:
            await session.resize_window(args.window_width, args.window_height)
            await session.set_implicit_wait(args.default_timeout)
        except Exception:
            with contextlib.suppress(Exception):
                await session.quit()
            raise
    except BaseException:
        await session.aclose()
        await service.stop()
        raise
    return service, session


async def _teardown(ctx: RunContext, session: WebDriverSession, service: DriverService, close: bool) -> None:
    if close and not ctx.session_ended:
        try:
            await session.quit()
        except Exception as exc:
            logger.warning("Error quitting WebDriver: %s", exc)
    await session.aclose()
    await service.stop()


async def _run(spec: BrowserSpec, args: argparse.Namespace, records: list[ActionRecord]) -> RunReport:
    service, session = await _open_session(spec, args)
    ctx = RunContext(session=session)
    try:
        report = await StepRunner().run(ctx, records)
        logger.debug("Variables at end of run: %s", ctx.variables.as_dict())
        return report
    finally:
        await _teardown(ctx, session, service, args.close)


def _print_summary(report: RunReport) -> None:
    console_print("\n" + "=" * 60)
    if report.success:
        console_print("✅ All steps executed successfully.")
    else:
        console_print("❌ RUN FAILED")
    console_print(f"Steps executed: {report.steps_executed}/{report.total_steps}")
    if report.last_error:
        console_print(f"Error: {escape(report.last_error)}")
    console_print("=" * 60 + "\n")


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    try:
        args = _parse_args(argv)
        _configure_logging(args.verbose)
        spec = browser_spec(args.browser)
        records = parse_actions(_read_document(args.input))
    except ConfigurationError as exc:
        logger.error("%s", exc)
        sys.exit(2)

    try:
        report = asyncio.run(_run(spec, args, records))
    except ConfigurationError as exc:
        logger.error("%s", exc)
        sys.exit(2)
    except Exception as exc:
        logger.error("WebDriver session failed: %s", exc)
        sys.exit(1)

    _print_summary(report)
    if not report.success:
        sys.exit(1)


if __name__ == "__main__":
    main()
