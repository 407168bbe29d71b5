from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from pathlib import Path
from typing import Any

from webstep.browser import scripts
from webstep.browser.actions import ActionRecord
from webstep.browser.resolver import ElementResolver
from webstep.browser.session import Element
from webstep.runner.context import RunContext
from webstep.runner.errors import (
    AssertionFailedError,
    ResolutionTimeoutError,
    UnknownActionError,
    ValidationError,
)
from webstep.webdriver import keys as key_codes
from webstep.webdriver.protocol import NoSuchElementError

logger = logging.getLogger(__name__)

Handler = Callable[[RunContext, ActionRecord], Awaitable[None]]


def require_param(record: ActionRecord, name: str) -> str:
    if not record.params:
        raise ValidationError(f"{record.action} action requires 'params'")
    if name not in record.params:
        raise ValidationError(f"{record.action} action requires 'params.{name}'")
    value = record.params[name]
    if not isinstance(value, str):
        raise ValidationError(f"'{name}' should be a string")
    return value


def css_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\a ")
    return f'"{escaped}"'


def render_script_result(result: Any) -> str:
    if isinstance(result, str):
        return result
    return json.dumps(result, separators=(",", ":"), ensure_ascii=False)


def default_screenshot_name() -> str:
    return f"screenshot_{int(time.time())}.png"


class ActionDispatcher:
    def __init__(
        self,
        resolver: ElementResolver | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        output: Callable[[str], None] = print,
    ) -> None:
        self.resolver = resolver or ElementResolver()
        self.sleep = sleep
        self.output = output
        self._handlers: dict[str, Handler] = {
            "navigate": self.navigate,
            "click": self.click,
            "double_click": self.double_click,
            "right_click": self.right_click,
            "enter_text": self.enter_text,
            "keypress": self.keypress,
            "clear": self.clear,
            "select_option": self.select_option,
            "deselect_option": self.deselect_option,
            "get_text": self.get_text,
            "get_attribute": self.get_attribute,
            "wait": self.wait,
            "screenshot": self.screenshot,
            "execute_script": self.execute_script,
            "scroll": self.scroll,
            "hover": self.hover,
            "drag_and_drop": self.drag_and_drop,
            "switch_to_frame": self.switch_to_frame,
            "switch_to_default_content": self.switch_to_default_content,
            "close_browser": self.close_browser,
            "quit_browser": self.quit_browser,
            "assert_title": self.assert_title,
            "assert_element_present": self.assert_element_present,
            "print": self.print_message,
        }

    @property
    def handlers(self) -> Mapping[str, Handler]:
        return self._handlers

    async def dispatch(self, ctx: RunContext, record: ActionRecord) -> None:
        handler = self._handlers.get(record.action)
        if handler is None:
            raise UnknownActionError(record.action)
        await handler(ctx, record)

    async def _find(self, ctx: RunContext, record: ActionRecord, selector: str | None = None) -> Element:
        target = record.selector if selector is None else selector
        return await self.resolver.resolve(ctx.session, target, record.timeout)

    # Navigation

    async def navigate(self, ctx: RunContext, record: ActionRecord) -> None:
        if not record.url:
            raise ValidationError("navigate action requires 'url'")
        await ctx.session.navigate(record.url)

    # Pointer and keyboard

    async def click(self, ctx: RunContext, record: ActionRecord) -> None:
        element = await self._find(ctx, record)
        await element.click()

    async def double_click(self, ctx: RunContext, record: ActionRecord) -> None:
        # the pointer is not moved first: the double-click lands where it already is
        await self._find(ctx, record)
        await ctx.session.double_click()

    async def right_click(self, ctx: RunContext, record: ActionRecord) -> None:
        element = await self._find(ctx, record)
        await ctx.session.execute_script(scripts.CONTEXT_MENU, [element])

    async def enter_text(self, ctx: RunContext, record: ActionRecord) -> None:
        element = await self._find(ctx, record)
        await element.send_keys(record.text)

    async def keypress(self, ctx: RunContext, record: ActionRecord) -> None:
        if not record.keys:
            raise ValidationError("keypress action requires 'keys'")
        try:
            for name in record.keys:
                key_codes.key_code(name)
            for name in record.other_keys:
                key_codes.modifier_code(name)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        element = await self._find(ctx, record)
        await element.press(record.keys, record.other_keys)

    async def clear(self, ctx: RunContext, record: ActionRecord) -> None:
        element = await self._find(ctx, record)
        await element.clear()

    async def hover(self, ctx: RunContext, record: ActionRecord) -> None:
        element = await self._find(ctx, record)
        await element.move_to(0, 0)

    async def drag_and_drop(self, ctx: RunContext, record: ActionRecord) -> None:
        source_selector = require_param(record, "source_selector")
        target_selector = require_param(record, "target_selector")
        source = await self._find(ctx, record, source_selector)
        target = await self._find(ctx, record, target_selector)
        await ctx.session.execute_script(scripts.DRAG_AND_DROP, [source, target])

    async def scroll(self, ctx: RunContext, record: ActionRecord) -> None:
        direction = require_param(record, "direction")
        script = scripts.SCROLL_BY.get(direction.lower())
        if script is None:
            raise ValidationError(f"invalid scroll direction: '{direction}'")
        await ctx.session.execute_script(script)

    # Select elements

    async def _find_option(self, ctx: RunContext, record: ActionRecord) -> Element:
        value = require_param(record, "value")
        select = await self._find(ctx, record)
        option_selector = f"option[value={css_string(value)}]"
        try:
            option = await select.find_element(option_selector)
        except NoSuchElementError as exc:
            raise ValidationError(f"option with value '{value}' not found") from exc
        return option

    async def select_option(self, ctx: RunContext, record: ActionRecord) -> None:
        option = await self._find_option(ctx, record)
        await option.click()

    async def deselect_option(self, ctx: RunContext, record: ActionRecord) -> None:
        option = await self._find_option(ctx, record)
        await ctx.session.execute_script(scripts.DESELECT_OPTION, [option])

    # Extraction

    async def get_text(self, ctx: RunContext, record: ActionRecord) -> None:
        if not record.store_result_as:
            raise ValidationError("get_text action requires 'store_result_as'")
        element = await self._find(ctx, record)
        ctx.variables.set(record.store_result_as, await element.text())

    async def get_attribute(self, ctx: RunContext, record: ActionRecord) -> None:
        if not record.store_result_as:
            raise ValidationError("get_attribute action requires 'store_result_as'")
        attribute = require_param(record, "attribute")
        element = await self._find(ctx, record)
        ctx.variables.set(record.store_result_as, await element.get_attribute(attribute))

    async def execute_script(self, ctx: RunContext, record: ActionRecord) -> None:
        if not record.script:
            raise ValidationError("execute_script action requires 'script'")
        result = await ctx.session.execute_script(record.script, [])
        if record.store_result_as:
            ctx.variables.set(record.store_result_as, render_script_result(result))

    # Timing and capture

    async def wait(self, ctx: RunContext, record: ActionRecord) -> None:
        if record.wait_duration > 0:
            await self.sleep(record.wait_duration)

    async def screenshot(self, ctx: RunContext, record: ActionRecord) -> None:
        path = Path(record.filename or default_screenshot_name())
        png = await ctx.session.screenshot()
        await asyncio.to_thread(path.write_bytes, png)
        logger.info("Saved screenshot to %s (%d bytes)", path, len(png))

    # Frames and windows

    async def switch_to_frame(self, ctx: RunContext, record: ActionRecord) -> None:
        if not record.selector:
            raise ValidationError("switch_to_frame action requires 'selector' for the iframe")
        element = await self._find(ctx, record)
        await ctx.session.switch_frame(element)

    async def switch_to_default_content(self, ctx: RunContext, record: ActionRecord) -> None:
        await ctx.session.switch_frame(None)

    async def close_browser(self, ctx: RunContext, record: ActionRecord) -> None:
        await ctx.session.close()

    async def quit_browser(self, ctx: RunContext, record: ActionRecord) -> None:
        await ctx.session.quit()
        ctx.session_ended = True

    # Assertions and output

    async def assert_title(self, ctx: RunContext, record: ActionRecord) -> None:
        if not record.expected_value:
            raise ValidationError("assert_title action requires 'expected_value'")
        title = await ctx.session.title()
        if title != record.expected_value:
            raise AssertionFailedError(
                f"title assertion failed: expected '{record.expected_value}', got '{title}'"
            )

    async def assert_element_present(self, ctx: RunContext, record: ActionRecord) -> None:
        if not record.selector:
            raise ValidationError("assert_element_present action requires 'selector'")
        try:
            await self._find(ctx, record)
        except ResolutionTimeoutError as exc:
            raise AssertionFailedError(f"element '{record.selector}' not found") from exc

    async def print_message(self, ctx: RunContext, record: ActionRecord) -> None:
        self.output(ctx.variables.render(record.message))
