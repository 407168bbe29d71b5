from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from webstep.browser.session import Element, Session
from webstep.runner.errors import ResolutionTimeoutError, ValidationError
from webstep.webdriver.protocol import NoSuchElementError

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 0.5


class ElementResolver:
    """Polls for a single element by CSS selector with a fixed backoff."""

    def __init__(
        self,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.poll_interval = poll_interval
        self.clock = clock
        self.sleep = sleep

    async def resolve(self, session: Session, selector: str, timeout: int = 0) -> Element:
        if not selector:
            raise ValidationError("selector is required to find an element")

        deadline = self.clock() + timeout
        attempts = 0
        while True:
            attempts += 1
            try:
                element = await session.find_element(selector)
            except NoSuchElementError:
                if self.clock() >= deadline:
                    logger.debug("'%s' unresolved after %d attempt(s)", selector, attempts)
                    raise ResolutionTimeoutError(selector, timeout) from None
                await self.sleep(self.poll_interval)
                continue
            if attempts > 1:
                logger.debug("'%s' resolved on attempt %d", selector, attempts)
            return element
