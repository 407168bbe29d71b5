from __future__ import annotations

import asyncio

import pytest

from conftest import FakeClock, FakeSession
from webstep.browser.resolver import POLL_INTERVAL_SECONDS, ElementResolver
from webstep.runner.errors import ResolutionTimeoutError, ValidationError
from webstep.webdriver.protocol import WebDriverError


def _resolver(clock: FakeClock) -> ElementResolver:
    return ElementResolver(clock=clock, sleep=clock.sleep)


def test_resolves_present_element_on_first_attempt(session: FakeSession, clock: FakeClock) -> None:
    element = session.add_element("#go")

    found = asyncio.run(_resolver(clock).resolve(session, "#go", timeout=5))

    assert found is element
    assert session.lookups == ["#go"]
    assert clock.sleeps == []


def test_zero_timeout_makes_exactly_one_attempt(session: FakeSession, clock: FakeClock) -> None:
    with pytest.raises(ResolutionTimeoutError) as excinfo:
        asyncio.run(_resolver(clock).resolve(session, "#missing", timeout=0))

    assert session.lookups == ["#missing"]
    assert clock.sleeps == []
    assert excinfo.value.selector == "#missing"
    assert excinfo.value.timeout == 0


def test_polls_until_element_appears_then_stops(session: FakeSession, clock: FakeClock) -> None:
    element = session.add_element("#late", appear_after=2)

    found = asyncio.run(_resolver(clock).resolve(session, "#late", timeout=5))

    assert found is element
    assert session.lookups == ["#late"] * 3
    assert clock.sleeps == [POLL_INTERVAL_SECONDS, POLL_INTERVAL_SECONDS]


def test_times_out_naming_selector_and_duration(session: FakeSession, clock: FakeClock) -> None:
    with pytest.raises(ResolutionTimeoutError) as excinfo:
        asyncio.run(_resolver(clock).resolve(session, "#never", timeout=2))

    # attempts at t=0, 0.5, 1.0, 1.5 and a final one at the deadline
    assert len(session.lookups) == 5
    assert clock.sleeps == [0.5] * 4
    assert "'#never'" in str(excinfo.value)
    assert "2 seconds" in str(excinfo.value)


def test_empty_selector_is_rejected_without_lookup(session: FakeSession, clock: FakeClock) -> None:
    with pytest.raises(ValidationError):
        asyncio.run(_resolver(clock).resolve(session, "", timeout=3))

    assert session.lookups == []


def test_driver_errors_other_than_not_found_propagate(session: FakeSession, clock: FakeClock) -> None:
    async def broken_lookup(selector: str) -> None:
        session.lookups.append(selector)
        raise WebDriverError("invalid selector", "An invalid or illegal selector was specified")

    session.find_element = broken_lookup  # type: ignore[method-assign]

    with pytest.raises(WebDriverError) as excinfo:
        asyncio.run(_resolver(clock).resolve(session, "div[", timeout=10))

    assert excinfo.value.error == "invalid selector"
    assert session.lookups == ["div["]
    assert clock.sleeps == []
