from __future__ import annotations

import dataclasses

import pytest

from webstep.browser.actions import ActionRecord, parse_action, parse_actions
from webstep.runner.errors import ActionFormatError, ConfigurationError


def test_parses_recorder_output() -> None:
    records = parse_actions(
        """[
            {"action": "navigate", "url": "https://example.com", "timestamp": 1700000000000},
            {"action": "click", "selector": "#go", "text": null, "value": null, "timestamp": 1},
            {"action": "keypress", "selector": "input.q", "text": null, "value": null, "keys": ["Enter"]}
        ]"""
    )

    assert [record.action for record in records] == ["navigate", "click", "keypress"]
    assert records[1].text == ""
    assert records[2].keys == ("Enter",)
    assert records[2].other_keys == ()


def test_defaults_are_zero_values() -> None:
    record = parse_action({"action": "wait"})
    assert record == ActionRecord(action="wait")
    assert record.timeout == 0
    assert dict(record.params) == {}


def test_records_are_immutable() -> None:
    record = parse_action({"action": "scroll", "params": {"direction": "down"}})

    with pytest.raises(dataclasses.FrozenInstanceError):
        record.action = "click"  # type: ignore[misc]
    with pytest.raises(TypeError):
        record.params["direction"] = "up"  # type: ignore[index]


def test_params_keep_arbitrary_values() -> None:
    record = parse_action({"action": "select_option", "params": {"value": 3, "nested": {"a": [1]}}})
    assert record.params["value"] == 3
    assert record.params["nested"] == {"a": [1]}


def test_malformed_json_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match="error parsing JSON"):
        parse_actions('[{"action": "navigate",')


@pytest.mark.parametrize("document", ['{"action": "navigate"}', '"navigate"', "null"])
def test_input_must_be_an_array(document: str) -> None:
    with pytest.raises(ActionFormatError, match="JSON array"):
        parse_actions(document)


@pytest.mark.parametrize(
    "step, message",
    [
        ("click", "must be a JSON object"),
        ({}, "non-empty string 'action'"),
        ({"action": ""}, "non-empty string 'action'"),
        ({"action": 5}, "non-empty string 'action'"),
        ({"action": "click", "selector": 3}, "'selector' should be a string"),
        ({"action": "click", "timeout": "5"}, "'timeout' should be an integer"),
        ({"action": "click", "timeout": 1.5}, "'timeout' should be an integer"),
        ({"action": "wait", "wait_duration": True}, "'wait_duration' should be an integer"),
        ({"action": "keypress", "keys": "Enter"}, "'keys' should be a list of strings"),
        ({"action": "keypress", "other_keys": [1]}, "'other_keys' should be a list of strings"),
        ({"action": "scroll", "params": ["down"]}, "'params' should be an object"),
    ],
)
def test_rejects_malformed_fields(step: object, message: str) -> None:
    with pytest.raises(ActionFormatError, match=message):
        parse_action(step, index=4)


def test_error_names_the_offending_position() -> None:
    with pytest.raises(ActionFormatError, match="action #2"):
        parse_actions('[{"action": "navigate", "url": "x"}, {"selector": "#a"}]')
