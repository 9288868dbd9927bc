"""Tests for model alias resolution."""

import pytest

from plugin_bridge.models import ModelAlias, infer_temperature, resolve_model


@pytest.mark.parametrize(
    "ref, expected",
    [
        ("haiku", "anthropic/claude-haiku-4-5"),
        ("sonnet", "anthropic/claude-sonnet-4-20250514"),
        ("opus", "anthropic/claude-opus-4-1"),
        ("Haiku", "anthropic/claude-haiku-4-5"),
        ("anthropic/claude-sonnet-4-20250514", "anthropic/claude-sonnet-4-20250514"),
        ("openai/gpt-4o", "openai/gpt-4o"),
        ("mystery-model", "mystery-model"),
        (None, None),
        ("inherit", None),
        ("", None),
    ],
)
def test_resolve_model(ref, expected):
    assert resolve_model(ref) == expected


def test_alias_table_entries_are_qualified():
    for alias in ModelAlias:
        assert "/" in alias.value.model_id


def test_infer_temperature_for_precise_models():
    assert infer_temperature(resolve_model("sonnet")) == 0.1
    assert infer_temperature(resolve_model("opus")) == 0.1


def test_infer_temperature_none_otherwise():
    assert infer_temperature(resolve_model("haiku")) is None
    assert infer_temperature("openai/gpt-4o") is None
    assert infer_temperature(None) is None
