from __future__ import annotations

import pytest

from omni_relay.api.gemini import extract_generated_text
from omni_relay.utils.helpers import dig, is_truthy, mask_api_key, parse_json_body


RESULT = {"candidates": [{"content": {"parts": [{"text": "hi there"}, {"text": "second"}]}}]}


def test_dig_walks_mappings_and_sequences():
    assert dig(RESULT, ["candidates", 0, "content", "parts", 1, "text"]) == "second"
    assert dig(RESULT, ["candidates", -1, "content", "parts", 0, "text"]) == "hi there"


@pytest.mark.parametrize(
    "path",
    [
        ["missing"],
        ["candidates", 5],
        ["candidates", "0"],
        ["candidates", 0, "content", "parts", 0, "text", 0],
        ["candidates", 0, "content", "parts", 0, "text", "upper"],
    ],
)
def test_dig_returns_default_on_broken_link(path):
    assert dig(RESULT, path, default="fallback") == "fallback"


def test_dig_handles_none_and_scalars():
    assert dig(None, ["a"], default=1) == 1
    assert dig({"a": None}, ["a", "b"], default=2) == 2
    assert dig({"a": None}, ["a"], default=3) == 3
    assert dig(42, [0], default=4) == 4


def test_dig_empty_path_returns_object():
    assert dig(RESULT, []) is RESULT


def test_extract_generated_text():
    assert extract_generated_text(RESULT) == "hi there"
    assert extract_generated_text({"candidates": []}) == ""
    assert extract_generated_text([]) == ""
    assert extract_generated_text(None) == ""


def test_parse_json_body():
    assert parse_json_body(b'{"prompt": "hi"}') == {"prompt": "hi"}
    assert parse_json_body(b"") == {}
    assert parse_json_body(b"{broken") == {}
    assert parse_json_body(b'"just a string"') == {}


def test_mask_api_key_never_reveals_key():
    masked = mask_api_key("AIzaSyA-very-secret-key-1234")
    assert masked.startswith("AIza...1234")
    assert "very-secret" not in masked
    assert mask_api_key("") == "(empty)"
    assert mask_api_key("abcd") == "****...**** (len=4)"
    assert mask_api_key("12345678") == "****...**** (len=8)"


@pytest.mark.parametrize("value", [None, False, 0, 0.0, -0.0, float("nan"), ""])
def test_is_truthy_falsy_values(value):
    assert is_truthy(value) is False


@pytest.mark.parametrize("value", [True, 1, -1, 0.5, "0", " ", {}, [], {"a": 1}, [0]])
def test_is_truthy_truthy_values(value):
    assert is_truthy(value) is True


def test_extract_generated_text_keeps_non_string_values():
    assert extract_generated_text({"candidates": [{"content": {"parts": [{"text": 123}]}}]}) == 123
    assert extract_generated_text({"candidates": [{"content": {"parts": [{"text": 0}]}}]}) == ""
