import json

import pytest

from src.core.post_processing import ExtractedJson, extract_json, strip_code_fences


PAYLOAD = {"site_name": "Dougga", "confidence": 88, "fun_facts": ["Roman theatre"]}


@pytest.mark.parametrize(
    "template",
    [
        "{body}",
        "```json\n{body}\n```",
        "```\n{body}\n```",
        "Here is your answer:\n{body}\nLet me know if you need more.",
        "Sure! ```JSON\n{body}\n``` Enjoy your trip.",
        "   \n{body}   ",
    ],
)
def test_extract_recovers_embedded_object(template):
    raw = template.format(body=json.dumps(PAYLOAD, indent=2))

    extracted = extract_json(raw)

    assert isinstance(extracted, ExtractedJson)
    assert extracted.data == PAYLOAD
    assert json.loads(extracted.text) == PAYLOAD


def test_extract_dougga_scenario():
    raw = 'Here is your answer:\n```json\n{"site_name":"Dougga","confidence":88}\n```\nHope that helps!'

    extracted = extract_json(raw)

    assert extracted is not None
    assert extracted.data == {"site_name": "Dougga", "confidence": 88}


@pytest.mark.parametrize("raw", ["I'm not sure what this is.", "", None, "} backwards {"])
def test_extract_returns_none_without_brace_pair(raw):
    assert extract_json(raw) is None


def test_extract_returns_none_for_invalid_json():
    assert extract_json('{"site_name": "Dougga", "confidence": }') is None


def test_extract_returns_none_for_truncated_output():
    raw = '```json\n{"title": "Five days in Tunisia", "days": [{"day": 1, "title": "Tunis"'

    assert extract_json(raw) is None


def test_extract_keeps_nested_objects():
    payload = {"days": [{"day": 1, "destinations": [{"name": "Carthage", "order": 1}]}]}

    extracted = extract_json(f"Plan:\n{json.dumps(payload)}\nThanks")

    assert extracted is not None
    assert extracted.data == payload


def test_extract_two_sibling_objects_is_not_recovered():
    """Known limitation: first '{' to last '}' spans both objects."""
    raw = 'First: {"site_name": "Dougga"} and second: {"site_name": "Carthage"}'

    assert extract_json(raw) is None


def test_extract_stray_closing_brace_after_object_breaks_candidate():
    # A stray closing brace after the object moves the end boundary too.
    raw = '{"site_name": "Dougga"} :-}'

    assert extract_json(raw) is None


def test_strip_code_fences_removes_every_marker():
    assert strip_code_fences("```json\n{}\n```") == "\n{}\n"
    assert strip_code_fences("no fences") == "no fences"
