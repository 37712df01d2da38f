"""Strict-then-degrade parsing of model output."""

from __future__ import annotations

from repo_forge.services.response_normalizer import (
    FallbackShape,
    normalize_response,
    repair_json_text,
    strip_code_fences,
)

FALLBACK = FallbackShape(defaults={"summary": "unparsed", "items": []}, raw_field="raw_text")


def test_strip_code_fences_with_language_tag() -> None:
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'


def test_strip_code_fences_without_language_tag() -> None:
    assert strip_code_fences('```\n{"a": 1}\n```  ') == '{"a": 1}'


def test_repair_doubles_stray_backslashes_only() -> None:
    assert repair_json_text(r'{"p": "C:\dir"}') == r'{"p": "C:\\dir"}'
    # valid escapes are left alone
    assert repair_json_text(r'{"p": "a\nb \"q\" \\d \u00e9"}') == r'{"p": "a\nb \"q\" \\d \u00e9"}'


def test_repair_collapses_newlines_and_quotes() -> None:
    text = "{\r\n\r\n“name”:\n\n\n “x”}"
    assert repair_json_text(text) == '{\n"name":\n "x"}'
    assert repair_json_text("‘a’") == "'a'"


def test_normalize_fenced_json() -> None:
    raw = '```json\n{"summary": "ok", "items": ["a", "b"]}\n```'
    assert normalize_response(raw, FALLBACK) == {"summary": "ok", "items": ["a", "b"]}


def test_normalize_curly_quotes() -> None:
    raw = "{“summary”: “fine”, “items”: []}"
    assert normalize_response(raw, FALLBACK) == {"summary": "fine", "items": []}


def test_normalize_stray_backslash() -> None:
    raw = '{"path": "src\\utils\\helpers.py"}'
    assert normalize_response(raw, FALLBACK) == {"path": "src\\utils\\helpers.py"}


def test_normalize_merges_extra_on_success() -> None:
    result = normalize_response('{"summary": "ok"}', FALLBACK, extra={"stars": 3})
    assert result == {"summary": "ok", "stars": 3}


def test_unparseable_text_degrades_to_fallback_with_raw() -> None:
    raw = "Sorry, I cannot produce JSON for this { repo"
    result = normalize_response(raw, FALLBACK, extra={"stars": 3})
    assert result == {"summary": "unparsed", "items": [], "raw_text": raw, "stars": 3}


def test_non_object_json_degrades_to_fallback() -> None:
    raw = '["just", "a", "list"]'
    result = normalize_response(raw, FALLBACK)
    assert result["raw_text"] == raw
    assert result["summary"] == "unparsed"


def test_fallback_defaults_are_not_shared_between_calls() -> None:
    first = normalize_response("nope", FALLBACK)
    first["items"].append("mutated")
    second = normalize_response("nope", FALLBACK)
    assert second["items"] == []


def test_empty_text_never_raises() -> None:
    assert normalize_response("", FALLBACK)["raw_text"] == ""
