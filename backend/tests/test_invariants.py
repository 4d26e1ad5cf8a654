from datetime import date

import pytest

from sitecms.domain.exceptions import ValidationError
from sitecms.domain.identifiers import is_synthetic_page_id, normalize_page_id
from sitecms.domain.invariants.layout import (
    normalize_language_code,
    normalize_layout_json,
    normalize_layout_language,
)
from sitecms.domain.invariants.page import coerce_review_date, validate_slug
from sitecms.domain.lifecycle.page import assert_page_transition


@pytest.mark.parametrize("value, expected", [(7, 7), ("7", 7), (" 12 ", 12)])
def test_normalize_page_id_accepts_ints_and_numeric_strings(value, expected):
    assert normalize_page_id(value) == expected


@pytest.mark.parametrize("value", ["abc", "theme-landingpage-home", "", None, True, 0, -3, 1.5])
def test_normalize_page_id_rejects_everything_else(value):
    with pytest.raises(ValidationError):
        normalize_page_id(value)


def test_synthetic_ids_are_detected():
    assert is_synthetic_page_id("theme-landingpage-homepage")
    assert not is_synthetic_page_id("12")
    assert not is_synthetic_page_id(12)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("about", "/about"),
        ("  /about-us/  ", "/about-us"),
        ("/", "/"),
        ("/blog/2024", "/blog/2024"),
    ],
)
def test_validate_slug_normalizes(raw, expected):
    assert validate_slug(raw) == expected


@pytest.mark.parametrize("raw", ["/About", "/a//b", "/hello world", "/café"])
def test_validate_slug_rejects_invalid(raw):
    with pytest.raises(ValidationError):
        validate_slug(raw)


def test_layout_normalization_wraps_lists_and_parses_strings():
    components = [{"id": "hero-1", "type": "Hero", "props": {}}]

    assert normalize_layout_json(components) == {"components": components}
    assert normalize_layout_json('{"components": []}') == {"components": []}
    assert normalize_layout_json({"components": None, "theme": "x"}) == {"components": [], "theme": "x"}


@pytest.mark.parametrize("raw", ["not json", 42, {"components": "hero"}, {"components": ["hero"]}])
def test_layout_normalization_rejects_bad_shapes(raw):
    with pytest.raises(ValidationError):
        normalize_layout_json(raw)


def test_layout_language_defaults_and_validation():
    assert normalize_layout_language(None) == "default"
    assert normalize_layout_language("") == "default"
    assert normalize_layout_language("default") == "default"
    assert normalize_layout_language("fr") == "fr"
    assert normalize_language_code(" zh-CN ") == "zh-CN"

    with pytest.raises(ValidationError):
        normalize_layout_language("French")


def test_review_date_coercion():
    assert coerce_review_date("2025-11-03") == date(2025, 11, 3)
    assert coerce_review_date(None) is None

    with pytest.raises(ValidationError):
        coerce_review_date("not a date")


def test_page_transitions():
    assert_page_transition(from_status="draft", to_status="published")
    assert_page_transition(from_status="published", to_status="draft")

    with pytest.raises(ValidationError):
        assert_page_transition(from_status="draft", to_status="archived")
