"""
Unit tests for the filter engine and query parameter validation.
"""

import itertools

import pytest

from app.exceptions import ValidationError
from app.filters import PREDICATES, apply_filters, matches, parse_filter_params
from app.schemas import FilterSet
from app.utils import analyze_string


@pytest.fixture
def records():
    return [analyze_string(v) for v in ("racecar", "hello world", "level", "Apple pie", "a")]


def values(result):
    return [record.value for record in result.data]


class TestApplyFilters:
    def test_no_filters_returns_everything(self, records):
        result = apply_filters(records, FilterSet())
        assert values(result) == [r.value for r in records]
        assert result.filters_applied == {}

    def test_palindrome_and_max_length_conjunction(self, records):
        result = apply_filters(records[:3], FilterSet(is_palindrome=True, max_length=6))
        assert values(result) == ["level"]

    def test_length_bounds_are_inclusive(self, records):
        result = apply_filters(records, FilterSet(min_length=5, max_length=7))
        assert values(result) == ["racecar", "level"]

    def test_palindrome_false(self, records):
        result = apply_filters(records, FilterSet(is_palindrome=False))
        assert values(result) == ["hello world", "Apple pie"]
        assert result.filters_applied == {"is_palindrome": False}

    def test_word_count_exact(self, records):
        assert values(apply_filters(records, FilterSet(word_count=2))) == ["hello world", "Apple pie"]

    def test_contains_character_is_case_sensitive(self, records):
        assert values(apply_filters(records, FilterSet(contains_character="A"))) == ["Apple pie"]
        assert values(apply_filters(records, FilterSet(contains_character="p"))) == ["Apple pie"]

    def test_contains_character_matches_whitespace(self, records):
        assert values(apply_filters(records, FilterSet(contains_character=" "))) == [
            "hello world", "Apple pie",
        ]

    def test_filters_applied_echoes_typed_values(self, records):
        filters = FilterSet(min_length=2, word_count=1, contains_character="e")
        result = apply_filters(records, filters)
        assert result.filters_applied == {"min_length": 2, "word_count": 1, "contains_character": "e"}
        assert result.count == len(result.data) == 2

    def test_order_of_predicates_does_not_matter(self, records):
        filters = {"is_palindrome": True, "min_length": 2, "contains_character": "e"}
        expected = {r.value for r in records if matches(r, FilterSet(**filters))}
        for order in itertools.permutations(filters):
            survivors = records
            for key in order:
                survivors = [r for r in survivors if PREDICATES[key](r, filters[key])]
            assert {r.value for r in survivors} == expected

    def test_empty_input(self):
        assert apply_filters([], FilterSet(min_length=1)).data == []


class TestParseFilterParams:
    def test_all_parameters(self):
        filters = parse_filter_params(
            is_palindrome="true",
            min_length="3",
            max_length="10",
            word_count="1",
            contains_character="z",
        )
        assert filters.as_dict() == {
            "is_palindrome": True,
            "min_length": 3,
            "max_length": 10,
            "word_count": 1,
            "contains_character": "z",
        }

    def test_nothing_given(self):
        assert parse_filter_params().is_empty

    def test_false_is_kept(self):
        assert parse_filter_params(is_palindrome="false").as_dict() == {"is_palindrome": False}

    @pytest.mark.parametrize("raw", ["maybe", "True", "1", ""])
    def test_bad_boolean(self, raw):
        with pytest.raises(ValidationError, match="is_palindrome"):
            parse_filter_params(is_palindrome=raw)

    @pytest.mark.parametrize("name", ["min_length", "max_length", "word_count"])
    @pytest.mark.parametrize("raw", ["abc", "1.5", "", "5_0", "3x"])
    def test_bad_integer(self, name, raw):
        with pytest.raises(ValidationError, match=name):
            parse_filter_params(**{name: raw})

    def test_signed_integer(self):
        assert parse_filter_params(min_length="-1").min_length == -1

    def test_integer_too_long_to_convert(self):
        with pytest.raises(ValidationError, match="min_length"):
            parse_filter_params(min_length="9" * 5000)

    @pytest.mark.parametrize("raw", ["", "ab"])
    def test_bad_character(self, raw):
        with pytest.raises(ValidationError, match="contains_character"):
            parse_filter_params(contains_character=raw)

    def test_validation_error_is_400(self):
        with pytest.raises(ValidationError) as excinfo:
            parse_filter_params(word_count="many")
        assert excinfo.value.status_code == 400
