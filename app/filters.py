import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional

from app.exceptions import ValidationError
from app.schemas import FilterSet, StringRecord

Predicate = Callable[[StringRecord, Any], bool]

# One predicate per filter key. Keys are independent, so order does not matter.
PREDICATES: Dict[str, Predicate] = {
    "is_palindrome": lambda record, wanted: record.properties.is_palindrome == wanted,
    "min_length": lambda record, bound: record.properties.length >= bound,
    "max_length": lambda record, bound: record.properties.length <= bound,
    "word_count": lambda record, count: record.properties.word_count == count,
    "contains_character": lambda record, char: char in record.value,
}


@dataclass
class FilterResult:
    data: List[StringRecord] = field(default_factory=list)
    filters_applied: Dict[str, Any] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.data)


def matches(record: StringRecord, filters: FilterSet) -> bool:
    """True if the record satisfies every filter that is set"""
    return all(PREDICATES[key](record, wanted) for key, wanted in filters.as_dict().items())


def apply_filters(records: Iterable[StringRecord], filters: FilterSet) -> FilterResult:
    """Narrow records down to those matching all filters, keeping their order"""
    return FilterResult(
        data=[record for record in records if matches(record, filters)],
        filters_applied=filters.as_dict(),
    )


# ------------------------------------------------------------------------------
# QUERY PARAMETER VALIDATION
# ------------------------------------------------------------------------------
INTEGER = re.compile(r"\s*[-+]?[0-9]+\s*")


def _parse_bool(name: str, raw: str) -> bool:
    if raw == "true":
        return True
    if raw == "false":
        return False
    raise ValidationError(f"Invalid value for {name} (must be true or false)")


def _parse_int(name: str, raw: str) -> int:
    if not INTEGER.fullmatch(raw):
        raise ValidationError(f"Invalid value for {name} (must be integer)")
    try:
        return int(raw)
    except ValueError:
        # more digits than int() will convert
        raise ValidationError(f"Invalid value for {name} (integer too large)")


def _parse_char(name: str, raw: str) -> str:
    if len(raw) != 1:
        raise ValidationError(f"Invalid value for {name} (must be single character)")
    return raw


def parse_filter_params(
    is_palindrome: Optional[str] = None,
    min_length: Optional[str] = None,
    max_length: Optional[str] = None,
    word_count: Optional[str] = None,
    contains_character: Optional[str] = None,
) -> FilterSet:
    """
    Turn raw query string values into a typed FilterSet.

    Raises ValidationError for the first parameter that does not have the
    expected form. Parameters left as None are not constrained.
    """
    filters = FilterSet()

    if is_palindrome is not None:
        filters.is_palindrome = _parse_bool("is_palindrome", is_palindrome)
    if min_length is not None:
        filters.min_length = _parse_int("min_length", min_length)
    if max_length is not None:
        filters.max_length = _parse_int("max_length", max_length)
    if word_count is not None:
        filters.word_count = _parse_int("word_count", word_count)
    if contains_character is not None:
        filters.contains_character = _parse_char("contains_character", contains_character)

    return filters
