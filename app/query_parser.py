"""
Translate free-text queries into FilterSets.

The grammar is a fixed, ordered table of rules. Each rule looks at the
lowercased query on its own and may set keys on the shared FilterSet, so a
single query can set several filters at once. A rule uses its first match and
never revisits the text.

Examples:
- "all single word palindromic strings" -> {word_count: 1, is_palindrome: true}
- "strings longer than 10 characters" -> {min_length: 11}
- "strings containing the letter z" -> {contains_character: "z"}
"""
import logging
import re
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from app.exceptions import ConflictingFiltersError, UnparseableQueryError
from app.schemas import FilterSet

logger = logging.getLogger(__name__)


class ParseRule:
    """One entry of the grammar. Subclasses set filters when their pattern occurs."""

    name = "rule"

    def apply(self, text: str, filters: FilterSet) -> bool:
        """Update filters from text. Returns True if the rule matched."""
        raise NotImplementedError


class KeywordRule(ParseRule):
    """
    Set `key` from the first (phrase, value) pair whose phrase is in the text.
    Later pairs act as else-branches of earlier ones.
    """

    def __init__(self, name: str, key: str, choices: Sequence[Tuple[Sequence[str], object]],
                 only_if_unset: bool = False):
        self.name = name
        self.key = key
        self.choices = choices
        self.only_if_unset = only_if_unset

    def apply(self, text: str, filters: FilterSet) -> bool:
        if self.only_if_unset and getattr(filters, self.key) is not None:
            return False
        for phrases, value in self.choices:
            if any(phrase in text for phrase in phrases):
                setattr(filters, self.key, value)
                return True
        return False


class PatternRule(ParseRule):
    """Set `key` to convert(first capture group) on the first regex match."""

    def __init__(self, name: str, key: str, pattern: str, convert: Callable[[str], object] = str):
        self.name = name
        self.key = key
        self.pattern = re.compile(pattern)
        self.convert = convert

    def apply(self, text: str, filters: FilterSet) -> bool:
        match = self.pattern.search(text)
        if not match:
            return False
        setattr(filters, self.key, self.convert(match.group(1)))
        return True


DEFAULT_RULES: List[ParseRule] = [
    KeywordRule("word_count", "word_count", [
        (["single word"], 1),
        (["two word", "2 word"], 2),
    ]),
    KeywordRule("palindrome", "is_palindrome", [(["palindrom"], True)]),
    # "longer than N" is strict, min_length is inclusive
    PatternRule("longer_than", "min_length", r"longer than ([0-9]+)", lambda n: int(n) + 1),
    PatternRule("shorter_than", "max_length", r"shorter than ([0-9]+)", lambda n: int(n) - 1),
    PatternRule(
        "contains_character",
        "contains_character",
        r"contain(?:s|ing)? (?:the letter |the character )?([a-z])",
    ),
    KeywordRule("first_vowel", "contains_character", [(["first vowel"], "a")], only_if_unset=True),
]


class QueryParser:
    def __init__(self, rules: Optional[Iterable[ParseRule]] = None):
        self.rules = list(DEFAULT_RULES if rules is None else rules)

    def parse(self, query: str) -> FilterSet:
        """Run every rule over the lowercased query. Conflicts are left for the caller."""
        text = query.lower()
        filters = FilterSet()
        for rule in self.rules:
            if rule.apply(text, filters):
                logger.debug(f"Rule '{rule.name}' matched query {query!r}")
        return filters

    def interpret(self, query: Optional[str]) -> FilterSet:
        """
        Parse a query for the search endpoint.

        Raises:
            UnparseableQueryError: the query is blank, a rule failed, or nothing matched
            ConflictingFiltersError: the parsed filters can never all hold
        """
        if query is None or not query.strip():
            raise UnparseableQueryError("Missing query parameter")

        try:
            filters = self.parse(query)
        except Exception as e:
            logger.error(f"Error parsing natural language query {query!r}: {e}")
            raise UnparseableQueryError("Unable to parse natural language query") from e

        if filters.is_empty:
            raise UnparseableQueryError("Unable to parse natural language query")

        conflicts = filters.conflicts()
        if conflicts:
            raise ConflictingFiltersError(
                "Query parsed but resulted in conflicting filters",
                details="; ".join(conflicts),
                filters=filters,
            )

        logger.info(f"Interpreted query {query!r} as {filters.as_dict()}")
        return filters


default_parser = QueryParser()


def parse_natural_language_query(query: str) -> FilterSet:
    """Parse natural language query into filter parameters"""
    return default_parser.parse(query)


def interpret_query(query: Optional[str]) -> FilterSet:
    return default_parser.interpret(query)
