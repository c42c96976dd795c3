import hashlib
import re
from collections import Counter
from datetime import datetime, timezone
from typing import Dict

from app.schemas import StringProperties, StringRecord

NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]")


def compute_sha256(text: str) -> str:
    """Compute SHA-256 hash of a string"""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def is_palindrome(text: str) -> bool:
    """Check if string is palindrome (case-insensitive, ASCII letters and digits only)"""
    cleaned = NON_ALPHANUMERIC.sub("", text.lower())
    return cleaned == cleaned[::-1]


def count_unique_characters(text: str) -> int:
    """Count distinct characters in string"""
    return len(set(text))


def count_words(text: str) -> int:
    """Count words separated by whitespace"""
    return len(text.split())


def get_character_frequency(text: str) -> Dict[str, int]:
    """Get frequency map of each character"""
    return dict(Counter(text))


def analyze_string(value: str) -> StringRecord:
    """Analyze a string and return the record with all computed properties"""
    sha256_hash = compute_sha256(value)

    return StringRecord(
        id=sha256_hash,
        value=value,
        properties=StringProperties(
            length=len(value),
            is_palindrome=is_palindrome(value),
            unique_characters=count_unique_characters(value),
            word_count=count_words(value),
            sha256_hash=sha256_hash,
            character_frequency_map=get_character_frequency(value),
        ),
        created_at=datetime.now(timezone.utc),
    )
