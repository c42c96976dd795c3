from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Optional, List, Any
from datetime import datetime


class StringProperties(BaseModel):
    model_config = ConfigDict(frozen=True)

    length: int = Field(..., ge=0)
    is_palindrome: bool
    unique_characters: int = Field(..., ge=0)
    word_count: int = Field(..., ge=0)
    sha256_hash: str
    character_frequency_map: Dict[str, int]


class StringRecord(BaseModel):
    """An analyzed string. Never mutated after creation."""
    model_config = ConfigDict(frozen=True)

    id: str
    value: str
    properties: StringProperties
    created_at: datetime


class FilterSet(BaseModel):
    """
    Typed filters over stored records. Unset keys impose no constraint,
    set keys are ANDed together.
    """
    is_palindrome: Optional[bool] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    word_count: Optional[int] = None
    contains_character: Optional[str] = Field(None, min_length=1, max_length=1)

    def as_dict(self) -> Dict[str, Any]:
        """Only the keys that are set, in declaration order"""
        return self.model_dump(exclude_none=True)

    @property
    def is_empty(self) -> bool:
        return not self.as_dict()

    def conflicts(self) -> List[str]:
        """Descriptions of filters that can never be satisfied together"""
        problems = []
        if (
            self.min_length is not None
            and self.max_length is not None
            and self.min_length > self.max_length
        ):
            problems.append("min_length cannot be greater than max_length")
        return problems

    @property
    def is_conflicting(self) -> bool:
        return bool(self.conflicts())


class StringListResponse(BaseModel):
    data: List[StringRecord]
    count: int
    filters_applied: Dict[str, Any]


class InterpretedQuery(BaseModel):
    original: str
    parsed_filters: Dict[str, Any]


class NaturalLanguageResponse(BaseModel):
    data: List[StringRecord]
    count: int
    interpreted_query: InterpretedQuery
