from fastapi import APIRouter, Body, Depends, Query, Request, status
from typing import Any, Dict, Optional
import logging

from app.crud import StringStore
from app.exceptions import ConflictError, InvalidTypeError, NotFoundError, ValidationError
from app.filters import apply_filters, parse_filter_params
from app.query_parser import interpret_query
from app.schemas import (
    InterpretedQuery,
    NaturalLanguageResponse,
    StringListResponse,
    StringRecord,
)
from app.utils import analyze_string

router = APIRouter()
logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "String does not exist in the system"


def get_store(request: Request) -> StringStore:
    """Dependency to provide the application's record store."""
    return request.app.state.store


@router.post("/strings", response_model=StringRecord, status_code=status.HTTP_201_CREATED)
def create_string(
    payload: Dict[str, Any] = Body(...),
    store: StringStore = Depends(get_store),
):
    """
    Analyze and store a string.
    Returns 409 if string already exists.
    """
    value = payload.get("value")
    if value is None:
        raise ValidationError('Missing "value" field in request body')
    if not isinstance(value, str):
        raise InvalidTypeError('Invalid data type for "value" (must be string)')
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        # lone surrogates can be written as JSON escapes but are not text
        raise ValidationError('Invalid "value" (must be valid Unicode text)')

    record = analyze_string(value)
    if not store.insert_if_absent(record):
        raise ConflictError("String already exists in the system")

    return record


@router.get("/strings/filter-by-natural-language", response_model=NaturalLanguageResponse)
def filter_by_natural_language(
    query: Optional[str] = Query(None, description="Natural language query"),
    store: StringStore = Depends(get_store),
):
    """
    Filter strings using natural language queries.
    Example: "all single word palindromic strings"
    """
    filters = interpret_query(query)
    result = apply_filters(store.list_all(), filters)

    return NaturalLanguageResponse(
        data=result.data,
        count=result.count,
        interpreted_query=InterpretedQuery(
            original=query,
            parsed_filters=result.filters_applied,
        ),
    )


@router.get("/strings/{string_value}", response_model=StringRecord)
def get_string(string_value: str, store: StringStore = Depends(get_store)):
    """
    Get analysis for a specific string.
    Returns 404 if string doesn't exist.
    """
    record = store.get_by_value(string_value)
    if record is None:
        raise NotFoundError(NOT_FOUND_MESSAGE)
    return record


@router.get("/strings", response_model=StringListResponse)
def get_all_strings(
    is_palindrome: Optional[str] = Query(None),
    min_length: Optional[str] = Query(None),
    max_length: Optional[str] = Query(None),
    word_count: Optional[str] = Query(None),
    contains_character: Optional[str] = Query(None),
    store: StringStore = Depends(get_store),
):
    """
    Get all strings with optional filtering.
    """
    # Reject bad parameters before touching the store
    filters = parse_filter_params(
        is_palindrome=is_palindrome,
        min_length=min_length,
        max_length=max_length,
        word_count=word_count,
        contains_character=contains_character,
    )
    result = apply_filters(store.list_all(), filters)

    return StringListResponse(
        data=result.data,
        count=result.count,
        filters_applied=result.filters_applied,
    )


@router.delete("/strings/{string_value}", status_code=status.HTTP_204_NO_CONTENT)
def delete_string(string_value: str, store: StringStore = Depends(get_store)):
    """
    Delete a string from the system.
    Returns 404 if string doesn't exist.
    """
    if not store.delete_by_value(string_value):
        raise NotFoundError(NOT_FOUND_MESSAGE)
    return None
