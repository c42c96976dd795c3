from typing import Any, Optional


class StringAnalyzerError(Exception):
    """Base error for the service. Handlers turn it into a JSON error body."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(StringAnalyzerError):
    """Missing or malformed input"""
    status_code = 400


class InvalidTypeError(ValidationError):
    """Input is present but has the wrong type"""
    status_code = 422


class ConflictError(StringAnalyzerError):
    """A record with the same id already exists"""
    status_code = 409


class NotFoundError(StringAnalyzerError):
    status_code = 404


class UnparseableQueryError(StringAnalyzerError):
    """Free-text query gave no usable filters"""
    status_code = 400


class ConflictingFiltersError(StringAnalyzerError):
    """Parsed filters contradict each other (e.g. min_length > max_length)"""
    status_code = 422

    def __init__(self, message: str, details: Optional[Any] = None, filters=None):
        super().__init__(message, details)
        self.filters = filters
