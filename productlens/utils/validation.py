"""
Input validation shared by the search and approval workflows.
"""
from pydantic import HttpUrl, TypeAdapter, ValidationError

INVALID_URL_MESSAGE = "Please enter a valid URL."

_url_adapter = TypeAdapter(HttpUrl)


class InvalidURLError(ValueError):
    """Raised when the caller supplies something that is not an http(s) URL."""

    def __init__(self, message: str = INVALID_URL_MESSAGE):
        super().__init__(message)
        self.message = message


def validate_url(url: str) -> str:
    """
    Validate a user-supplied URL.

    Returns the stripped URL unchanged (no normalization), or raises
    InvalidURLError with a human-readable message.
    """
    candidate = (url or "").strip()
    if not candidate:
        raise InvalidURLError()
    try:
        _url_adapter.validate_python(candidate)
    except ValidationError:
        raise InvalidURLError()
    return candidate
