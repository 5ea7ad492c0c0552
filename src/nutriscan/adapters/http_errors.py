"""Translate httpx failures into provider errors."""

import httpx

from nutriscan.domain.errors import NotFound, ProviderError, ProviderUnavailable

_NOT_FOUND = 404


def provider_error_from_http(provider: str, exc: httpx.HTTPError) -> ProviderError:
    """Map an HTTP failure to NotFound (404) or ProviderUnavailable."""
    status_code = _status_code_from_exception(exc)
    if status_code == str(_NOT_FOUND):
        return NotFound(provider, "record not found (status=404)")
    return ProviderUnavailable(
        provider, f"{type(exc).__name__} (status={status_code})"
    )


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
