from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager


class ProviderError(RuntimeError):
    """Base exception for provider-related failures."""


class ProviderRequestError(ProviderError):
    """HTTP/network/transport layer failures (timeouts, connection errors, non-2xx, bad JSON)."""


class ProviderResponseError(ProviderError):
    """Provider returned a well-formed response with an unexpected shape."""


class ProviderCapabilityError(ProviderError):
    """Adapter does not support a requested operation."""


@contextmanager
def response_shape(source: str) -> Iterator[None]:
    """
    Mapping block over an upstream body.

    Type drift in the body (a string where an object was expected, a number
    where a list was) surfaces as ProviderResponseError so adapters handle it
    like any other provider failure.
    """
    try:
        yield
    except (TypeError, AttributeError, KeyError, IndexError) as e:
        raise ProviderResponseError(f"Unexpected {source} payload shape: {e}") from e
