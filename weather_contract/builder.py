"""Request Builder: assemble a RequestSpec from base URL, path and query params."""

from __future__ import annotations

from collections.abc import Mapping

from .errors import InvalidRequestSpec
from .models import QueryValue, RequestSpec


def build(
    base_url: str,
    path: str,
    params: Mapping[str, QueryValue] | None = None,
) -> RequestSpec:
    """
    Build an immutable GET request spec.

    Only types are checked: values must be str, int or float. Booleans
    are rejected since their query-string rendering is ambiguous.

    Raises:
        InvalidRequestSpec: If base_url or path is empty, or a value has
            an unsupported type.
    """
    if not base_url or not base_url.strip():
        raise InvalidRequestSpec("base_url cannot be empty")
    if not path or not path.strip():
        raise InvalidRequestSpec("path cannot be empty")

    query_params: dict[str, QueryValue] = {}
    for name, value in (params or {}).items():
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            raise InvalidRequestSpec(
                f"Query parameter '{name}' must be a string or number, "
                f"got {type(value).__name__}"
            )
        query_params[name] = value

    return RequestSpec(
        base_url=base_url.strip(),
        path=path.strip(),
        query_params=query_params,
    )
