"""Schema helpers for view helpers configuration."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Iterator, Tuple

from jsonschema import Draft202012Validator

from pagecraft.resources import load_schema

_SCHEMA_RESOURCE = "helpers.schema.json"


@lru_cache(maxsize=1)
def _validator() -> Draft202012Validator:
    return Draft202012Validator(load_schema(_SCHEMA_RESOURCE))


def iter_schema_errors(payload: Any) -> Iterator[Tuple[str, str]]:
    """Yield (path, message) pairs for schema issues, ordered by location."""
    errors = sorted(_validator().iter_errors(payload), key=lambda err: [str(item) for item in err.absolute_path])
    for error in errors:
        path = "/".join(str(item) for item in error.absolute_path) or "<root>"
        yield path, error.message


__all__ = ["iter_schema_errors"]
