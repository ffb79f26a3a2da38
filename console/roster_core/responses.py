"""
Response-shape normalization.

The API is inconsistent about list responses: some endpoints return a bare
array, some wrap it in an object ({"courses": [...]}, {"students": [...]}).
The functions here only classify the shape; callers branch on `.ok` and
decide how to degrade.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Ok:
    items: list

    ok = True


@dataclass(frozen=True)
class Unrecognized:
    raw: object
    items: list = field(default_factory=list)

    ok = False


def normalize_list(data, key):
    """Ok(items) for a bare list or {key: [...]}; Unrecognized otherwise."""
    if isinstance(data, list):
        return Ok(data)
    if isinstance(data, dict) and isinstance(data.get(key), list):
        return Ok(data[key])
    return Unrecognized(data)


def normalize_page(data):
    """Ok([envelope]) for a page envelope ({content: [...], ...}); Unrecognized otherwise."""
    if isinstance(data, dict) and isinstance(data.get("content"), list):
        return Ok([data])
    return Unrecognized(data)
