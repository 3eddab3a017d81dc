"""
Query string helpers.

Strapi reads nested query parameters in bracket notation
(``filters[title][$eq]=hello&populate[0]=author``), which ``httpx`` does not
produce from nested mappings on its own.
"""

from datetime import date, datetime
from typing import Any, List, Mapping, Optional, Tuple
from urllib.parse import parse_qs, urlencode, urlsplit


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _flatten_into(pairs: List[Tuple[str, str]], prefix: str, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, Mapping):
        for key, item in value.items():
            _flatten_into(pairs, f"{prefix}[{key}]", item)
    elif isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            _flatten_into(pairs, f"{prefix}[{index}]", item)
    else:
        pairs.append((prefix, _format_value(value)))


def flatten(params: Optional[Mapping[str, Any]]) -> List[Tuple[str, str]]:
    """Flatten nested parameters into ordered ``(key, value)`` pairs.

    >>> flatten({"filters": {"title": {"$eq": "hi"}}, "populate": ["author"]})
    [('filters[title][$eq]', 'hi'), ('populate[0]', 'author')]
    """
    pairs: List[Tuple[str, str]] = []
    for key, value in (params or {}).items():
        _flatten_into(pairs, str(key), value)
    return pairs


def stringify(params: Optional[Mapping[str, Any]]) -> str:
    """URL-encoded query string for ``params``, without the leading ``?``."""
    return urlencode(flatten(params))


def parse_query(location: Optional[str]) -> dict:
    """First value of each query parameter in a URL or ``?a=b`` string."""
    if not location:
        return {}
    query = urlsplit(location).query
    return {key: values[0] for key, values in parse_qs(query).items()}
