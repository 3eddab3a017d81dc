"""
Strapi SDK Configuration

Caller options are plain mappings, deep-merged over ``DEFAULT_OPTIONS`` and
frozen into a ``StrapiConfig`` when a client is constructed.
"""

import copy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

import httpx

from .errors import ConfigurationError


DEFAULT_OPTIONS: Dict[str, Any] = {
    "url": "http://localhost:1337",
    "prefix": "/api",
    "store": {
        "key": "strapi_jwt",
        "use_local_storage": False,
        "cookie_options": {"path": "/"},
        "path": None,
    },
    "http_options": {},
    "debug": False,
}


def merge_options(
    options: Optional[Mapping[str, Any]], defaults: Mapping[str, Any]
) -> Dict[str, Any]:
    """Deep-merge ``options`` over ``defaults``.

    Caller values win. Nested mappings are merged key by key, ``None`` values
    fall back to the default, anything else replaces the default wholesale.
    """
    merged: Dict[str, Any] = copy.deepcopy(dict(defaults))
    for key, value in (options or {}).items():
        if value is None:
            continue
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = merge_options(value, current)
        elif isinstance(value, Mapping):
            merged[key] = merge_options(value, {})
        else:
            merged[key] = value
    return merged


@dataclass(frozen=True)
class StoreConfig:
    """Where the session token is persisted."""

    # Storage key (cookie name or local storage key)
    key: str = "strapi_jwt"
    # Persist in local storage instead of a cookie
    use_local_storage: bool = False
    # Attributes applied when writing the cookie
    cookie_options: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({"path": "/"})
    )
    # File backing the selected store (None: ~/.strapi/storage.json or ~/.strapi/cookies.txt)
    path: Optional[str] = None


@dataclass(frozen=True)
class StrapiConfig:
    """Resolved client configuration."""

    # Strapi server URL (default: http://localhost:1337)
    url: str = "http://localhost:1337"
    # API prefix resolved against url (default: /api)
    prefix: str = "/api"
    store: StoreConfig = field(default_factory=StoreConfig)
    # Keyword arguments forwarded to the httpx client
    http_options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    # Enable debug logging (default: False)
    debug: bool = False

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]] = None) -> "StrapiConfig":
        """Merge ``options`` over the defaults and validate the result."""
        if options is not None and not isinstance(options, Mapping):
            raise ConfigurationError("options must be a mapping")

        merged = merge_options(options, DEFAULT_OPTIONS)
        _validate(merged)

        store = merged["store"]
        return cls(
            url=merged["url"],
            prefix=merged["prefix"],
            store=StoreConfig(
                key=store["key"],
                use_local_storage=bool(store["use_local_storage"]),
                cookie_options=MappingProxyType(dict(store["cookie_options"])),
                path=store.get("path"),
            ),
            http_options=MappingProxyType(dict(merged["http_options"])),
            debug=bool(merged["debug"]),
        )

    @property
    def base_url(self) -> str:
        """API root: ``prefix`` resolved against ``url``."""
        return str(httpx.URL(self.url).join(self.prefix))


def _validate(merged: Dict[str, Any]) -> None:
    url = merged.get("url")
    if not isinstance(url, str) or not url:
        raise ConfigurationError("url is required")
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise ConfigurationError(f"Invalid url: {url!r}", {"reason": str(e)}) from e
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ConfigurationError(
            f"Invalid url: {url!r}. Expected an absolute http(s) URL"
        )

    if not isinstance(merged.get("prefix"), str) or not merged["prefix"]:
        raise ConfigurationError("prefix must be a non-empty string")

    store = merged.get("store")
    if not isinstance(store, Mapping):
        raise ConfigurationError("store must be a mapping")
    if not isinstance(store.get("key"), str) or not store["key"]:
        raise ConfigurationError("store.key must be a non-empty string")
    if not isinstance(store.get("cookie_options"), Mapping):
        raise ConfigurationError("store.cookie_options must be a mapping")

    if not isinstance(merged.get("http_options"), Mapping):
        raise ConfigurationError("http_options must be a mapping")
