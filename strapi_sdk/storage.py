"""
Strapi SDK Token Storage Implementations

Key-value backends for the session token. A client writes to exactly one of
them, chosen from ``StoreConfig`` when it is constructed.
"""

import json
import os
import threading
import time
from datetime import datetime
from http.cookiejar import Cookie, CookieJar, MozillaCookieJar
from pathlib import Path
from typing import Any, Dict, Optional, Union

import httpx

from .config import StoreConfig
from .types import TokenStore


SECONDS_PER_DAY = 86400


class MemoryStorage:
    """In-memory storage (non-persistent)."""

    def __init__(self) -> None:
        self._items: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._items.get(key)

    def set(self, key: str, value: str, **options: Any) -> None:
        with self._lock:
            self._items[key] = value

    def remove(self, key: str, **options: Any) -> None:
        with self._lock:
            self._items.pop(key, None)


class LocalStorage:
    """Persistent key-value storage in a JSON file."""

    def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
        """
        Initialize local storage.

        Args:
            path: Path to the storage file. Defaults to ~/.strapi/storage.json
        """
        if path:
            self._file_path = Path(path)
        else:
            self._file_path = Path.home() / ".strapi" / "storage.json"

        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._file_path

    def _read_data(self) -> Dict[str, str]:
        """Read stored items; a missing or corrupt file reads as empty."""
        try:
            if self._file_path.exists():
                with open(self._file_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                    if isinstance(data, dict):
                        return data
        except (json.JSONDecodeError, OSError):
            pass
        return {}

    def _write_data(self, data: Dict[str, str]) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._file_path, "w", encoding="utf-8") as f:
            json.dump(data, f)
        # Owner read/write only
        os.chmod(self._file_path, 0o600)

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._read_data().get(key)
            return value if isinstance(value, str) else None

    def set(self, key: str, value: str, **options: Any) -> None:
        with self._lock:
            data = self._read_data()
            data[key] = value
            self._write_data(data)

    def remove(self, key: str, **options: Any) -> None:
        with self._lock:
            data = self._read_data()
            if key in data:
                del data[key]
                self._write_data(data)


class CookieStorage:
    """Cookie jar storage.

    Cookies are written with the attributes passed to ``set``: ``path``,
    ``domain``, ``expires`` (days from now, or a ``datetime``), ``secure`` and
    ``same_site``. When ``path`` is given the jar is loaded from and saved to
    that file in Mozilla ``cookies.txt`` format; without it the jar lives in
    memory only. An unreadable file loads as an empty jar.
    """

    def __init__(
        self,
        jar: Optional[CookieJar] = None,
        path: Optional[Union[str, Path]] = None,
    ) -> None:
        self._file_path = Path(path) if path else None
        if jar is None and self._file_path is not None:
            jar = MozillaCookieJar(str(self._file_path))
            if self._file_path.exists():
                try:
                    jar.load(ignore_discard=True)
                except OSError:
                    jar = MozillaCookieJar(str(self._file_path))
        self._cookies = httpx.Cookies(jar)
        self._lock = threading.Lock()

    @property
    def path(self) -> Optional[Path]:
        return self._file_path

    @property
    def cookies(self) -> httpx.Cookies:
        return self._cookies

    def _save(self) -> None:
        jar = self._cookies.jar
        if self._file_path is not None and isinstance(jar, MozillaCookieJar):
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            jar.save(ignore_discard=True)
            os.chmod(self._file_path, 0o600)

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            for cookie in self._cookies.jar:
                if cookie.name == key and not cookie.is_expired():
                    return cookie.value
            return None

    def set(self, key: str, value: str, **options: Any) -> None:
        with self._lock:
            self._cookies.jar.set_cookie(_make_cookie(key, value, options))
            self._save()

    def remove(self, key: str, **options: Any) -> None:
        with self._lock:
            jar = self._cookies.jar
            matches = [cookie for cookie in jar if cookie.name == key]
            for cookie in matches:
                jar.clear(cookie.domain, cookie.path, cookie.name)
            if matches:
                self._save()


def _expires_at(expires: Any) -> Optional[int]:
    if expires is None:
        return None
    if isinstance(expires, datetime):
        return int(expires.timestamp())
    return int(time.time() + float(expires) * SECONDS_PER_DAY)


def _make_cookie(name: str, value: str, options: Dict[str, Any]) -> Cookie:
    domain = options.get("domain") or ""
    path = options.get("path") or "/"
    expires = _expires_at(options.get("expires"))
    rest: Dict[str, Any] = {}
    if options.get("same_site"):
        rest["SameSite"] = options["same_site"]

    return Cookie(
        version=0,
        name=name,
        value=value,
        port=None,
        port_specified=False,
        domain=domain,
        domain_specified=bool(domain),
        domain_initial_dot=domain.startswith("."),
        path=path,
        path_specified=True,
        secure=bool(options.get("secure", False)),
        expires=expires,
        discard=expires is None,
        comment=None,
        comment_url=None,
        rest=rest,
        rfc2109=False,
    )


def default_cookie_path() -> Path:
    """Cookie file used when ``StoreConfig.path`` is not set."""
    return Path.home() / ".strapi" / "cookies.txt"


def create_storage(store: StoreConfig) -> TokenStore:
    """Storage backend selected by ``store.use_local_storage``."""
    if store.use_local_storage:
        return LocalStorage(store.path)
    return CookieStorage(path=store.path or default_cookie_path())
