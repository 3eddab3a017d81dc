"""
Tests for Strapi SDK token storage backends.
"""

import json
import os
import time
from datetime import datetime, timedelta, timezone

import pytest

from strapi_sdk import StoreConfig
from strapi_sdk.storage import CookieStorage, LocalStorage, MemoryStorage, create_storage
from strapi_sdk.types import TokenStore


class TestMemoryStorage:

    def test_get_set_remove(self):
        storage = MemoryStorage()
        assert storage.get("strapi_jwt") is None

        storage.set("strapi_jwt", "token")
        assert storage.get("strapi_jwt") == "token"

        storage.remove("strapi_jwt")
        assert storage.get("strapi_jwt") is None
        storage.remove("strapi_jwt")

    def test_satisfies_protocol(self):
        assert isinstance(MemoryStorage(), TokenStore)
        assert isinstance(LocalStorage(), TokenStore)
        assert isinstance(CookieStorage(), TokenStore)


class TestLocalStorage:

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "nested" / "storage.json"

        LocalStorage(path).set("strapi_jwt", "token")

        assert LocalStorage(path).get("strapi_jwt") == "token"
        assert json.loads(path.read_text()) == {"strapi_jwt": "token"}

    def test_file_permissions(self, tmp_path):
        path = tmp_path / "storage.json"
        LocalStorage(path).set("strapi_jwt", "token")
        assert os.stat(path).st_mode & 0o777 == 0o600

    def test_keeps_other_keys(self, tmp_path):
        path = tmp_path / "storage.json"
        storage = LocalStorage(path)
        storage.set("theme", "dark")
        storage.set("strapi_jwt", "token")

        storage.remove("strapi_jwt")

        assert storage.get("strapi_jwt") is None
        assert storage.get("theme") == "dark"

    def test_missing_file_reads_empty(self, tmp_path):
        storage = LocalStorage(tmp_path / "absent.json")
        assert storage.get("strapi_jwt") is None
        storage.remove("strapi_jwt")
        assert not (tmp_path / "absent.json").exists()

    def test_corrupt_file_reads_empty(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("{not json")
        storage = LocalStorage(path)

        assert storage.get("strapi_jwt") is None
        storage.set("strapi_jwt", "token")
        assert storage.get("strapi_jwt") == "token"

    def test_default_path(self):
        assert LocalStorage().path.name == "storage.json"
        assert LocalStorage().path.parent.name == ".strapi"


class TestCookieStorage:

    def test_get_set_remove(self):
        storage = CookieStorage()
        storage.set("strapi_jwt", "token", path="/")
        assert storage.get("strapi_jwt") == "token"

        storage.remove("strapi_jwt")
        assert storage.get("strapi_jwt") is None

    def test_cookie_attributes(self):
        storage = CookieStorage()
        storage.set(
            "strapi_jwt",
            "token",
            path="/app",
            domain=".example.com",
            secure=True,
            expires=7,
            same_site="Lax",
        )

        cookie = next(iter(storage.cookies.jar))
        assert cookie.path == "/app"
        assert cookie.domain == ".example.com"
        assert cookie.secure is True
        assert cookie.get_nonstandard_attr("SameSite") == "Lax"
        assert cookie.expires == pytest.approx(time.time() + 7 * 86400, abs=5)
        assert cookie.discard is False

    def test_expires_datetime(self):
        storage = CookieStorage()
        expires = datetime.now(timezone.utc) + timedelta(hours=1)
        storage.set("strapi_jwt", "token", expires=expires)

        cookie = next(iter(storage.cookies.jar))
        assert cookie.expires == int(expires.timestamp())

    def test_expired_cookie_is_ignored(self):
        storage = CookieStorage()
        storage.set("strapi_jwt", "token", expires=datetime.now(timezone.utc) - timedelta(days=1))
        assert storage.get("strapi_jwt") is None

    def test_session_cookie_without_expires(self):
        storage = CookieStorage()
        storage.set("strapi_jwt", "token")
        cookie = next(iter(storage.cookies.jar))
        assert cookie.expires is None
        assert cookie.discard is True
        assert cookie.path == "/"

    def test_set_replaces_value(self):
        storage = CookieStorage()
        storage.set("strapi_jwt", "first", path="/")
        storage.set("strapi_jwt", "second", path="/")
        assert storage.get("strapi_jwt") == "second"
        assert len(storage.cookies.jar) == 1

    def test_persists_to_file(self, tmp_path):
        path = tmp_path / "cookies.txt"
        CookieStorage(path=path).set("strapi_jwt", "token", path="/", domain="localhost")

        assert CookieStorage(path=path).get("strapi_jwt") == "token"

        CookieStorage(path=path).remove("strapi_jwt")
        assert CookieStorage(path=path).get("strapi_jwt") is None

    def test_corrupt_file_loads_empty(self, tmp_path):
        path = tmp_path / "cookies.txt"
        path.write_text("not a cookie file\n")

        storage = CookieStorage(path=path)

        assert storage.get("strapi_jwt") is None
        storage.set("strapi_jwt", "token")
        assert CookieStorage(path=path).get("strapi_jwt") == "token"

    def test_in_memory_without_path(self, tmp_path):
        storage = CookieStorage()
        storage.set("strapi_jwt", "token")
        assert storage.path is None
        assert list(tmp_path.iterdir()) == []


class TestCreateStorage:

    def test_cookie_by_default(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))

        storage = create_storage(StoreConfig())

        assert isinstance(storage, CookieStorage)
        assert storage.path == tmp_path / ".strapi" / "cookies.txt"

    def test_default_cookie_file_is_durable(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))

        create_storage(StoreConfig()).set("strapi_jwt", "token", path="/")

        assert (tmp_path / ".strapi" / "cookies.txt").exists()
        assert create_storage(StoreConfig()).get("strapi_jwt") == "token"

    def test_cookie_path_from_config(self, tmp_path):
        storage = create_storage(StoreConfig(path=str(tmp_path / "jar.txt")))
        assert storage.path == tmp_path / "jar.txt"

    def test_local_storage(self, tmp_path):
        storage = create_storage(
            StoreConfig(use_local_storage=True, path=str(tmp_path / "storage.json"))
        )
        assert isinstance(storage, LocalStorage)
        assert storage.path == tmp_path / "storage.json"
