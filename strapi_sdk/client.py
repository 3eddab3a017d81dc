"""
Strapi SDK Client

Main client classes for the Strapi REST API: authentication through the
users-permissions endpoints and CRUD over content types.
Provides both synchronous and asynchronous clients sharing one session model:
a bearer token attached to every request and persisted in the configured
storage backend.
"""

import asyncio
import logging
import threading
from typing import Any, Dict, Mapping, Optional

import httpx

from .config import StrapiConfig
from .context import InteractiveContext
from .errors import NetworkError, StrapiError
from .query import flatten, parse_query
from .storage import create_storage
from .types import (
    AuthenticationData,
    AuthenticationResponse,
    EmailConfirmationData,
    EntryId,
    ExecutionContext,
    ForgotPasswordData,
    HttpMethod,
    RegistrationData,
    ResetPasswordData,
    StrapiResponse,
    StrapiUser,
    TokenStore,
)


logger = logging.getLogger("strapi_sdk")

AUTHORIZATION_HEADER = "Authorization"


def _decode_body(response: httpx.Response) -> Any:
    """Decoded JSON body; text when it is not JSON, None when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class _StrapiClientBase:
    """Configuration, session state and token synchronization."""

    def __init__(
        self,
        options: Optional[Mapping[str, Any]] = None,
        storage: Optional[TokenStore] = None,
        context: Optional[ExecutionContext] = None,
    ) -> None:
        self.config = StrapiConfig.from_options(options)
        self._debug = self.config.debug
        self._storage = storage if storage is not None else create_storage(self.config.store)
        self._context = context if context is not None else InteractiveContext()

        # Session
        self._user: Optional[StrapiUser] = None
        self._token: Optional[str] = None

    def _http_client_options(self) -> Dict[str, Any]:
        # Caller transport options win, base_url included
        return {"base_url": self.config.base_url, **self.config.http_options}

    def _log(self, message: str, *args: Any) -> None:
        """Log debug message."""
        if self._debug:
            logger.debug(f"[Strapi] {message}", *args)

    @property
    def http(self) -> Any:
        """The underlying httpx client."""
        return self._http

    @property
    def storage(self) -> TokenStore:
        return self._storage

    @property
    def context(self) -> ExecutionContext:
        return self._context

    @property
    def user(self) -> Optional[StrapiUser]:
        return self._user

    @user.setter
    def user(self, user: Optional[StrapiUser]) -> None:
        self._user = user

    @property
    def token(self) -> Optional[str]:
        """Current session token, if any."""
        return self._token

    def set_user(self, user: Optional[StrapiUser]) -> None:
        """Define local data of the logged-in user."""
        self._user = user

    # =========================================================================
    # Token Synchronization
    # =========================================================================

    def _storage_available(self) -> bool:
        return self._context.is_interactive()

    def sync_token(self) -> None:
        """Attach the token found in storage, if any. Runs once at construction."""
        if not self._storage_available():
            return
        token = self._storage.get(self.config.store.key)
        if token:
            self._token = token
            self._http.headers[AUTHORIZATION_HEADER] = f"Bearer {token}"
            self._log("Restored session token from storage")

    def set_token(self, token: str) -> None:
        """Attach ``token`` to future requests and persist it."""
        store = self.config.store
        self._token = token
        self._http.headers[AUTHORIZATION_HEADER] = f"Bearer {token}"
        if self._storage_available():
            if store.use_local_storage:
                self._storage.set(store.key, token)
            else:
                self._storage.set(store.key, token, **store.cookie_options)

    def remove_token(self) -> None:
        """Detach the token from future requests and drop it from storage."""
        self._token = None
        self._http.headers.pop(AUTHORIZATION_HEADER, None)
        if self._storage_available():
            self._storage.remove(self.config.store.key)

    def logout(self) -> None:
        """Logout by clearing the user and the session token."""
        self._log("Logout")
        self.set_user(None)
        self.remove_token()

    # =========================================================================
    # Request Helpers
    # =========================================================================

    def get_provider_authentication_url(self, provider: str) -> str:
        """URL that starts the ``provider`` authentication flow."""
        return str(httpx.URL(self.config.url).join(f"/connect/{provider}"))

    def _resolve_access_token(self, access_token: Optional[str]) -> Optional[str]:
        # A token on the current location takes precedence
        if self._context.is_interactive():
            location_token = parse_query(self._context.location()).get("access_token")
            if location_token:
                return location_token
        return access_token

    def _request_kwargs(self, http_kwargs: Dict[str, Any]) -> Dict[str, Any]:
        kwargs = dict(http_kwargs)
        params = kwargs.pop("params", None)
        if isinstance(params, Mapping):
            pairs = flatten(params)
            if pairs:
                kwargs["params"] = pairs
        elif params is not None:
            kwargs["params"] = params
        return kwargs

    def _handle_response(self, response: httpx.Response) -> Any:
        """Decoded body on success; the server's error body raised otherwise."""
        body = _decode_body(response)
        if response.is_success:
            return body
        raise StrapiError(body, response.status_code)

    def _session_established(self, body: Any) -> AuthenticationResponse:
        result = AuthenticationResponse.from_dict(body)
        # No jwt: the token removed before the request stays removed
        if result.jwt:
            self.set_token(result.jwt)
        self.set_user(result.user)
        return result


class StrapiClient(_StrapiClientBase):
    """
    Strapi Client - Synchronous SDK entry point.

    Example:
        with StrapiClient({"url": "https://cms.example.com"}) as strapi:
            strapi.login(AuthenticationData("jane@example.com", "secret"))
            articles = strapi.find("articles", {"populate": "*"})
    """

    def __init__(
        self,
        options: Optional[Mapping[str, Any]] = None,
        *,
        storage: Optional[TokenStore] = None,
        context: Optional[ExecutionContext] = None,
    ) -> None:
        """Initialize the Strapi client."""
        super().__init__(options, storage, context)
        self._auth_lock = threading.Lock()
        self._http = httpx.Client(**self._http_client_options())
        self.sync_token()
        self._log("StrapiClient initialized (base_url=%s)", self.config.base_url)

    def request(self, method: HttpMethod, path: str, **http_kwargs: Any) -> Any:
        """
        Send a request to the Strapi API.

        Args:
            method: HTTP method
            path: Path relative to the API root, e.g. ``/articles``
            **http_kwargs: httpx request options; nested ``params`` are
                serialized in bracket notation

        Returns:
            The decoded response body

        Raises:
            NetworkError: If no response was received
            StrapiError: If the server answered with an error status
        """
        kwargs = self._request_kwargs(http_kwargs)
        try:
            response = self._http.request(method.upper(), path, **kwargs)
        except httpx.RequestError as e:
            raise NetworkError(str(e), e) from e
        return self._handle_response(response)

    # =========================================================================
    # Authentication Methods
    # =========================================================================

    def _authenticate(self, method: HttpMethod, path: str, **http_kwargs: Any) -> AuthenticationResponse:
        with self._auth_lock:
            self.remove_token()
            body = self.request(method, path, **http_kwargs)
            return self._session_established(body)

    def login(self, data: AuthenticationData) -> AuthenticationResponse:
        """
        Authenticate with identifier (email or username) and password.

        Returns:
            AuthenticationResponse with the user and the session token
        """
        self._log("Login attempt for: %s", data.identifier)
        return self._authenticate("POST", "/auth/local", json=data.to_dict())

    def register(self, data: RegistrationData) -> AuthenticationResponse:
        """Register a new user; a session opens when the server returns a jwt."""
        self._log("Register attempt for: %s", data.email)
        return self._authenticate("POST", "/auth/local/register", json=data.to_dict())

    def forgot_password(self, data: ForgotPasswordData) -> None:
        """Send the reset password email."""
        self.remove_token()
        self.request("POST", "/auth/forgot-password", json=data.to_dict())

    def reset_password(self, data: ResetPasswordData) -> AuthenticationResponse:
        """Reset the password with the emailed code and open a session."""
        return self._authenticate("POST", "/auth/reset-password", json=data.to_dict())

    def send_email_confirmation(self, data: EmailConfirmationData) -> None:
        """Send the account confirmation email again."""
        self.request("POST", "/auth/send-email-confirmation", json=data.to_dict())

    def authenticate_provider(
        self, provider: str, access_token: Optional[str] = None
    ) -> AuthenticationResponse:
        """
        Complete a provider login with the access token sent back by Strapi.

        The ``access_token`` query parameter of the context location, when
        present, is used instead of the argument.
        """
        self._log("Provider authentication: %s", provider)
        access_token = self._resolve_access_token(access_token)
        return self._authenticate(
            "GET",
            f"/auth/{provider}/callback",
            params={"access_token": access_token},
        )

    # =========================================================================
    # User Methods
    # =========================================================================

    def fetch_user(self) -> Optional[StrapiUser]:
        """Refresh the logged-in user; logs out and returns None on failure."""
        try:
            user = self.request("GET", "/users/me")
        except StrapiError as e:
            self._log("Fetching user failed (%s), session cleared", e.name)
            self.logout()
            return None
        self.set_user(user)
        return self._user

    # =========================================================================
    # Content Methods
    # =========================================================================

    def find(
        self, content_type: str, params: Optional[Mapping[str, Any]] = None
    ) -> StrapiResponse[Any]:
        """List ``content_type`` entries (filters, sort, pagination, populate)."""
        return StrapiResponse.from_dict(
            self.request("GET", f"/{content_type}", params=params)
        )

    def find_one(
        self,
        content_type: str,
        id: EntryId,
        params: Optional[Mapping[str, Any]] = None,
    ) -> StrapiResponse[Any]:
        return StrapiResponse.from_dict(
            self.request("GET", f"/{content_type}/{id}", params=params)
        )

    def create(
        self,
        content_type: str,
        data: Any,
        params: Optional[Mapping[str, Any]] = None,
    ) -> StrapiResponse[Any]:
        return StrapiResponse.from_dict(
            self.request("POST", f"/{content_type}", json={"data": data}, params=params)
        )

    def update(
        self,
        content_type: str,
        id: EntryId,
        data: Any,
        params: Optional[Mapping[str, Any]] = None,
    ) -> StrapiResponse[Any]:
        return StrapiResponse.from_dict(
            self.request("PUT", f"/{content_type}/{id}", json={"data": data}, params=params)
        )

    def delete(
        self,
        content_type: str,
        id: EntryId,
        params: Optional[Mapping[str, Any]] = None,
    ) -> StrapiResponse[Any]:
        return StrapiResponse.from_dict(
            self.request("DELETE", f"/{content_type}/{id}", params=params)
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._http.close()

    def __enter__(self) -> "StrapiClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


# =============================================================================
# Async Client
# =============================================================================

class StrapiAsyncClient(_StrapiClientBase):
    """
    Strapi Async Client - Asynchronous SDK entry point.

    Same operations as ``StrapiClient``; network operations are coroutines.
    ``logout``, ``get_provider_authentication_url`` and the token methods stay
    synchronous.
    """

    def __init__(
        self,
        options: Optional[Mapping[str, Any]] = None,
        *,
        storage: Optional[TokenStore] = None,
        context: Optional[ExecutionContext] = None,
    ) -> None:
        """Initialize the async Strapi client."""
        super().__init__(options, storage, context)
        self._auth_lock = asyncio.Lock()
        self._http = httpx.AsyncClient(**self._http_client_options())
        self.sync_token()
        self._log("StrapiAsyncClient initialized (base_url=%s)", self.config.base_url)

    async def request(self, method: HttpMethod, path: str, **http_kwargs: Any) -> Any:
        """Send a request to the Strapi API and return the decoded body."""
        kwargs = self._request_kwargs(http_kwargs)
        try:
            response = await self._http.request(method.upper(), path, **kwargs)
        except httpx.RequestError as e:
            raise NetworkError(str(e), e) from e
        return self._handle_response(response)

    # =========================================================================
    # Authentication Methods
    # =========================================================================

    async def _authenticate(
        self, method: HttpMethod, path: str, **http_kwargs: Any
    ) -> AuthenticationResponse:
        async with self._auth_lock:
            self.remove_token()
            body = await self.request(method, path, **http_kwargs)
            return self._session_established(body)

    async def login(self, data: AuthenticationData) -> AuthenticationResponse:
        """Authenticate with identifier (email or username) and password."""
        self._log("Login attempt for: %s", data.identifier)
        return await self._authenticate("POST", "/auth/local", json=data.to_dict())

    async def register(self, data: RegistrationData) -> AuthenticationResponse:
        """Register a new user; a session opens when the server returns a jwt."""
        self._log("Register attempt for: %s", data.email)
        return await self._authenticate(
            "POST", "/auth/local/register", json=data.to_dict()
        )

    async def forgot_password(self, data: ForgotPasswordData) -> None:
        """Send the reset password email."""
        self.remove_token()
        await self.request("POST", "/auth/forgot-password", json=data.to_dict())

    async def reset_password(self, data: ResetPasswordData) -> AuthenticationResponse:
        """Reset the password with the emailed code and open a session."""
        return await self._authenticate(
            "POST", "/auth/reset-password", json=data.to_dict()
        )

    async def send_email_confirmation(self, data: EmailConfirmationData) -> None:
        """Send the account confirmation email again."""
        await self.request(
            "POST", "/auth/send-email-confirmation", json=data.to_dict()
        )

    async def authenticate_provider(
        self, provider: str, access_token: Optional[str] = None
    ) -> AuthenticationResponse:
        """Complete a provider login with the access token sent back by Strapi."""
        self._log("Provider authentication: %s", provider)
        access_token = self._resolve_access_token(access_token)
        return await self._authenticate(
            "GET",
            f"/auth/{provider}/callback",
            params={"access_token": access_token},
        )

    # =========================================================================
    # User Methods
    # =========================================================================

    async def fetch_user(self) -> Optional[StrapiUser]:
        """Refresh the logged-in user; logs out and returns None on failure."""
        try:
            user = await self.request("GET", "/users/me")
        except StrapiError as e:
            self._log("Fetching user failed (%s), session cleared", e.name)
            self.logout()
            return None
        self.set_user(user)
        return self._user

    # =========================================================================
    # Content Methods
    # =========================================================================

    async def find(
        self, content_type: str, params: Optional[Mapping[str, Any]] = None
    ) -> StrapiResponse[Any]:
        """List ``content_type`` entries (filters, sort, pagination, populate)."""
        body = await self.request("GET", f"/{content_type}", params=params)
        return StrapiResponse.from_dict(body)

    async def find_one(
        self,
        content_type: str,
        id: EntryId,
        params: Optional[Mapping[str, Any]] = None,
    ) -> StrapiResponse[Any]:
        body = await self.request("GET", f"/{content_type}/{id}", params=params)
        return StrapiResponse.from_dict(body)

    async def create(
        self,
        content_type: str,
        data: Any,
        params: Optional[Mapping[str, Any]] = None,
    ) -> StrapiResponse[Any]:
        body = await self.request(
            "POST", f"/{content_type}", json={"data": data}, params=params
        )
        return StrapiResponse.from_dict(body)

    async def update(
        self,
        content_type: str,
        id: EntryId,
        data: Any,
        params: Optional[Mapping[str, Any]] = None,
    ) -> StrapiResponse[Any]:
        body = await self.request(
            "PUT", f"/{content_type}/{id}", json={"data": data}, params=params
        )
        return StrapiResponse.from_dict(body)

    async def delete(
        self,
        content_type: str,
        id: EntryId,
        params: Optional[Mapping[str, Any]] = None,
    ) -> StrapiResponse[Any]:
        body = await self.request("DELETE", f"/{content_type}/{id}", params=params)
        return StrapiResponse.from_dict(body)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._http.aclose()

    async def __aenter__(self) -> "StrapiAsyncClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()


# =============================================================================
# Factory Functions
# =============================================================================

def create_strapi_client(
    options: Optional[Mapping[str, Any]] = None, **kwargs: Any
) -> StrapiClient:
    """Create a new synchronous Strapi client."""
    return StrapiClient(options, **kwargs)


def create_async_strapi_client(
    options: Optional[Mapping[str, Any]] = None, **kwargs: Any
) -> StrapiAsyncClient:
    """Create a new asynchronous Strapi client."""
    return StrapiAsyncClient(options, **kwargs)
