"""
Strapi Python SDK

A Python SDK for the Strapi headless CMS REST API with sync and async
clients, session token persistence (cookie jar or local storage) and
typed helpers for content CRUD.
"""

from .client import (
    StrapiClient,
    StrapiAsyncClient,
    create_strapi_client,
    create_async_strapi_client,
)
from .config import DEFAULT_OPTIONS, StrapiConfig, StoreConfig, merge_options
from .context import HeadlessContext, InteractiveContext
from .types import (
    TokenStore,
    ExecutionContext,
    StrapiUser,
    StrapiAuthProvider,
    AuthenticationData,
    RegistrationData,
    ForgotPasswordData,
    ResetPasswordData,
    EmailConfirmationData,
    AuthenticationResponse,
    StrapiResponse,
)
from .errors import (
    StrapiError,
    NetworkError,
    ConfigurationError,
    is_strapi_error,
)
from .storage import CookieStorage, LocalStorage, MemoryStorage, create_storage

__version__ = "0.1.0"
__all__ = [
    # Clients
    "StrapiClient",
    "StrapiAsyncClient",
    "create_strapi_client",
    "create_async_strapi_client",
    # Configuration
    "DEFAULT_OPTIONS",
    "StrapiConfig",
    "StoreConfig",
    "merge_options",
    # Contexts
    "InteractiveContext",
    "HeadlessContext",
    # Types
    "TokenStore",
    "ExecutionContext",
    "StrapiUser",
    "StrapiAuthProvider",
    "AuthenticationData",
    "RegistrationData",
    "ForgotPasswordData",
    "ResetPasswordData",
    "EmailConfirmationData",
    "AuthenticationResponse",
    "StrapiResponse",
    # Errors
    "StrapiError",
    "NetworkError",
    "ConfigurationError",
    "is_strapi_error",
    # Storage
    "MemoryStorage",
    "LocalStorage",
    "CookieStorage",
    "create_storage",
]
