"""
Strapi SDK Type Definitions

Request payloads, response envelopes and the collaborator interfaces the
clients depend on.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Literal, Optional, Protocol, TypeVar, Union, runtime_checkable


T = TypeVar("T")

# User record as returned by /users/me, shaped by the caller's schema
StrapiUser = Dict[str, Any]

StrapiAuthProvider = Literal[
    "auth0",
    "cas",
    "cognito",
    "discord",
    "email",
    "facebook",
    "github",
    "google",
    "instagram",
    "linkedin",
    "patreon",
    "reddit",
    "twitch",
    "twitter",
    "vk",
]

EntryId = Union[str, int]

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]


@runtime_checkable
class TokenStore(Protocol):
    """Synchronous key-value store holding the session token."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str, **options: Any) -> None:
        ...

    def remove(self, key: str, **options: Any) -> None:
        ...


@runtime_checkable
class ExecutionContext(Protocol):
    """Capabilities of the environment the client runs in."""

    def is_interactive(self) -> bool:
        ...

    def location(self) -> Optional[str]:
        ...


@dataclass
class AuthenticationData:
    """Local login credentials."""

    # Email or username
    identifier: str
    password: str

    def to_dict(self) -> Dict[str, Any]:
        return {"identifier": self.identifier, "password": self.password}


@dataclass
class RegistrationData:
    """New user registration data."""

    username: str
    email: str
    password: str
    # Additional user fields accepted by the server
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = dict(self.extra)
        result.update(
            {
                "username": self.username,
                "email": self.email,
                "password": self.password,
            }
        )
        return result


@dataclass
class ForgotPasswordData:
    email: str

    def to_dict(self) -> Dict[str, Any]:
        return {"email": self.email}


@dataclass
class ResetPasswordData:
    """Password reset with the code received by email."""

    code: str
    password: str
    password_confirmation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "password": self.password,
            "passwordConfirmation": self.password_confirmation,
        }


@dataclass
class EmailConfirmationData:
    email: str

    def to_dict(self) -> Dict[str, Any]:
        return {"email": self.email}


@dataclass
class AuthenticationResponse:
    """Authenticated user and session token.

    ``jwt`` is None when the server opened no session, e.g. a registration
    pending email confirmation.
    """

    user: Optional[StrapiUser]
    jwt: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "AuthenticationResponse":
        if not isinstance(data, dict):
            data = {}
        jwt = data.get("jwt")
        return cls(
            user=data.get("user"),
            jwt=jwt if isinstance(jwt, str) and jwt else None,
        )


@dataclass
class StrapiResponse(Generic[T]):
    """Response envelope: ``{"data": ..., "meta": ...}``."""

    data: T
    meta: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, body: Any) -> "StrapiResponse[Any]":
        """Create from a decoded response body."""
        if not isinstance(body, dict):
            return cls(data=body)
        return cls(data=body.get("data"), meta=body.get("meta") or {})
