"""
Strapi SDK Error Classes

Errors carry the Strapi error envelope:
``{"data": null, "error": {"status", "name", "message", "details"}}``.
"""

from typing import Any, Dict, Optional


class StrapiError(Exception):
    """Error reported by the Strapi API.

    ``body`` is the decoded response body exactly as the server sent it.
    """

    def __init__(self, body: Any, status_code: Optional[int] = None) -> None:
        self.body = body
        self.status_code = status_code
        super().__init__(self.message)

    @property
    def error(self) -> Dict[str, Any]:
        """The ``error`` member of the envelope, or an empty dict."""
        if isinstance(self.body, dict) and isinstance(self.body.get("error"), dict):
            return self.body["error"]
        return {}

    @property
    def status(self) -> Optional[int]:
        return self.error.get("status", self.status_code)

    @property
    def name(self) -> str:
        return self.error.get("name", "ApplicationError")

    @property
    def message(self) -> str:
        message = self.error.get("message")
        if message:
            return str(message)
        if isinstance(self.body, str) and self.body:
            return self.body
        return f"HTTP {self.status_code}" if self.status_code else "Unknown error"

    @property
    def details(self) -> Any:
        return self.error.get("details")

    def to_dict(self) -> Any:
        """Return the error envelope."""
        return self.body

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(status={self.status!r}, name={self.name!r}, message={self.message!r})"


class NetworkError(StrapiError):
    """The request never obtained a response (connection issues, timeouts)."""

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(
            {
                "data": None,
                "error": {
                    "status": 500,
                    "name": "UnknownError",
                    "message": message,
                    "details": details,
                },
            },
            status_code=500,
        )


class ConfigurationError(Exception):
    """Invalid client options."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


def is_strapi_error(error: Any) -> bool:
    """Check if error is a StrapiError."""
    return isinstance(error, StrapiError)
