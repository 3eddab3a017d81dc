"""
Execution contexts.

A client only touches its token storage, and only inspects the current
location for a provider ``access_token``, when its context is interactive.
"""

from typing import Optional


class InteractiveContext:
    """Interactive environment with an addressable location (default)."""

    def __init__(self, location: Optional[str] = None) -> None:
        self._location = location

    def is_interactive(self) -> bool:
        return True

    def location(self) -> Optional[str]:
        """Current location URL, e.g. the provider redirect that was received."""
        return self._location

    def set_location(self, location: Optional[str]) -> None:
        self._location = location


class HeadlessContext:
    """Non-interactive / server-side context: token state stays in memory."""

    def is_interactive(self) -> bool:
        return False

    def location(self) -> Optional[str]:
        return None
