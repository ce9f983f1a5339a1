"""Exception hierarchy for zjsidebar.

Exception Hierarchy:
    SidebarError (base)
    ├── TabNotFoundError - report addressed a tab/pane that is not known
    ├── StoreError - shared collapse record I/O
    │   ├── StoreReadError
    │   └── StoreWriteError
    ├── PayloadError - malformed broadcast payload or stored record
    └── PipeSendError - CLI could not reach the multiplexer

None of these are fatal to the plugin process. Callers at the component
boundary catch them and keep the last known good state.

Usage:
    from zjsidebar.exceptions import StoreReadError

    try:
        raw = path.read_text()
    except OSError as e:
        raise StoreReadError("Failed to read collapse record", path=str(path)) from e
"""

from typing import Any


class SidebarError(Exception):
    """Base exception for all zjsidebar errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about the error (e.g., positions, paths)
    """

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class TabNotFoundError(SidebarError):
    """Raised when an alert targets a tab position that is not in the snapshot."""


# =============================================================================
# Shared store errors
# =============================================================================


class StoreError(SidebarError):
    """Base class for shared collapse store failures."""


class StoreReadError(StoreError):
    """Raised when the shared record cannot be read or decoded."""


class StoreWriteError(StoreError):
    """Raised when the shared record cannot be replaced."""


class PayloadError(SidebarError):
    """Raised when a serialized alert map or record is malformed."""


class PipeSendError(SidebarError):
    """Raised when a pipe message could not be handed to the multiplexer."""
