# =============================================================================
# Provider Errors
# =============================================================================
# Failure taxonomy for mail provider operations. Lives in core because the
# reducer stores these on the view state and the renderer shows their hints.
#
#   ProviderUnavailable - client not running / not automatable
#   PermissionDenied    - automation or access not granted
#   IndexStale          - position no longer valid in the current unread set
#   UnknownProviderError - anything else
# =============================================================================


class ProviderError(Exception):
    """
    Base class for mail provider failures.

    Attributes:
        hint: Short advice shown under the error message in the UI.
    """

    hint = "Something went wrong talking to the mail client."

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        if hint is not None:
            self.hint = hint


class ProviderUnavailable(ProviderError):
    """The mail client is not running or cannot be automated."""
    hint = "Make sure Mail.app is running."


class PermissionDenied(ProviderError):
    """Automation / access permission has not been granted."""
    hint = "Grant automation access in System Settings > Privacy & Security."


class IndexStale(ProviderError):
    """The position no longer exists in the provider's current unread set."""
    hint = "The mailbox changed since the list was loaded. Press 'r' to refresh."


class UnknownProviderError(ProviderError):
    """Any other failure."""
    pass
