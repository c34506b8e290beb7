# =============================================================================
# Perch Provider Module
# =============================================================================
# The boundary to the mail client. Exports:
#   - MailProvider: Structural interface (three blocking operations)
#   - ProviderError and subclasses: Failure taxonomy
#   - AppleMailProvider: Mail.app via osascript
#   - MemoryProvider: In-memory mailbox (demo mode, tests)
# =============================================================================

from perch.provider.base import (
    DEFAULT_MAX_UNREAD,
    IndexStale,
    MailProvider,
    PermissionDenied,
    ProviderError,
    ProviderUnavailable,
    UnknownProviderError,
)
from perch.provider.applescript import AppleMailProvider
from perch.provider.memory import MemoryProvider, StoredMessage, demo_provider

__all__ = [
    "DEFAULT_MAX_UNREAD",
    "MailProvider",
    "ProviderError",
    "ProviderUnavailable",
    "PermissionDenied",
    "IndexStale",
    "UnknownProviderError",
    "AppleMailProvider",
    "MemoryProvider",
    "StoredMessage",
    "demo_provider",
]
