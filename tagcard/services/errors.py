"""Exceptions shared by the public profile pipeline."""


class TagCardError(Exception):
    """Base exception for the profile pipeline."""


class ProfileNotFoundError(TagCardError):
    """Raised when a public identifier does not resolve to exactly one profile."""


class TransientBackendError(TagCardError):
    """Raised when the record store fails while loading a profile."""


class ArtifactGenerationError(TagCardError):
    """Raised when a QR, vCard or card artifact cannot be produced."""


class UnknownShareTargetError(TagCardError):
    """Raised for share targets we have no dispatcher for."""


class ShareCancelled(TagCardError):
    """Raised by a native share callable when the user dismisses the sheet. Never surfaced."""
