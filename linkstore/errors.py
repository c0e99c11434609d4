"""Error kinds raised by the link store."""


class LinkStoreError(Exception):
    """Base class for link store errors."""


class ValidationError(LinkStoreError):
    """The URL handed to save is empty or too long."""


class InvalidKeyError(LinkStoreError, ValueError):
    """The key is malformed or contains characters outside the key alphabet."""


class NotFoundError(LinkStoreError):
    """The key is well formed but no record exists for it."""


class ExpiredError(LinkStoreError):
    """The record exists but its lifetime has elapsed."""


class BackendUnavailableError(LinkStoreError):
    """The persistence backend failed or did not answer in time."""
