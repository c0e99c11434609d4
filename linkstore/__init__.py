"""Short link storage: key encoding, persistence, expiry and click counting."""

from .errors import (
    BackendUnavailableError,
    ExpiredError,
    InvalidKeyError,
    LinkStoreError,
    NotFoundError,
    ValidationError,
)
from .keycodec import KeyCodec
from .store import LinkStore

__all__ = [
    "BackendUnavailableError",
    "ExpiredError",
    "InvalidKeyError",
    "LinkStoreError",
    "NotFoundError",
    "ValidationError",
    "KeyCodec",
    "LinkStore",
]
