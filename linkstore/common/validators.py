"""Validation utilities for the link store."""

from typing import Tuple


DEFAULT_MAX_URL_LENGTH = 2048


def is_valid_url(url: str, max_length: int = DEFAULT_MAX_URL_LENGTH) -> Tuple[bool, str]:
    """Check a destination URL against the length limits.
    
    The length is measured in bytes of the UTF-8 encoding. No other policy
    is applied to the URL.
    
    Args:
        url: The URL to validate
        max_length: Maximum length in bytes
        
    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"
    
    try:
        size = len(url.encode("utf-8"))
    except UnicodeEncodeError:
        return False, "URL is not valid UTF-8"
    
    if size > max_length:
        return False, f"URL is too long ({size} bytes, max {max_length})"
    
    return True, ""
