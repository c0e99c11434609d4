"""Public short URL construction for the HTTP layer."""

from typing import Mapping, Optional


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    for key, value in headers.items():
        if key.lower() == name and value:
            return value.strip()
    return None


def build_base_url(
    headers: Mapping[str, str],
    fallback_base_url: str,
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
) -> str:
    """Work out the scheme and host clients used to reach the service.
    
    Priority:
    1. X-Forwarded-Proto + X-Forwarded-Host (set by a reverse proxy)
    2. Request scheme + Host header
    3. Configured base URL
    
    Args:
        headers: Request headers
        fallback_base_url: Base URL from configuration
        request_scheme: Request scheme (http/https)
        request_host: Request Host header
        
    Returns:
        Base URL without trailing slash (e.g., https://example.com)
    """
    proto = _header(headers, "x-forwarded-proto")
    host = _header(headers, "x-forwarded-host")
    if proto and host:
        return f"{proto}://{host}"
    
    if request_scheme and request_host:
        return f"{request_scheme}://{request_host}"
    
    return fallback_base_url.rstrip("/")


def build_short_url(key: str, base_url: str, path_prefix: str = "") -> str:
    """Join base URL, redirect path prefix and key.
    
    >>> build_short_url("Ag", "https://example.com/", "/s/")
    'https://example.com/s/Ag'
    """
    base = base_url.rstrip("/")
    prefix = path_prefix.strip("/")
    
    if prefix:
        return f"{base}/{prefix}/{key}"
    return f"{base}/{key}"
