"""Server URL validation and URI-equivalence.

Server URLs are compared as URIs rather than strings: scheme and host are
case-insensitive, default ports are implied and an empty path is the root
path. ``http://localhost`` and ``http://LOCALHOST:80/`` therefore name the
same server, while ``http://localhost/rb`` does not.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from rbstatus_core.errors import InvalidServerURL

_DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_url(value: str) -> tuple:
    """Return a comparable key for ``value``.

    Raises InvalidServerURL if ``value`` is not an absolute http(s) URL.
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidServerURL(f"Invalid URL: {value!r}")

    try:
        parts = urlsplit(value.strip())
        port = parts.port
    except ValueError as e:
        raise InvalidServerURL(f"Invalid URL: {value!r} ({e})") from e

    scheme = parts.scheme.lower()
    if scheme not in _DEFAULT_PORTS or not parts.hostname:
        raise InvalidServerURL(f"Invalid URL: {value!r}")

    if port == _DEFAULT_PORTS[scheme]:
        port = None

    return (
        scheme,
        parts.username,
        parts.password,
        parts.hostname.lower(),
        port,
        parts.path or "/",
        parts.query,
        parts.fragment,
    )


def validate_url(value: str) -> str:
    """Return ``value`` stripped of surrounding whitespace, or raise InvalidServerURL."""
    normalize_url(value)
    return value.strip()


def is_valid_url(value: str) -> bool:
    try:
        normalize_url(value)
    except InvalidServerURL:
        return False
    return True


def urls_equivalent(a: str, b: str) -> bool:
    """True when both URLs identify the same resource. Raises InvalidServerURL if either is malformed."""
    return normalize_url(a) == normalize_url(b)


def join_api_path(base_url: str, path: str) -> str:
    """Append an API path to a server base URL, keeping any sub-path the server is installed under."""
    return base_url.rstrip("/") + "/" + path.lstrip("/")
