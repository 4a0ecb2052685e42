"""Reduce user-supplied domain strings to lookup candidates.

Requests may carry a bare host, a host with port, or a full URL. Lookups
try the host itself first and then its root domain, so
"https://www.example.com:8443/about" resolves to a record for
"www.example.com" if one exists, otherwise "example.com".
"""

import re

_HOST_PATTERN = re.compile(
    r"^[a-z0-9_]([a-z0-9_-]*[a-z0-9_])?(\.[a-z0-9_]([a-z0-9_-]*[a-z0-9_])?)*$"
)


def extract_host(value: str) -> str:
    """Return the lowercase host of a bare domain or URL.

    - "Example.COM" -> "example.com"
    - "https://www.example.com:8443/path?q=1" -> "www.example.com"
    - "user@example.com" -> "example.com"
    """
    host = value.strip().lower()
    if "://" in host:
        host = host.split("://", 1)[1]
    for sep in "/?#":
        host = host.split(sep, 1)[0]
    host = host.rsplit("@", 1)[-1]
    host = host.split(":", 1)[0]
    return host.rstrip(".")


def is_valid_host(host: str) -> bool:
    return bool(host) and len(host) <= 255 and bool(_HOST_PATTERN.match(host))


def root_domain(host: str) -> str | None:
    """Return the last two labels of host, or None if host is already one.

    IPv4 addresses have no root domain.
    """
    labels = host.split(".")
    if len(labels) <= 2 or all(label.isdigit() for label in labels):
        return None
    return ".".join(labels[-2:])


def candidate_names(host: str) -> list[str]:
    """Lookup order for a host: the host itself, then its root domain."""
    root = root_domain(host)
    return [host, root] if root else [host]
