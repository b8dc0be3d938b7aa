"""
URL checks for feed URLs.

Two levels:
- ``require_feed_url`` - syntax only. A feed URL must be an absolute
  http(s) URL with a host. Runs before any network attempt.
- ``guard_outbound_url`` - blocks fetches that would reach the local
  machine or internal networks (loopback, private ranges, cloud metadata).
"""

import ipaddress
import logging
import socket
from urllib.parse import urlparse

from .errors import FetchError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = {"http", "https"}
DEFAULT_PORTS = {"http": 80, "https": 443}

BLOCKED_NETWORKS = [
    ipaddress.ip_network("0.0.0.0/8"),
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("100.64.0.0/10"),  # carrier-grade NAT
    ipaddress.ip_network("127.0.0.0/8"),
    ipaddress.ip_network("169.254.0.0/16"),  # link-local, cloud metadata
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    ipaddress.ip_network("::1/128"),
    ipaddress.ip_network("fc00::/7"),
    ipaddress.ip_network("fe80::/10"),
]

BLOCKED_HOSTNAMES = {
    "localhost",
    "localhost.localdomain",
    "ip6-localhost",
    "ip6-loopback",
    "metadata",
    "metadata.google.internal",
}

BLOCKED_SUFFIXES = (".local", ".internal", ".localhost")


def is_absolute_url(url: str) -> bool:
    """True if ``url`` is an absolute http(s) URL with a hostname."""
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
        # Accessing .port validates it (raises ValueError when out of range)
        parsed.port
    except ValueError:
        return False
    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        return False
    if not hostname:
        return False
    return not any(ch.isspace() for ch in url)


def require_feed_url(url: str | None) -> str:
    """
    Validate feed URL syntax.

    Stripping surrounding whitespace is the only normalization applied;
    case, trailing slashes and query strings are kept as given, so
    duplicate checks on the result stay exact-match.

    Returns:
        The URL with surrounding whitespace removed

    Raises:
        ValidationError: If the URL is missing or not a well-formed absolute URL
    """
    if not isinstance(url, str) or not url.strip():
        raise ValidationError("URL is required")
    url = url.strip()
    if not is_absolute_url(url):
        raise ValidationError("Invalid URL format")
    return url


def is_ip_blocked(ip_str: str) -> bool:
    """Check if an IP address falls in a blocked range."""
    try:
        ip = ipaddress.ip_address(ip_str)
    except ValueError:
        return False
    # ::ffff:127.0.0.1 reaches the IPv4 loopback
    if ip.version == 6 and ip.ipv4_mapped is not None:
        ip = ip.ipv4_mapped
    return any(ip in network for network in BLOCKED_NETWORKS)


def guard_outbound_url(url: str, resolve_dns: bool = True) -> None:
    """
    Refuse outbound fetches to internal addresses.

    Args:
        url: An URL that already passed ``require_feed_url``
        resolve_dns: Also check every address the hostname resolves to

    Raises:
        FetchError: If the URL targets a blocked host or address
    """
    parsed = urlparse(url)
    hostname = (parsed.hostname or "").lower()

    if hostname in BLOCKED_HOSTNAMES or hostname.endswith(BLOCKED_SUFFIXES):
        raise FetchError(f"Access to '{hostname}' is not allowed")

    try:
        literal = ipaddress.ip_address(hostname)
    except ValueError:
        literal = None

    if literal is not None:
        if is_ip_blocked(str(literal)):
            raise FetchError(f"Access to IP address '{literal}' is not allowed")
        return

    if not resolve_dns:
        return

    port = parsed.port or DEFAULT_PORTS.get(parsed.scheme.lower(), 80)
    try:
        addrinfo = socket.getaddrinfo(hostname, port, proto=socket.IPPROTO_TCP)
    except (socket.gaierror, UnicodeError) as e:
        # Unresolvable hosts fail at fetch time with a proper transport error
        logger.debug(f"DNS lookup failed for {hostname}: {e}")
        return

    for _family, _type, _proto, _canon, sockaddr in addrinfo:
        if is_ip_blocked(sockaddr[0]):
            raise FetchError(
                f"Hostname '{hostname}' resolves to blocked address '{sockaddr[0]}'"
            )
