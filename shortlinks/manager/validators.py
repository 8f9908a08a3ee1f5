"""Input validators for URLs and caller-supplied shortcodes."""

import re
from typing import Iterable, Optional
from urllib.parse import urlsplit

CODE_PATTERN = re.compile(r"^[A-Za-z0-9]{3,10}$")
SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")

# Schemes whose URLs are meaningless without a host.
HOST_SCHEMES = frozenset({"http", "https", "ftp", "ws", "wss"})

_FORBIDDEN = re.compile(r"[\s\x00-\x1f\x7f]")


def is_valid_url(url, allowed_schemes: Optional[Iterable[str]] = None) -> bool:
    """
    True if `url` is an absolute URL.

    Any scheme is accepted (including `mailto:`, `file:`, `javascript:`)
    unless `allowed_schemes` narrows it. Web schemes additionally need a host.
    """
    if not isinstance(url, str) or not url or _FORBIDDEN.search(url):
        return False
    try:
        parts = urlsplit(url)
        # Accessing port validates it ("http://host:99999" raises).
        parts.port
    except ValueError:
        return False
    scheme = parts.scheme.lower()
    if not scheme or not SCHEME_PATTERN.match(parts.scheme):
        return False
    if allowed_schemes and scheme not in {s.lower() for s in allowed_schemes}:
        return False
    if scheme in HOST_SCHEMES and not parts.hostname:
        return False
    # "scheme:" with nothing after it is not a URL.
    return bool(parts.netloc or parts.path or parts.query)


def is_valid_code(code) -> bool:
    """True if `code` is 3-10 ASCII letters or digits."""
    return isinstance(code, str) and CODE_PATTERN.fullmatch(code) is not None
