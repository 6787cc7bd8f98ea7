"""Address normalization for targets.

Rules:
- A missing scheme means `https` (`bar.com` -> `https://bar.com`).
- An explicit scheme is kept (lowercased, as URL schemes are case-insensitive).
- Anything that cannot be parsed as a URL raises `InvalidURL`.

Pure functions: no I/O, no DNS.
"""

from __future__ import annotations

import re
from urllib.parse import quote, urlsplit, urlunsplit

from core.domain.errors import InvalidURL

DEFAULT_SCHEME = "https"

_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
# Characters left untouched when re-encoding the path (RFC 3986 pchar + "/").
_PATH_SAFE = "/%:@!$&'()*+,;=-._~"


def _scheme_of(raw: str, candidate: str) -> str:
    """Return the lowercased scheme of `candidate`, or "" when there is none."""

    for index, ch in enumerate(candidate):
        if ch.isascii() and ch.isalpha():
            continue
        if ch.isascii() and (ch.isdigit() or ch in "+-."):
            if index == 0:
                return ""
            continue
        if ch == ":":
            if index == 0:
                raise InvalidURL(raw, "missing protocol scheme")
            return candidate[:index].lower()
        return ""
    return ""


def validate_url(raw: str, *, default_scheme: str = DEFAULT_SCHEME) -> str:
    """Normalize `raw` into a canonical URL string.

    Raises `InvalidURL` for empty input, control characters, broken
    percent-escapes, a leading colon, a colon in the first path segment of a
    scheme-less address, an unparseable host or a non-numeric port.
    Without a scheme or a leading "//", the address is path text: spaces are
    escaped rather than rejected.
    """

    if not isinstance(raw, str) or not raw.strip():
        raise InvalidURL(str(raw), "empty address")

    candidate = raw.strip()
    if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in candidate):
        raise InvalidURL(raw, "control character in URL")
    if _BAD_ESCAPE_RE.search(candidate):
        raise InvalidURL(raw, "invalid URL escape")

    scheme = _scheme_of(raw, candidate)
    had_authority = bool(scheme) or candidate.startswith("//")
    if not scheme:
        if not candidate.startswith("/"):
            first_segment = candidate.split("/", 1)[0]
            if ":" in first_segment:
                raise InvalidURL(raw, "first path segment in URL cannot contain colon")
        if candidate.startswith("//"):
            candidate = f"{default_scheme}:{candidate}"
        else:
            candidate = f"{default_scheme}://{candidate}"

    try:
        parts = urlsplit(candidate)
        parts.port  # noqa: B018 - raises ValueError on a bad port
    except ValueError as exc:
        raise InvalidURL(raw, str(exc)) from exc

    if had_authority:
        if any(ch.isspace() for ch in parts.netloc):
            raise InvalidURL(raw, "invalid character in host name")
        netloc = parts.netloc
    else:
        # No "//" in the input: the leading segment is path text, escaped as such.
        netloc = quote(parts.netloc, safe=_PATH_SAFE)

    # A bare "?" (empty query) is kept: "https://bar.com?" != "https://bar.com".
    force_query = not parts.query and "?" in candidate.split("#", 1)[0]

    path = quote(parts.path, safe=_PATH_SAFE)
    url = urlunsplit(parts._replace(netloc=netloc, path=path, fragment=""))
    if force_query:
        url += "?"
    if parts.fragment:
        url += f"#{parts.fragment}"
    return url
