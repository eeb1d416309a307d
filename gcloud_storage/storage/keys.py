"""Object key generation and URL path joining.

Object keys end up inside public URLs, so segments are always joined with
``/`` regardless of the host platform.
"""

import re
from typing import Optional
from uuid import uuid4


_SCHEME_RE = re.compile(r'^([a-zA-Z][a-zA-Z0-9+.-]*://)(.*)$')


def generate_object_name() -> str:
    """Return a random object name (uuid4 hex, no collision check)."""
    return uuid4().hex


def join_url_path(*segments: Optional[str]) -> str:
    """Join URL path segments with exactly one slash between them.

    Empty segments are skipped. A leading ``scheme://`` on the first segment
    is preserved, and a leading slash on the first segment is kept.

    >>> join_url_path("https://cdn.example.com/files/", "/avatars", "abc")
    'https://cdn.example.com/files/avatars/abc'
    """
    parts = [s for s in segments if s]
    if not parts:
        return ""

    head = parts[0]
    scheme = ""
    match = _SCHEME_RE.match(head)
    if match:
        scheme, head = match.groups()
    leading = "/" if head.startswith("/") and not scheme else ""

    pieces = []
    for segment in [head, *parts[1:]]:
        pieces.extend(p for p in segment.split("/") if p)

    return scheme + leading + "/".join(pieces)


def build_object_key(name: str, prefix: Optional[str] = None) -> str:
    """Object key for ``name``, optionally placed under ``prefix``.

    The prefix is split on ``/`` and empty, ``.`` and ``..`` segments are
    dropped, so the key is bucket-relative and appears unchanged as the tail
    of its public URL. No scheme is recognised, so a ``gs://x`` prefix gives
    the key ``gs:/x/<name>``.

    >>> build_object_key("abc", prefix="a/../b")
    'a/b/abc'
    """
    segments = [s for s in (prefix or "").split("/") if s not in ("", ".", "..")]
    return "/".join([*segments, name])
