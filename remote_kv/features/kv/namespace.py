"""Mapping between logical ``(user, key)`` pairs and bucket object names.

Layout::

    <key_prefix><percent-encoded user>/<key>    when a user is given
    <key_prefix><key>                           otherwise

The user segment is encoded with the same alphabet as JavaScript's
``encodeURIComponent`` so objects written by other clients of the same
bucket line up. The key is never encoded.
"""

from __future__ import annotations

from urllib.parse import quote

# Characters encodeURIComponent leaves alone besides ASCII letters and digits
_USER_SAFE_CHARS = "-_.!~*'()"


def encode_user(user: str) -> str:
    """Percent-encode a user name as one path segment.

    Example:
        >>> encode_user("alice@example.com")
        'alice%40example.com'
        >>> encode_user("a/b")
        'a%2Fb'
    """
    return quote(user, safe=_USER_SAFE_CHARS)


def build_prefix(key_prefix: str, user: str | None = None) -> str:
    """Return the namespace every object of ``user`` lives under.

    An absent or empty user maps to the shared namespace, which is just the
    configured key prefix.
    """
    if user:
        return f"{key_prefix}{encode_user(user)}/"
    return key_prefix


def object_name(key_prefix: str, key: str, user: str | None = None) -> str:
    """Return the bucket object name for ``key`` in ``user``'s namespace."""
    return build_prefix(key_prefix, user) + key


def strip_namespace(name: str, namespace: str) -> str | None:
    """Invert :func:`object_name` for listing.

    Returns the logical key, or None when ``name`` is outside ``namespace``
    or is the namespace itself.
    """
    if not name.startswith(namespace):
        return None
    key = name[len(namespace):]
    return key or None
