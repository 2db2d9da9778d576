"""
Key codec for the flat comment keyspace.

Layout
------
::

    comment:<domain>:<path>:<id>   -> comment record
    reply:<cid>:<id>               -> reply record

Because the store walks keys in lexicographic order, a scan over
``comment:<domain>:<path>:*`` yields one thread's comments (domain-major,
then path, then id) and a scan over ``reply:<cid>:*`` yields the replies of
a single comment.  Two prefix scans stand in for a two-table join.

Every field is escaped before it is placed into a key or pattern, so a
separator or glob metacharacter inside a domain or path can neither split
the key nor widen a scan.
"""
import re
from urllib.parse import unquote

SEPARATOR = ":"
WILDCARD = "*"
PREFIX_COMMENT = "comment"
PREFIX_REPLY = "reply"

# "%" is escaped as well, which keeps unquote() an exact inverse.
_ESCAPES = {
    "%": "%25",
    ":": "%3A",
    "*": "%2A",
    "?": "%3F",
    "[": "%5B",
    "]": "%5D",
}
_ESCAPE_TABLE = str.maketrans(_ESCAPES)

_GLOB_META_RE = re.compile(r"[*?\[]")


def escape(value: str) -> str:
    """Percent-encode the characters that carry meaning in keys or patterns."""
    return value.translate(_ESCAPE_TABLE)


def unescape(value: str) -> str:
    return unquote(value)


def _join(*parts: str) -> str:
    return SEPARATOR.join(parts)


# ---------------------------------------------------------------------------
# Record keys
# ---------------------------------------------------------------------------

def comment_key(domain: str, path: str, comment_id: str) -> str:
    return _join(PREFIX_COMMENT, escape(domain), escape(path), escape(comment_id))


def reply_key(cid: str, reply_id: str) -> str:
    return _join(PREFIX_REPLY, escape(cid), escape(reply_id))


# ---------------------------------------------------------------------------
# Scan patterns
# ---------------------------------------------------------------------------

def comment_scope_pattern(domain: str = "", path: str = "") -> str:
    """
    Return the pattern matching every comment in the (domain, path) scope.

    An empty *domain* or *path* is replaced with a wildcard, so
    ``comment_scope_pattern()`` matches all comments.
    """
    return _join(
        PREFIX_COMMENT,
        escape(domain) if domain else WILDCARD,
        escape(path) if path else WILDCARD,
        WILDCARD,
    )


def reply_scope_pattern(cid: str) -> str:
    """Return the pattern matching every reply owned by comment *cid*."""
    return _join(PREFIX_REPLY, escape(cid), WILDCARD)


def all_replies_pattern() -> str:
    """Return the pattern matching every reply, owned or orphaned."""
    return _join(PREFIX_REPLY, WILDCARD)


def literal_prefix(pattern: str) -> str:
    """Return the part of *pattern* that precedes its first glob metacharacter."""
    match = _GLOB_META_RE.search(pattern)
    return pattern[: match.start()] if match else pattern


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def decode_comment_key(key: str) -> tuple[str, str, str]:
    """Split a comment key into its unescaped ``(domain, path, id)``."""
    parts = key.split(SEPARATOR)
    if len(parts) != 4 or parts[0] != PREFIX_COMMENT:
        raise ValueError(f"not a comment key: {key!r}")
    return unescape(parts[1]), unescape(parts[2]), unescape(parts[3])


def decode_reply_key(key: str) -> tuple[str, str]:
    """Split a reply key into its unescaped ``(cid, id)``."""
    parts = key.split(SEPARATOR)
    if len(parts) != 3 or parts[0] != PREFIX_REPLY:
        raise ValueError(f"not a reply key: {key!r}")
    return unescape(parts[1]), unescape(parts[2])
