"""Key codec: layout of record keys, scan patterns and scope escaping."""
import fnmatch

import pytest

from ovo import keys


def test_comment_key_layout():
    assert keys.comment_key("example.com", "/post/1", "a1b2c3") == "comment:example.com:/post/1:a1b2c3"


def test_reply_key_layout():
    assert keys.reply_key("a1b2c3", "0f0f0f") == "reply:a1b2c3:0f0f0f"


def test_comment_scope_pattern_exact():
    assert keys.comment_scope_pattern("example.com", "/post/1") == "comment:example.com:/post/1:*"


def test_comment_scope_pattern_empty_fields_become_wildcards():
    assert keys.comment_scope_pattern("", "") == "comment:*:*:*"
    assert keys.comment_scope_pattern("example.com", "") == "comment:example.com:*:*"
    assert keys.comment_scope_pattern("", "/about") == "comment:*:/about:*"
    assert keys.comment_scope_pattern() == "comment:*:*:*"


def test_reply_scope_pattern():
    assert keys.reply_scope_pattern("a1b2c3") == "reply:a1b2c3:*"


def test_all_replies_pattern():
    assert keys.all_replies_pattern() == "reply:*"


def test_escape_reserved_characters():
    assert keys.escape("example.com:8080") == "example.com%3A8080"
    assert keys.escape("/a*b?[c]") == "/a%2Ab%3F%5Bc%5D"
    assert keys.escape("100%") == "100%25"
    assert keys.escape("/plain/path-1_2.html") == "/plain/path-1_2.html"


def test_unescape_inverts_escape():
    raw = "host:8080/%41*?[x]"
    assert keys.unescape(keys.escape(raw)) == raw


def test_escaped_domain_keeps_key_shape():
    key = keys.comment_key("example.com:8080", "/a:b", "a1b2c3")
    assert key.count(keys.SEPARATOR) == 3
    assert keys.decode_comment_key(key) == ("example.com:8080", "/a:b", "a1b2c3")


def test_wildcard_in_path_does_not_widen_scope():
    """A literal '*' path only matches itself, not every path."""
    pattern = keys.comment_scope_pattern("example.com", "*")
    assert fnmatch.fnmatchcase(keys.comment_key("example.com", "*", "abcdef"), pattern)
    assert not fnmatch.fnmatchcase(keys.comment_key("example.com", "/other", "abcdef"), pattern)


def test_domain_prefix_does_not_match_longer_domain():
    pattern = keys.comment_scope_pattern("example.com", "")
    assert not fnmatch.fnmatchcase(keys.comment_key("example.com.evil", "/", "abcdef"), pattern)


def test_decode_reply_key():
    assert keys.decode_reply_key("reply:a1b2c3:0f0f0f") == ("a1b2c3", "0f0f0f")


@pytest.mark.parametrize("key", ["reply:a:b", "comment:a:b", "comment:a:b:c:d", "note:a:b:c"])
def test_decode_comment_key_rejects_malformed(key):
    with pytest.raises(ValueError):
        keys.decode_comment_key(key)


def test_decode_reply_key_rejects_comment_key():
    with pytest.raises(ValueError):
        keys.decode_reply_key("comment:d:p:i")


def test_literal_prefix():
    assert keys.literal_prefix("comment:example.com:*:*") == "comment:example.com:"
    assert keys.literal_prefix("comment:*:*:*") == "comment:"
    assert keys.literal_prefix("reply:abc:?x") == "reply:abc:"
    assert keys.literal_prefix("reply:abc:def") == "reply:abc:def"
