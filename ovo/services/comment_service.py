"""
Comment service: create comments and replies, read assembled threads.

Design notes
------------
- Comments and replies live in one flat keyspace (see ``ovo.keys``).  A
  thread read is two phases inside a single read transaction: scan the
  comment scope, then scan ``reply:<cid>:*`` for each comment found.  Both
  phases therefore observe the same snapshot.
- Replies are only ever reached through their owning comment.  A reply
  whose ``cid`` names no comment is stored but never returned.
- Content is sanitised before it is written; issuer fields are not.
- Issuer email is persisted but dropped from every read result.
- Each write is one update transaction holding one ``set``.  Ids are
  random and not checked for collisions; a colliding write overwrites.
- Nothing read here is cached: the thread graph is rebuilt on every call.
"""
import logging
from datetime import datetime, timezone

from pydantic import ValidationError

from ovo import keys
from ovo.config import settings
from ovo.ids import new_id
from ovo.sanitizer import sanitize
from ovo.schemas import (
    CommentCreate,
    CommentRecord,
    CommentResponse,
    CommentResults,
    ReplyCreate,
    ReplyRecord,
    ReplyResponse,
)
from ovo.store import Store

logger = logging.getLogger(__name__)


class InvalidCommentError(ValueError):
    """A required field was missing or empty; nothing was written."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"missing required field(s): {', '.join(missing)}")


class RecordDecodeError(Exception):
    """A stored value could not be decoded back into a record."""

    def __init__(self, key: str, address: tuple[str, ...]) -> None:
        self.key = key
        # Unescaped key fields: (domain, path, id) or (cid, id).
        self.address = address
        super().__init__(f"undecodable record at key {key!r}")


def _require(data, *fields: str) -> None:
    missing = [name for name in fields if not getattr(data, name)]
    if missing:
        raise InvalidCommentError(missing)


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

async def create_comment(store: Store, data: CommentCreate) -> CommentRecord:
    """
    Persist a new comment under ``comment:<domain>:<path>:<id>``.

    Raises ``InvalidCommentError`` when domain, path or content is empty.
    """
    _require(data, "domain", "path", "content")

    record = CommentRecord(
        id=new_id(settings.ID_BYTES),
        domain=data.domain,
        path=data.path,
        content=sanitize(data.content),
        ctime=_now(),
        issuer=data.issuer,
        issuer_website=data.issuer_website,
        issuer_email=data.issuer_email,
    )
    key = keys.comment_key(record.domain, record.path, record.id)

    async with store.update() as tx:
        await tx.set(key, record.model_dump_json())

    logger.debug("Stored comment %s", key)
    return record


async def create_reply(store: Store, data: ReplyCreate) -> ReplyRecord:
    """
    Persist a new reply under ``reply:<cid>:<id>``.

    The owning comment is not looked up; see the module notes on orphans.
    Raises ``InvalidCommentError`` when cid or content is empty.
    """
    _require(data, "cid", "content")

    record = ReplyRecord(
        id=new_id(settings.ID_BYTES),
        cid=data.cid,
        rid=data.rid,
        content=sanitize(data.content),
        ctime=_now(),
        issuer=data.issuer,
        issuer_website=data.issuer_website,
        issuer_email=data.issuer_email,
    )
    key = keys.reply_key(record.cid, record.id)

    async with store.update() as tx:
        await tx.set(key, record.model_dump_json())

    logger.debug("Stored reply %s", key)
    return record


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def _decode(model, decode_key, key: str, value: str):
    try:
        return model.model_validate_json(value)
    except ValidationError as exc:
        address = decode_key(key)
        logger.error("Corrupt %s at %r %s: %s", model.__name__, key, address, exc)
        raise RecordDecodeError(key, address) from exc


def _comment_view(record: CommentRecord) -> CommentResponse:
    return CommentResponse.model_validate(record.model_dump(exclude={"issuer_email"}))


def _reply_view(record: ReplyRecord) -> ReplyResponse:
    return ReplyResponse.model_validate(record.model_dump(exclude={"issuer_email"}))


async def list_thread(store: Store, domain: str = "", path: str = "") -> CommentResults:
    """
    Return every comment in the (domain, path) scope with its replies.

    An empty *domain* or *path* matches all values.  Comments come back in
    key order (domain, path, id), not creation order; replies in id order.
    """
    comments: list[CommentResponse] = []

    def collect_comment(key: str, value: str) -> bool:
        comments.append(_comment_view(_decode(CommentRecord, keys.decode_comment_key, key, value)))
        return True

    async with store.view() as tx:
        await tx.ascend_keys(keys.comment_scope_pattern(domain, path), collect_comment)

        for comment in comments:
            replies = comment.replies

            def collect_reply(key: str, value: str) -> bool:
                replies.append(_reply_view(_decode(ReplyRecord, keys.decode_reply_key, key, value)))
                return True

            await tx.ascend_keys(keys.reply_scope_pattern(comment.id), collect_reply)

    return CommentResults(done=True, comments=comments)
