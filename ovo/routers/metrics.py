from fastapi import APIRouter, Depends

from ovo import keys
from ovo.dependencies import get_store
from ovo.schemas import MetricsResponse
from ovo.store import Store

router = APIRouter(prefix="/metrics", tags=["metrics"])

@router.get("", response_model=MetricsResponse)
async def get_metrics(store: Store = Depends(get_store)):
    # Reply totals include orphans: they are counted by key, not by thread.
    async with store.view() as tx:
        total_comments = await tx.count(keys.comment_scope_pattern())

        total_replies = await tx.count(keys.all_replies_pattern())

    avg_replies = total_replies / total_comments if total_comments > 0 else 0

    return MetricsResponse(
        total_comments=total_comments,
        total_replies=total_replies,
        avg_replies_per_comment=round(avg_replies, 2),
    )
