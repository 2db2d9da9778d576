from fastapi import APIRouter, Depends, HTTPException

from ovo.dependencies import ThreadScope, get_store
from ovo.schemas import CommentCreate, CommentResults, ReplyCreate
from ovo.services import comment_service
from ovo.services.comment_service import InvalidCommentError
from ovo.store import Store

router = APIRouter(tags=["comments"])

@router.get("/comment", response_model=CommentResults)
async def list_comments(
    scope: ThreadScope = Depends(),
    store: Store = Depends(get_store),
):
    return await comment_service.list_thread(store, scope.domain, scope.path)

@router.post("/comment")
async def add_comment(data: CommentCreate, store: Store = Depends(get_store)):
    try:
        await comment_service.create_comment(store, data)
    except InvalidCommentError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {}

@router.post("/reply")
async def add_reply(data: ReplyCreate, store: Store = Depends(get_store)):
    try:
        await comment_service.create_reply(store, data)
    except InvalidCommentError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {}
