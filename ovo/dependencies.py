from fastapi import Query, Request

from ovo.store import Store


def get_store(request: Request) -> Store:
    """
    Return the process-wide ``Store`` opened by the application lifespan.

    Tests override this dependency to point requests at a temporary store.
    """
    return request.app.state.store


class ThreadScope:
    """
    Reusable FastAPI dependency that parses the thread scope query
    parameters.

    Usage in a router::

        @router.get("/comment")
        async def list_comments(scope: ThreadScope = Depends()):
            ...

    Attributes
    ----------
    domain:
        Site the thread belongs to.  Empty or absent means every domain.
    path:
        Page within *domain*.  Empty or absent means every path.
    """

    def __init__(
        self,
        domain: str = Query(
            "",
            description="Domain of the thread; empty matches all domains.",
        ),
        path: str = Query(
            "",
            description="Path of the thread; empty matches all paths.",
        ),
    ) -> None:
        self.domain = domain
        self.path = path
