"""
Feed refresh endpoints
"""
from typing import List, Optional

from fastapi import APIRouter

from feedsync.api.deps import FeedRepoDep, OrchestratorDep
from feedsync.core.exceptions import DatabaseError, WriteError
from feedsync.core.logging import log
from feedsync.schemas.feed import FeedRead, FeedRefreshRequest, FeedRefreshResponse

router = APIRouter()


@router.get("", response_model=List[FeedRead])
async def list_feeds(feed_repo: FeedRepoDep) -> List[FeedRead]:
    """All configured feeds with their last run status"""
    feeds = await feed_repo.get_multi(order_by="created_at")
    return [FeedRead.model_validate(feed) for feed in feeds]


@router.post("/refresh", response_model=FeedRefreshResponse, response_model_exclude_none=True)
async def refresh_feeds(
    orchestrator: OrchestratorDep,
    request: Optional[FeedRefreshRequest] = None,
) -> FeedRefreshResponse:
    """
    Run supplier feeds.

    - `{op}` runs every enabled feed in that mode
    - `{feed_id}` runs one feed in its configured mode

    Feed failures are recorded on each feed's status and do not fail the
    request; the response carries the total written across successful feeds.
    """
    request = request or FeedRefreshRequest()
    log.info("Feed refresh requested", op=request.op, feed_id=str(request.feed_id) if request.feed_id else None)

    try:
        summary = await orchestrator.run(op=request.op, feed_id=request.feed_id)
    except WriteError as e:
        # Feed status could not be recorded
        raise DatabaseError(str(e))
    return FeedRefreshResponse(ok=True, updated=summary.updated)
