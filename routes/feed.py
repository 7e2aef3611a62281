"""
Live change notifications for the board and reply threads

Clients keep a Server-Sent Events connection open and refetch the board (or
an open thread) whenever a change event arrives. Events carry no note data.
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from typing import AsyncGenerator, Optional
import asyncio
import json
import logging

from utils.changefeed import replies_to, top_level
from utils.context import BoardContext, get_context

logger = logging.getLogger(__name__)

router = APIRouter()

KEEPALIVE_SECONDS = 15


async def change_events(
    request: Request,
    context: BoardContext,
    replying_to_id: Optional[str] = None,
    top_level_only: bool = False,
) -> AsyncGenerator[str, None]:
    """Yield one SSE frame per matching change, with keepalive comments while idle"""
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    # Notes are written from worker threads; hand notifications to this loop
    def on_change():
        loop.call_soon_threadsafe(queue.put_nowait, None)

    if replying_to_id:
        predicate = replies_to(replying_to_id)
    elif top_level_only:
        predicate = top_level
    else:
        predicate = None
    subscription = context.feed.subscribe(predicate, on_change)
    logger.info("Change feed client connected (replying_to_id=%s)", replying_to_id)

    try:
        yield ": connected\n\n"
        while True:
            if await request.is_disconnected():
                break
            try:
                await asyncio.wait_for(queue.get(), timeout=KEEPALIVE_SECONDS)
            except asyncio.TimeoutError:
                yield ": keepalive\n\n"
                continue
            yield f"event: change\ndata: {json.dumps({'table': 'notes'})}\n\n"
    except asyncio.CancelledError:
        logger.info("Change feed client disconnected")
        raise
    finally:
        subscription.unsubscribe()


@router.get("/notes/changes")
async def notes_changes(
    request: Request,
    replying_to_id: Optional[str] = None,
    top_level_only: bool = False,
    context: BoardContext = Depends(get_context),
):
    """
    Server-Sent Events stream of changes to the notes table

    Without parameters every insert, update and delete is reported. With
    replying_to_id only changes to that note's replies are reported, and with
    top_level_only only changes to notes on the board itself.
    """
    return StreamingResponse(
        change_events(request, context, replying_to_id, top_level_only),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
