"""Swipe API routes with SSE streaming"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sse_starlette.sse import EventSourceResponse, ServerSentEvent
import asyncio
import json
import logging
from typing import AsyncGenerator, Set

from swipe_ai.agents.models import SwipeInput
from swipe_ai.agents.swipe_agent import SwipeAgent
from swipe_ai.api.models.requests import ErrorResponse, SwipeRequest, SwipeResponse
from swipe_ai.config import settings
from swipe_ai.streaming.events import ProgressChannel

logger = logging.getLogger(__name__)

router = APIRouter()

# Runs outlive their stream when the client disconnects; keep a reference
_running: Set[asyncio.Task] = set()

# Keepalive comments come from stream_swipe; sse-starlette's own ping stays out of the way
SSE_PING_INTERVAL = 24 * 60 * 60


def get_swipe_agent(request: Request) -> SwipeAgent:
    """The pipeline instance created in the application lifespan"""
    return request.app.state.swipe_agent


def _missing_fields_response(request: SwipeRequest):
    missing = request.missing_fields()
    if not missing:
        return None
    logger.warning(f"Rejected swipe request, missing: {', '.join(missing)}")
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error="Missing required fields: url, productName, productDescription"
        ).model_dump(),
    )


def _error_message(error: Exception) -> str:
    return str(error) or type(error).__name__


async def stream_swipe(
    swipe_input: SwipeInput,
    agent: SwipeAgent,
    keepalive: float = 15.0,
) -> AsyncGenerator[ServerSentEvent, None]:
    """Generate SSE events for one pipeline run"""
    channel = ProgressChannel()
    events = channel.subscribe()

    async def run_swipe():
        """Run the pipeline in background and publish its terminal event"""
        try:
            result = await agent.execute(swipe_input, progress=channel)
            await channel.result(result.model_dump(mode="json"))
        except Exception as e:
            logger.error(f"Swipe pipeline error: {e}", exc_info=True)
            await channel.error(_error_message(e))

    task = asyncio.create_task(run_swipe())
    _running.add(task)
    task.add_done_callback(_running.discard)

    try:
        while True:
            try:
                event = await events.get(timeout=keepalive)
            except asyncio.TimeoutError:
                logger.debug("Sending keepalive ping")
                yield ServerSentEvent(comment="keepalive")
                continue

            yield ServerSentEvent(data=json.dumps(event.to_payload()))

            if event.is_terminal:
                logger.info(f"Stream ending with: {event.type.value}")
                break
    finally:
        if not task.done():
            # The run keeps going; its result is dropped on the closed stream
            logger.info("Client disconnected before the swipe finished")


@router.post("/swipe")
async def swipe_streaming(
    request: SwipeRequest,
    agent: SwipeAgent = Depends(get_swipe_agent),
):
    """
    Swipe a competitor landing page for a new product, streaming progress.

    **SSE Response** (data-only events, JSON payloads):
    ```
    data: {"type": "progress", "phase": "phase1", "message": "...", "progress": 5}

    data: {"type": "result", "success": true, "html": "<!DOCTYPE html>...",
           "productAnalysis": {...}, "landingAnalysis": {...}, "croPlan": {...}}
    ```
    or, on failure, a single `{"type": "error", "error": "..."}` event.
    """
    invalid = _missing_fields_response(request)
    if invalid is not None:
        return invalid

    swipe_input = request.to_input()
    logger.info(f"Swipe request: {swipe_input.url} for '{swipe_input.productName}'")

    return EventSourceResponse(
        stream_swipe(swipe_input, agent, keepalive=settings.SSE_KEEPALIVE_SECONDS),
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        ping=SSE_PING_INTERVAL,
    )


@router.post("/swipe/sync", response_model=SwipeResponse)
async def swipe_sync(
    request: SwipeRequest,
    agent: SwipeAgent = Depends(get_swipe_agent),
):
    """Run the same pipeline without streaming and return the result"""
    invalid = _missing_fields_response(request)
    if invalid is not None:
        return invalid

    try:
        result = await agent.execute(request.to_input())
    except Exception as e:
        logger.error(f"Swipe pipeline error: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error=_error_message(e)).model_dump(),
        )

    return SwipeResponse(success=True, **result.model_dump(mode="json"))
