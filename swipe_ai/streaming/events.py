"""Progress events and the channel that carries them from the pipeline to transports"""
from enum import Enum
from typing import Any, AsyncIterator, Dict, List, Optional
from pydantic import BaseModel
import asyncio
import json
import logging

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Types of pipeline events"""
    PROGRESS = "progress"     # Phase milestone
    RESULT = "result"         # Terminal: final SwipeResult
    ERROR = "error"           # Terminal: pipeline failed
    KEEPALIVE = "keepalive"   # Transport-level ping, never terminal


TERMINAL_EVENTS = (EventType.RESULT, EventType.ERROR)


class ProgressEvent(BaseModel):
    """A single event published on a ProgressChannel"""
    type: EventType
    phase: Optional[str] = None
    message: str = ""
    progress: Optional[int] = None
    data: Optional[Dict[str, Any]] = None

    @property
    def is_terminal(self) -> bool:
        return self.type in TERMINAL_EVENTS

    def to_payload(self) -> Dict[str, Any]:
        """Wire shape sent to clients"""
        if self.type == EventType.PROGRESS:
            return {
                "type": "progress",
                "phase": self.phase,
                "message": self.message,
                "progress": self.progress,
            }
        if self.type == EventType.RESULT:
            return {"type": "result", "success": True, **(self.data or {})}
        if self.type == EventType.ERROR:
            return {"type": "error", "error": self.message}
        return {"type": self.type.value, "message": self.message}

    def to_sse(self) -> str:
        """Format as Server-Sent Event string"""
        if self.type == EventType.KEEPALIVE:
            return f": keepalive {self.message}\n\n"
        return f"data: {json.dumps(self.to_payload())}\n\n"


class ProgressChannel:
    """
    Publish/subscribe channel for pipeline progress.

    The orchestrator publishes; transports subscribe independently. Every
    subscriber gets its own queue and sees events in emission order. The
    channel closes itself after the first terminal event (result or error);
    anything published after that is dropped.

    Usage:
        channel = ProgressChannel()
        events = channel.subscribe()

        await channel.progress("phase1", "Phase 1 starting...", 5)
        await channel.result({...})

        async for event in events:
            yield event.to_sse()
    """

    def __init__(self):
        self._subscribers: List[asyncio.Queue] = []
        self._closed = False

    def subscribe(self) -> "ChannelSubscription":
        """Register a new subscriber; it only sees events published from now on."""
        queue: asyncio.Queue = asyncio.Queue()
        self._subscribers.append(queue)
        return ChannelSubscription(queue)

    async def publish(self, event: ProgressEvent):
        """Deliver an event to every subscriber"""
        if self._closed:
            logger.debug(f"Dropping {event.type.value} event on closed channel")
            return
        for queue in self._subscribers:
            await queue.put(event)
        if event.is_terminal:
            self._closed = True

    async def progress(self, phase: str, message: str, progress: int):
        """Emit a phase milestone"""
        await self.publish(ProgressEvent(
            type=EventType.PROGRESS,
            phase=phase,
            message=message,
            progress=progress,
        ))

    async def result(self, data: Dict[str, Any]):
        """Emit the terminal success event"""
        await self.publish(ProgressEvent(type=EventType.RESULT, message="complete", data=data))

    async def error(self, message: str):
        """Emit the terminal error event"""
        await self.publish(ProgressEvent(type=EventType.ERROR, message=message))

    def close(self):
        """Close the channel (no more events)"""
        self._closed = True

    @property
    def is_closed(self) -> bool:
        """Check if the channel is closed"""
        return self._closed


class ChannelSubscription:
    """Async iterator over one subscriber's queue; stops after a terminal event."""

    def __init__(self, queue: asyncio.Queue):
        self.queue = queue
        self._done = False

    async def get(self, timeout: Optional[float] = None) -> ProgressEvent:
        """Next event; raises asyncio.TimeoutError when timeout elapses first."""
        if timeout is None:
            event = await self.queue.get()
        else:
            event = await asyncio.wait_for(self.queue.get(), timeout=timeout)
        if event.is_terminal:
            self._done = True
        return event

    @property
    def done(self) -> bool:
        return self._done

    def __aiter__(self) -> AsyncIterator[ProgressEvent]:
        return self

    async def __anext__(self) -> ProgressEvent:
        if self._done:
            raise StopAsyncIteration
        return await self.get()
