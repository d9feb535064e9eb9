"""Streaming package for SSE progress updates"""
from swipe_ai.streaming.events import (
    EventType,
    ProgressEvent,
    ProgressChannel,
    ChannelSubscription,
)

__all__ = [
    "EventType",
    "ProgressEvent",
    "ProgressChannel",
    "ChannelSubscription",
]
