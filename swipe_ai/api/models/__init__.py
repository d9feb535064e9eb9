"""API models package"""
from swipe_ai.api.models.requests import (
    ErrorResponse,
    SwipeRequest,
    SwipeResponse,
)

__all__ = [
    "ErrorResponse",
    "SwipeRequest",
    "SwipeResponse",
]
