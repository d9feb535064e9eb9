"""Services package"""
from swipe_ai.services.browser import BrowserHandle
from swipe_ai.services.page_snapshotter import PageSnapshot, PageSnapshotter, SnapshotOptions
from swipe_ai.services.llm_provider import (
    AnthropicTextProvider,
    GeminiVisionProvider,
    get_text_provider,
    get_vision_provider,
)

__all__ = [
    "BrowserHandle",
    "PageSnapshot",
    "PageSnapshotter",
    "SnapshotOptions",
    "AnthropicTextProvider",
    "GeminiVisionProvider",
    "get_text_provider",
    "get_vision_provider",
]
