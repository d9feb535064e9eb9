"""Exception types raised by the swipe pipeline"""
from typing import Optional


class SwipeError(Exception):
    """Base class for every pipeline failure"""


class ConfigurationError(SwipeError):
    """A required setting (usually an API key) is missing"""


class ModelAPIError(SwipeError):
    """Transport failure or non-2xx response from a model provider"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SnapshotError(SwipeError):
    """The headless browser could not capture the page"""


class MalformedOutputError(SwipeError):
    """Model output could not be turned into the expected value"""


class OutputValidationError(MalformedOutputError):
    """Model output parsed as JSON but did not match the stage schema"""
