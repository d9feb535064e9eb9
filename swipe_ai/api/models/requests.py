"""Request and response models for API endpoints"""
from pydantic import BaseModel
from typing import Any, Dict, List, Optional

from swipe_ai.agents.models import SwipeInput

REQUIRED_FIELDS = ("url", "productName", "productDescription")


class SwipeRequest(BaseModel):
    """Request to swipe a landing page for a new product"""
    url: Optional[str] = None
    productName: Optional[str] = None
    productDescription: Optional[str] = None
    target: Optional[str] = None           # Target audience notes
    priceInfo: Optional[str] = None
    customInstructions: Optional[str] = None
    language: Optional[str] = None         # Forces the copy language

    class Config:
        extra = "ignore"

    def missing_fields(self) -> List[str]:
        return [name for name in REQUIRED_FIELDS if not (getattr(self, name) or "").strip()]

    def to_input(self) -> SwipeInput:
        """Build the pipeline input; assumes missing_fields() is empty"""
        url = self.url.strip()
        if not url.lower().startswith(("http://", "https://")):
            url = f"https://{url}"

        return SwipeInput(
            url=url,
            productName=self.productName.strip(),
            productDescription=self.productDescription.strip(),
            target=self.target or None,
            priceInfo=self.priceInfo or None,
            customInstructions=self.customInstructions or None,
            language=self.language or None,
        )


class SwipeResponse(BaseModel):
    """Response from the non-streaming swipe endpoint"""
    success: bool
    html: str
    productAnalysis: Dict[str, Any]
    landingAnalysis: Dict[str, Any]
    croPlan: Dict[str, Any]


class ErrorResponse(BaseModel):
    """Error body returned with 4xx/5xx"""
    success: bool = False
    error: str
