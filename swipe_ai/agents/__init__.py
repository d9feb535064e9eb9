"""Generation stages and the pipeline that runs them"""
from swipe_ai.agents.base import BaseStage
from swipe_ai.agents.product_analyzer import ProductAnalyzer
from swipe_ai.agents.landing_analyzer import LandingAnalyzer
from swipe_ai.agents.cro_architect import CROArchitect
from swipe_ai.agents.html_builder import HTMLBuilder
from swipe_ai.agents.swipe_agent import SwipeAgent, SwipePhase

__all__ = [
    "BaseStage",
    "ProductAnalyzer",
    "LandingAnalyzer",
    "CROArchitect",
    "HTMLBuilder",
    "SwipeAgent",
    "SwipePhase",
]
