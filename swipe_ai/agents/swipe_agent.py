"""Swipe Agent - orchestrates the four stages into one pipeline run"""
import asyncio
from enum import Enum
from typing import Optional
import logging
import time

from swipe_ai.agents.cro_architect import CROArchitect
from swipe_ai.agents.html_builder import HTMLBuilder
from swipe_ai.agents.landing_analyzer import LandingAnalyzer
from swipe_ai.agents.models import (
    LandingAnalysis,
    ProductAnalysis,
    SwipeInput,
    SwipeResult,
)
from swipe_ai.agents.product_analyzer import ProductAnalyzer
from swipe_ai.services.page_snapshotter import PageSnapshotter
from swipe_ai.streaming.events import ProgressChannel

logger = logging.getLogger(__name__)


class SwipePhase(str, Enum):
    """Named phases reported on the progress channel"""
    STARTING = "starting"
    PHASE1 = "phase1"
    PRODUCT_ANALYSIS = "product_analysis"
    LANDING_ANALYSIS = "landing_analysis"
    PHASE1_COMPLETE = "phase1_complete"
    PHASE2 = "phase2"
    CRO_PLANNING = "cro_planning"
    PHASE2_COMPLETE = "phase2_complete"
    PHASE3 = "phase3"
    HTML_GENERATION = "html_generation"
    COMPLETE = "complete"


class SwipeAgent:
    """
    Swipe Agent: turns a competitor URL plus a product brief into a new page.

    Execution Phases:
    1. Parallel analysis: Product Analyzer || (capture -> Landing Analyzer)
    2. CRO planning: needs both phase 1 results
    3. HTML generation: needs the CRO plan and the source design system

    Percentages on the progress channel are fixed checkpoints, not measured
    work. Any stage failure aborts the run and propagates; there is no
    partial result.
    """

    def __init__(
        self,
        snapshotter: PageSnapshotter,
        product_analyzer: ProductAnalyzer,
        landing_analyzer: LandingAnalyzer,
        cro_architect: CROArchitect,
        html_builder: HTMLBuilder,
    ):
        self.snapshotter = snapshotter
        self.product_analyzer = product_analyzer
        self.landing_analyzer = landing_analyzer
        self.cro_architect = cro_architect
        self.html_builder = html_builder

    @classmethod
    def from_settings(cls, snapshotter: PageSnapshotter, settings) -> "SwipeAgent":
        """Wire the stages to the configured providers"""
        from swipe_ai.services.llm_provider import get_text_provider, get_vision_provider

        text_provider = get_text_provider()
        vision_provider = get_vision_provider()

        return cls(
            snapshotter=snapshotter,
            product_analyzer=ProductAnalyzer(
                text_provider,
                max_tokens=settings.PRODUCT_ANALYZER_MAX_TOKENS,
                temperature=settings.PRODUCT_ANALYZER_TEMPERATURE,
            ),
            landing_analyzer=LandingAnalyzer(
                vision_provider,
                max_tokens=settings.LANDING_ANALYZER_MAX_TOKENS,
                temperature=settings.LANDING_ANALYZER_TEMPERATURE,
                html_budget=settings.LANDING_HTML_BUDGET,
                css_limit=settings.DESIGN_REFERENCE_CSS_LIMIT,
                preview_limit=settings.DESIGN_REFERENCE_PREVIEW_LIMIT,
            ),
            cro_architect=CROArchitect(
                text_provider,
                max_tokens=settings.CRO_ARCHITECT_MAX_TOKENS,
                temperature=settings.CRO_ARCHITECT_TEMPERATURE,
            ),
            html_builder=HTMLBuilder(
                text_provider,
                max_tokens=settings.HTML_BUILDER_MAX_TOKENS,
                temperature=settings.HTML_BUILDER_TEMPERATURE,
                body_copy_limit=settings.BODY_COPY_LIMIT,
            ),
        )

    async def execute(
        self,
        swipe_input: SwipeInput,
        progress: Optional[ProgressChannel] = None,
    ) -> SwipeResult:
        """Run the whole pipeline for one request"""

        # Helper to emit progress
        async def emit(phase: SwipePhase, message: str, percent: int):
            if progress:
                await progress.progress(phase.value, message, percent)

        start = time.time()
        logger.info(f"Swipe started: {swipe_input.url} -> '{swipe_input.productName}'")

        try:
            await emit(SwipePhase.STARTING, "Initializing agentic swipe pipeline...", 0)

            # ========== Phase 1: Parallel analysis ==========
            await emit(SwipePhase.PHASE1, "Phase 1: Deep parallel analysis starting...", 5)

            product_analysis, landing_analysis = await asyncio.gather(
                self._analyze_product(swipe_input, emit),
                self._analyze_landing(swipe_input.url, emit),
            )

            await emit(SwipePhase.PHASE1_COMPLETE, "Phase 1 complete: Product & landing analyzed", 30)

            # ========== Phase 2: CRO planning ==========
            await emit(SwipePhase.PHASE2, "Phase 2: Designing CRO strategy...", 35)
            await emit(SwipePhase.CRO_PLANNING, "Designing CRO-optimized page structure...", 50)

            cro_plan = await self.cro_architect.run(product_analysis, landing_analysis, swipe_input)

            await emit(SwipePhase.CRO_PLANNING, "CRO strategy complete", 70)
            await emit(SwipePhase.PHASE2_COMPLETE, "Phase 2 complete: CRO blueprint ready", 70)

            # ========== Phase 3: HTML generation ==========
            await emit(SwipePhase.PHASE3, "Phase 3: Building HTML landing page...", 72)
            await emit(SwipePhase.HTML_GENERATION, "Building production-ready HTML landing page...", 75)

            html = await self.html_builder.run(cro_plan, landing_analysis.design_system)

            await emit(SwipePhase.HTML_GENERATION, "HTML generation complete", 95)
            await emit(SwipePhase.COMPLETE, "Agentic swipe complete!", 100)

        except Exception as e:
            logger.error(f"Swipe failed after {time.time() - start:.1f}s: {type(e).__name__}: {e}")
            raise

        logger.info(f"Swipe complete in {time.time() - start:.1f}s ({len(html)} chars of HTML)")

        return SwipeResult(
            html=html,
            productAnalysis=product_analysis,
            landingAnalysis=landing_analysis,
            croPlan=cro_plan,
        )

    async def _analyze_product(self, swipe_input: SwipeInput, emit) -> ProductAnalysis:
        await emit(SwipePhase.PRODUCT_ANALYSIS, "Analyzing product positioning and market strategy...", 10)
        analysis = await self.product_analyzer.run(swipe_input)
        await emit(SwipePhase.PRODUCT_ANALYSIS, "Product analysis complete", 25)
        return analysis

    async def _analyze_landing(self, url: str, emit) -> LandingAnalysis:
        await emit(SwipePhase.LANDING_ANALYSIS, "Capturing landing page with headless browser...", 10)
        snapshot = await self.snapshotter.capture(url)

        await emit(
            SwipePhase.LANDING_ANALYSIS,
            "Analyzing page structure and CRO patterns with AI Vision...",
            20,
        )
        analysis = await self.landing_analyzer.run(snapshot)
        await emit(SwipePhase.LANDING_ANALYSIS, "Landing analysis complete", 25)
        return analysis

