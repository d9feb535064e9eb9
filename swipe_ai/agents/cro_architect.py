"""
CRO Architect - designs the new page's section blueprint and writes its copy.

Inherits the source page's design system, restructures its sections for the
new product.
"""
import json
import logging

from swipe_ai.agents.base import BaseStage
from swipe_ai.agents.models import CROPlan, LandingAnalysis, ProductAnalysis, SwipeInput

logger = logging.getLogger(__name__)


class CROArchitect(BaseStage[CROPlan]):
    """
    Receives:
    - ProductAnalysis (Product Analyzer output)
    - LandingAnalysis (Landing Analyzer output)
    - The raw product fields from the request

    Produces:
    - CROPlan with at least one section, indices contiguous from 0
    """

    output_model = CROPlan

    def __init__(self, provider, max_tokens: int = 12000, temperature: float = 0.5):
        super().__init__("CROArchitect", provider, max_tokens, temperature)

    def get_system_prompt(self) -> str:
        return """You are a senior CRO architect and funnel strategist who has built many 7-figure landing pages.

## Your Task
You receive a product analysis and an analysis of a competitor landing page. Design the
section-by-section blueprint of a NEW landing page that:
- Keeps the DESIGN AESTHETIC of the analyzed page (colors, fonts, spacing, visual style)
- RESTRUCTURES the sections for the new product: add, remove and reorder freely; the new
  page does not need the same number or order of sections as the source
- Contains finished copy written for this product

## Output Format
Return a single JSON object with exactly this shape:

```json
{
  "strategy_summary": "2-3 sentence overview of the approach",
  "target_awareness_approach": "how the page meets the target's awareness level",
  "primary_framework": "PAS|AIDA|BAB|4Ps|Star_Story_Solution",
  "estimated_conversion_lift": "expected improvement over a generic page, with reasoning",
  "sections": [
    {
      "section_index": 0,
      "section_type": "hero|social_proof_bar|problem_agitation|solution_reveal|benefits|how_it_works|testimonials|credibility|comparison|faq|guarantee|pricing|urgency|cta_block|bonus_stack|risk_reversal|story|stats_counter|video_section|footer",
      "source_action": "keep_modified|new|inspired_by_section_N",
      "rationale": "why this section is here, in this position",
      "content": {
        "headline": "final headline",
        "subheadline": "subheadline if any",
        "body_copy": "complete body copy; HTML tags allowed: <p>, <strong>, <em>, <br>, <ul>, <li>",
        "cta_text": "CTA button text if the section has one",
        "cta_secondary": "secondary CTA if any",
        "list_items": ["bullet 1", "bullet 2"],
        "social_proof_items": [{"quote": "testimonial", "author": "name", "title": "role or context"}],
        "faq_items": [{"question": "q", "answer": "a"}],
        "stats": [{"number": "100K+", "label": "Happy Customers"}],
        "image_description": "what the visual here should show",
        "badge_text": "badge or label text"
      },
      "cro_elements": ["urgency", "scarcity", "social_proof", "authority", "guarantee"],
      "mobile_notes": "mobile-specific considerations"
    }
  ],
  "above_fold_strategy": {
    "primary_hook": "the hook visitors see first",
    "value_proposition": "clear value proposition",
    "visual_anchor": "visual element that anchors the hero",
    "micro_commitment": "first small action asked of the visitor"
  },
  "design_directives": {
    "inherit_from_source": ["colors", "spacing", "font_style", "border_radius"],
    "modify": {"cta_color": "reason for any change"},
    "overall_feel": "target look and feel"
  },
  "copy_tone": {
    "voice": "voice used throughout",
    "language": "en|it|es|de|fr|pt",
    "formality": "casual|professional|urgent|empathetic",
    "key_phrases_to_repeat": ["phrase 1", "phrase 2"]
  }
}
```

## Rules
- Return ONLY the JSON object. No markdown.
- Write ALL copy in the language given in the request, and set copy_tone.language to it.
- Every section needs a clear rationale for its position.
- Body copy is complete and ready to publish, never placeholder text.
- Headlines are compelling and specific to this product.
- At minimum include: hero, problem/agitation, solution, benefits, social proof, guarantee, final CTA.
- Social proof is realistic and on-brand (fictional but believable).
- FAQs answer the real objections from the product analysis."""

    def resolve_language(self, landing: LandingAnalysis, swipe_input: SwipeInput) -> str:
        """Explicit request language wins over the language detected on the source page"""
        return swipe_input.language or landing.detected_language or "en"

    def build_user_message(
        self,
        product: ProductAnalysis,
        landing: LandingAnalysis,
        swipe_input: SwipeInput,
    ) -> str:
        details = [
            f"- Name: {swipe_input.productName}",
            f"- Description: {swipe_input.productDescription}",
        ]
        if swipe_input.priceInfo:
            details.append(f"- Price: {swipe_input.priceInfo}")
        if swipe_input.target:
            details.append(f"- Target: {swipe_input.target}")
        if swipe_input.customInstructions:
            details.append(f"- Custom Instructions: {swipe_input.customInstructions}")

        product_details = "\n".join(details)
        language = self.resolve_language(landing, swipe_input)
        awareness = product.target_avatar.awareness_level.value

        return f"""Create an optimized CRO blueprint for a new landing page.

## PRODUCT INTELLIGENCE (from Product Analyzer):
{json.dumps(product.model_dump(mode="json"), indent=2, ensure_ascii=False)}

## SOURCE LANDING PAGE ANALYSIS (from Landing Analyzer):
{json.dumps(landing.model_dump(mode="json"), indent=2, ensure_ascii=False)}

## PRODUCT DETAILS:
{product_details}

## COPY LANGUAGE: {language}

Create the section-by-section blueprint that:
1. INHERITS the visual design system from the source landing
2. RESTRUCTURES sections for maximum conversion for THIS product
3. WRITES complete copy for every section (no placeholder text)
4. Addresses the target's awareness level: {awareness}
5. Handles the top objections identified in the product analysis"""

    async def run(
        self,
        product: ProductAnalysis,
        landing: LandingAnalysis,
        swipe_input: SwipeInput,
    ) -> CROPlan:
        logger.info(
            f"{self.name}: planning from {len(landing.sections)} source sections "
            f"(language={self.resolve_language(landing, swipe_input)})"
        )
        text = await self._generate(self.build_user_message(product, landing, swipe_input))
        plan = self._decode(text)
        logger.info(
            f"{self.name}: {len(plan.sections)} sections, framework={plan.primary_framework or '?'}"
        )
        return plan
