"""
Landing Analyzer - section-by-section blueprint of the competitor page.

Vision stage: the full-page screenshot is mandatory, the HTML is budgeted
context next to it.
"""
import base64
import logging

from swipe_ai.agents.base import BaseStage
from swipe_ai.agents.models import LandingAnalysis
from swipe_ai.errors import SnapshotError
from swipe_ai.services.page_snapshotter import PageSnapshot
from swipe_ai.utils.content_budget import extract_design_reference, truncate_html

logger = logging.getLogger(__name__)


class LandingAnalyzer(BaseStage[LandingAnalysis]):
    """
    Receives:
    - PageSnapshot (screenshot + self-contained HTML)

    Produces:
    - LandingAnalysis with contiguous section indices, design system,
      conversion elements, UX notes and the page's language
    """

    output_model = LandingAnalysis

    def __init__(
        self,
        provider,
        max_tokens: int = 8192,
        temperature: float = 0.3,
        html_budget: int = 30000,
        css_limit: int = 15000,
        preview_limit: int = 5000,
    ):
        super().__init__("LandingAnalyzer", provider, max_tokens, temperature)
        self.html_budget = html_budget
        self.css_limit = css_limit
        self.preview_limit = preview_limit

    def get_system_prompt(self) -> str:
        return """You are a CRO (Conversion Rate Optimization) analyst and UX researcher.

## Your Task
Reverse-engineer a competitor landing page: its section structure, its design system and the
conversion patterns it relies on.

You receive:
1. A FULL-PAGE SCREENSHOT of the landing page
2. The page HTML (possibly truncated, or reduced to its CSS plus a body preview)

Use the screenshot for layout, colors and visual hierarchy. Use the HTML for exact copy,
tag structure and class names.

## Output Format
Return a single JSON object with exactly this shape:

```json
{
  "page_type": "sales_page|lead_gen|webinar_reg|ecommerce|squeeze_page|long_form_sales|vsl_page|quiz_funnel",
  "estimated_word_count": 1200,
  "scroll_depth_sections": 9,
  "detected_language": "ISO 639-1 code of the page copy, e.g. en, it, es, de, fr, pt",
  "sections": [
    {
      "section_index": 0,
      "section_type": "hero|nav|social_proof_bar|features|benefits|how_it_works|testimonials|faq|pricing|guarantee|urgency|cta_block|comparison|story|problem_agitation|solution_reveal|credibility|video_section|image_gallery|stats_counter|risk_reversal|bonus_stack|order_form|footer",
      "headline": "headline text if present",
      "subheadline": "subheadline if present",
      "body_summary": "short summary of the body content",
      "cta_text": "CTA button text if present",
      "cro_patterns": ["pattern1", "pattern2"],
      "effectiveness_score": 7,
      "position": "above_fold|below_fold",
      "estimated_height_vh": 100,
      "visual_elements": ["images", "icons", "video", "animation", "badges"],
      "html_tag_structure": "main wrapper tag and key classes"
    }
  ],
  "design_system": {
    "primary_color": "#hex",
    "secondary_color": "#hex",
    "accent_color": "#hex",
    "background_color": "#hex",
    "text_color": "#hex",
    "cta_color": "#hex",
    "font_style": "serif|sans-serif|mixed",
    "heading_style": "bold_uppercase|normal|italic|gradient",
    "spacing_density": "tight|normal|spacious",
    "visual_style": "minimal|rich|dark|light|gradient|corporate|startup|health|luxury",
    "border_radius": "none|small|medium|large|full",
    "shadow_usage": "none|subtle|prominent",
    "image_style": "photos|illustrations|icons|mixed|none"
  },
  "conversion_elements": {
    "total_ctas": 4,
    "cta_positions": ["hero", "mid-page", "bottom"],
    "cta_styles": "button color and shape",
    "social_proof_types": ["testimonials", "logos", "stats", "reviews", "media_mentions"],
    "urgency_elements": ["countdown", "limited_stock", "deadline", "spots_left"],
    "trust_signals": ["guarantee_badge", "ssl", "payment_icons", "certifications", "media_logos"],
    "lead_capture": "form type if present"
  },
  "ux_analysis": {
    "mobile_readiness": "good|moderate|poor",
    "reading_flow": "how the eye moves through the page",
    "attention_hierarchy": "what grabs attention first, second, third",
    "friction_points": ["UX issues"],
    "strengths": ["what works"],
    "weaknesses": ["what could improve"]
  },
  "content_strategy": {
    "narrative_arc": "the story flow",
    "emotional_journey": ["curiosity", "pain", "hope", "desire", "confidence", "action"],
    "proof_density": "low|medium|high",
    "copy_style": "long_form|short_punchy|mixed|storytelling|data_driven"
  }
}
```

## Rules
- Return ONLY the JSON object. No markdown.
- List EVERY visible section, top to bottom, with section_index 0, 1, 2, ...
- Read colors off the screenshot as hex values.
- Score effectiveness honestly (1-10); not everything is a 10.
- Report the patterns that are actually there."""

    def budget_html(self, html: str) -> str:
        """Truncated document, or the design reference when the head alone blows the budget"""
        truncated = truncate_html(html, self.html_budget)
        if len(truncated) <= self.html_budget:
            return truncated

        logger.info(
            f"{self.name}: truncated HTML still {len(truncated)} chars "
            f"(budget {self.html_budget}), sending design reference instead"
        )
        return extract_design_reference(html, self.css_limit, self.preview_limit)

    def build_user_message(self, snapshot: PageSnapshot) -> str:
        return (
            f"Landing Page URL: {snapshot.url}\n"
            f"Page Title: {snapshot.title}\n"
            f"HTML Size: {len(snapshot.html)} characters\n"
            f"\n"
            f"Below is the HTML content (may be truncated). "
            f"Use it together with the screenshot for analysis.\n"
            f"\n"
            f"{self.budget_html(snapshot.html)}"
        )

    async def run(self, snapshot: PageSnapshot) -> LandingAnalysis:
        if not snapshot.screenshot:
            raise SnapshotError(f"No screenshot captured for {snapshot.url}; landing analysis needs one")

        logger.info(f"{self.name}: analyzing {snapshot.url}")
        text = await self._generate(
            self.build_user_message(snapshot),
            image_base64=base64.b64encode(snapshot.screenshot).decode("ascii"),
            mime_type=snapshot.screenshot_mime_type,
        )
        analysis = self._decode(text)
        logger.info(
            f"{self.name}: {analysis.page_type or 'unknown'} page, "
            f"{len(analysis.sections)} sections, language={analysis.detected_language or '?'}"
        )
        return analysis
