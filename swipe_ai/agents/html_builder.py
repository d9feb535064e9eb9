"""
HTML Builder - renders the CRO plan as one self-contained HTML page.

Unlike the other stages the answer is HTML, not JSON. The builder always
returns a full document: fences are stripped, a bare fragment is wrapped in
boilerplate and a missing doctype is added.
"""
import html as html_lib
import json
import logging
import re
from typing import Any, Dict

from swipe_ai.agents.base import BaseStage
from swipe_ai.agents.models import CROPlan, DesignSystem
from swipe_ai.errors import MalformedOutputError

logger = logging.getLogger(__name__)

TAILWIND_CDN = "https://cdn.tailwindcss.com"

_FENCED_HTML = re.compile(r"```(?:html)?\s*([\s\S]*?)```", re.IGNORECASE)
# Output cut off at max_tokens leaves the opening fence without its close
_OPEN_FENCE = re.compile(r"```[\w-]*[ \t]*(?:\n|$)")
_HTML_ROOT = re.compile(r"<html[\s>]", re.IGNORECASE)
_DOCTYPE = re.compile(r"<!doctype", re.IGNORECASE)

DOCUMENT_TEMPLATE = """<!DOCTYPE html>
<html lang="{lang}">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <script src="{tailwind}"></script>
  <title>{title}</title>
</head>
<body>
{body}
</body>
</html>"""


class HTMLBuilder(BaseStage):
    """
    Receives:
    - CROPlan (CRO Architect output)
    - DesignSystem (from the Landing Analyzer)

    Produces:
    - A complete HTML document string starting with <!DOCTYPE html>
    """

    def __init__(
        self,
        provider,
        max_tokens: int = 16000,
        temperature: float = 0.6,
        body_copy_limit: int = 800,
    ):
        super().__init__("HTMLBuilder", provider, max_tokens, temperature)
        self.body_copy_limit = body_copy_limit

    def get_system_prompt(self) -> str:
        return f"""You are a frontend developer who builds high-converting landing pages.

## Your Task
Turn a CRO blueprint and a design system into ONE complete, production-ready HTML page.

## Requirements

### Design
- Use the design system's palette, font choices and spacing.
- Match its level of polish (shadows, gradients, rounded corners).
- Dark source theme stays dark, light stays light.

### Structure
- Follow the blueprint EXACTLY: every section, in order, with all its copy and CTAs.
- Add the CRO elements each section asks for.

### Technical
- Single self-contained HTML file.
- Tailwind CSS via CDN: <script src="{TAILWIND_CDN}"></script>
- Google Fonts via CDN if the design calls for it.
- Any extra CSS goes inline or in <style> tags; no other external stylesheets.
- Mark each major section with a comment: <!-- SECTION: section_type -->
- Each section is a standalone <section> element with a unique id.
- Responsive and mobile-first, semantic HTML5.
- Images are placeholders: a colored background div with descriptive alt text.
- CTA buttons have hover effects and comfortable sizing.
- Smooth scrolling for anchor links.

### Quality
- Clear typography hierarchy (h1 > h2 > h3 > p), consistent spacing, readable contrast.
- Subtle transitions where they help.
- Form inputs are styled.

### Special Elements
- Sticky mobile CTA bar if the blueprint asks for one
- FAQ accordion with <details>/<summary>
- Testimonial cards with avatar placeholders
- Benefit icons in Unicode or inline SVG
- Crossed-out vs current price when the blueprint has pricing
- Guarantee badge with border and icon
- Star ratings with Unicode stars

Return ONLY the HTML document, starting with <!DOCTYPE html>.
No markdown, no code fences, no commentary."""

    def compact_plan(self, plan: CROPlan) -> Dict[str, Any]:
        """Plan fields the builder needs, with long body copy cut"""
        sections = []
        for section in plan.sections:
            data = section.model_dump(mode="json")
            body_copy = data["content"].get("body_copy") or ""
            if len(body_copy) > self.body_copy_limit:
                data["content"]["body_copy"] = body_copy[:self.body_copy_limit] + "..."
            sections.append(data)

        return {
            "strategy_summary": plan.strategy_summary,
            "primary_framework": plan.primary_framework,
            "sections": sections,
            "above_fold_strategy": plan.above_fold_strategy.model_dump(mode="json"),
            "design_directives": plan.design_directives.model_dump(mode="json"),
            "copy_tone": plan.copy_tone.model_dump(mode="json"),
        }

    def build_user_message(self, plan: CROPlan, design: DesignSystem) -> str:
        return f"""Build a complete, production-ready HTML landing page.

## CRO BLUEPRINT (follow this EXACTLY for structure and content):
{json.dumps(self.compact_plan(plan), indent=2, ensure_ascii=False)}

## DESIGN SYSTEM:
Colors: primary {design.primary_color}, secondary {design.secondary_color}, accent {design.accent_color}, bg {design.background_color}, text {design.text_color}, CTA {design.cta_color}
Style: {design.visual_style}, {design.font_style} fonts, {design.heading_style} headings, {design.spacing_density} spacing
Corners: {design.border_radius}, shadows: {design.shadow_usage}, images: {design.image_style}

Build the complete HTML page. Requirements:
- Use Tailwind CSS via CDN
- Implement EVERY section from the blueprint with all copy
- Mark sections with <!-- SECTION: type --> comments
- Language: {plan.copy_tone.language or 'en'}
- Responsive, mobile-first, professional
- Use placeholder images with colored backgrounds and descriptive alt text"""

    def finalize_document(self, text: str, plan: CROPlan) -> str:
        """
        Turn raw model output into a full document.

        Raises:
            MalformedOutputError: nothing usable left after stripping fences
        """
        html = (text or "").strip()
        fenced = _FENCED_HTML.search(html)
        if fenced:
            html = fenced.group(1).strip()
        else:
            if html.endswith("```"):
                html = html[:-3].rstrip()
            opening = _OPEN_FENCE.search(html)
            if opening:
                logger.warning(f"{self.name}: unterminated code fence, output was probably cut off")
                html = html[opening.end():].strip()

        if not html:
            raise MalformedOutputError(f"{self.name} returned no HTML")

        doctype = _DOCTYPE.search(html)
        has_doctype = doctype is not None
        has_root = bool(_HTML_ROOT.search(html))

        if has_doctype and doctype.start() > 0:
            # Drop prose ahead of the document
            html = html[doctype.start():]

        if not has_doctype and not has_root:
            logger.warning(f"{self.name}: model returned a fragment, wrapping it in a document")
            headline = plan.sections[0].content.headline if plan.sections else ""
            return DOCUMENT_TEMPLATE.format(
                lang=html_lib.escape(plan.copy_tone.language or "en"),
                tailwind=TAILWIND_CDN,
                title=html_lib.escape(headline or "Landing Page"),
                body=html,
            )

        if not has_doctype:
            html = "<!DOCTYPE html>\n" + html
        return html

    async def run(self, plan: CROPlan, design: DesignSystem) -> str:
        logger.info(f"{self.name}: building {len(plan.sections)} sections")
        text = await self._generate(self.build_user_message(plan, design))
        html = self.finalize_document(text, plan)
        logger.info(f"{self.name}: page ready ({len(html)} chars)")
        return html
