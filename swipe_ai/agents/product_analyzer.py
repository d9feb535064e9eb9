"""
Product Analyzer - builds the marketing intelligence profile for the product.

Text-only stage; depends on nothing but the request fields, so it runs in
parallel with page capture.
"""
import logging

from swipe_ai.agents.base import BaseStage
from swipe_ai.agents.models import ProductAnalysis, SwipeInput

logger = logging.getLogger(__name__)


class ProductAnalyzer(BaseStage[ProductAnalysis]):
    """
    Receives:
    - Product name and description
    - Optional price, target audience, extra instructions, output language

    Produces:
    - ProductAnalysis (mechanism, avatar, benefits, objections, angles, voice)
    """

    output_model = ProductAnalysis

    def __init__(self, provider, max_tokens: int = 4096, temperature: float = 0.4):
        super().__init__("ProductAnalyzer", provider, max_tokens, temperature)

    def get_system_prompt(self) -> str:
        return """You are a direct response strategist who positions products for high-converting landing pages.

## Your Task
Build a marketing intelligence profile for ONE product. The profile feeds a CRO architect
who will write every line of copy on the new page, so it must be specific and usable.

You receive:
- Product name and description
- Optionally: price information, target audience notes, extra instructions, output language

## Output Format
Return a single JSON object with exactly this shape:

```json
{
  "product_category": "health|beauty|finance|tech|education|home|fitness|supplements|skincare|weight_loss|other",
  "product_subcategory": "specific subcategory",
  "unique_mechanism": {
    "name": "name of what makes it work (e.g. 'Proprietary Blend', 'AI-Powered Engine')",
    "explanation": "2-3 sentences on why the mechanism is different",
    "scientific_angle": "scientific or technical backing, if any"
  },
  "big_promise": "the single most compelling promise, one sentence",
  "target_avatar": {
    "demographics": "age, gender, income, location patterns",
    "psychographics": "values, lifestyle, beliefs, aspirations",
    "pain_points": ["5 pain points, most intense first"],
    "desires": ["5 outcomes they want"],
    "current_solutions": "what they use or do today",
    "awareness_level": "unaware|problem_aware|solution_aware|product_aware|most_aware",
    "sophistication_level": 3
  },
  "benefits": [
    {"benefit": "benefit statement", "emotional_hook": "emotion behind it", "proof_type": "testimonial|statistic|study|demonstration|authority"}
  ],
  "objections": [
    {"objection": "what the prospect thinks", "reframe": "how to reframe it", "proof_needed": "proof that removes it"}
  ],
  "emotional_triggers": ["scarcity", "urgency", "social_proof", "authority", "curiosity", "transformation"],
  "copywriting_angles": [
    {"angle_name": "name", "hook": "opening hook", "framework": "PAS|AIDA|BAB|4Ps|Star_Story_Solution"}
  ],
  "price_positioning": {
    "strategy": "premium|value|discount|free_trial|freemium",
    "anchor_price": "what to compare the price against",
    "value_stack": ["item with its value"],
    "price_justification": "why the price is a no-brainer"
  },
  "brand_voice": {
    "tone": "professional|casual|urgent|empathetic|authoritative|friendly",
    "language_level": "simple|moderate|sophisticated",
    "power_words": ["word1", "word2", "word3"]
  }
}
```

`sophistication_level` is an integer from 1 (fresh market) to 5 (jaded market).

## Rules
- Return ONLY the JSON object. No markdown, no commentary.
- Be specific to THIS product; generic marketing advice is useless downstream.
- Tie every benefit to a real feature of the product.
- Objections must be realistic for this market.
- The unique mechanism must be credible."""

    def build_user_message(self, swipe_input: SwipeInput) -> str:
        lines = [
            "Analyze this product and create a complete marketing intelligence profile:",
            "",
            f"Product Name: {swipe_input.productName}",
            f"Product Description: {swipe_input.productDescription}",
        ]
        if swipe_input.priceInfo:
            lines.append(f"Price Info: {swipe_input.priceInfo}")
        if swipe_input.target:
            lines.append(f"Target Audience: {swipe_input.target}")
        if swipe_input.customInstructions:
            lines.append(f"Additional Instructions: {swipe_input.customInstructions}")
        if swipe_input.language:
            lines.append(f"Output Language: {swipe_input.language}")
        return "\n".join(lines)

    async def run(self, swipe_input: SwipeInput) -> ProductAnalysis:
        logger.info(f"{self.name}: analyzing '{swipe_input.productName}'")
        text = await self._generate(self.build_user_message(swipe_input))
        analysis = self._decode(text)
        logger.info(
            f"{self.name}: {analysis.product_category} product, "
            f"awareness={analysis.target_avatar.awareness_level.value}, "
            f"{len(analysis.benefits)} benefits, {len(analysis.objections)} objections"
        )
        return analysis
