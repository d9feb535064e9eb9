"""
Typed values passed between pipeline stages.

Everything decoded from model output inherits StageOutput: unknown keys are
ignored, explicit nulls fall back to the field default, and numbers are
accepted where text is expected. Anything else that does not fit raises a
pydantic ValidationError, which the stages turn into OutputValidationError.
"""
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator


class StageOutput(BaseModel):
    """Base for models decoded from generator output"""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    class Config:
        extra = "ignore"
        coerce_numbers_to_str = True


def _renumber(sections: list) -> list:
    """Order sections by reported index and reassign 0..n-1"""
    ordered = sorted(
        enumerate(sections),
        key=lambda pair: (
            pair[1].section_index if pair[1].section_index is not None else pair[0],
            pair[0],
        ),
    )
    return [
        section.model_copy(update={"section_index": i})
        for i, (_, section) in enumerate(ordered)
    ]


# =============================================================================
# Request
# =============================================================================

class SwipeInput(BaseModel):
    """One pipeline run's request"""
    url: str
    productName: str
    productDescription: str
    target: Optional[str] = None
    priceInfo: Optional[str] = None
    customInstructions: Optional[str] = None
    language: Optional[str] = None

    class Config:
        frozen = True


# =============================================================================
# Product Analyzer
# =============================================================================

class AwarenessLevel(str, Enum):
    """Eugene Schwartz awareness stages"""
    UNAWARE = "unaware"
    PROBLEM_AWARE = "problem_aware"
    SOLUTION_AWARE = "solution_aware"
    PRODUCT_AWARE = "product_aware"
    MOST_AWARE = "most_aware"


class UniqueMechanism(StageOutput):
    name: str = ""
    explanation: str = ""
    scientific_angle: str = ""


class TargetAvatar(StageOutput):
    demographics: str = ""
    psychographics: str = ""
    pain_points: List[str] = []
    desires: List[str] = []
    current_solutions: str = ""
    awareness_level: AwarenessLevel = AwarenessLevel.PROBLEM_AWARE
    sophistication_level: Optional[int] = None

    @field_validator("awareness_level", mode="before")
    @classmethod
    def normalize_awareness(cls, value: Any) -> Any:
        # "Problem Aware", "problem-aware" -> "problem_aware"
        if isinstance(value, str):
            return "_".join(value.strip().lower().replace("-", " ").split())
        return value

    @field_validator("sophistication_level", mode="before")
    @classmethod
    def clamp_sophistication(cls, value: Any) -> Any:
        if isinstance(value, str):
            digits = "".join(ch for ch in value if ch.isdigit())[:1]
            if not digits:
                raise ValueError(f"sophistication_level is not a number: {value!r}")
            value = int(digits)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return min(5, max(1, int(value)))
        return value


class Benefit(StageOutput):
    benefit: str = ""
    emotional_hook: str = ""
    proof_type: str = ""


class Objection(StageOutput):
    objection: str = ""
    reframe: str = ""
    proof_needed: str = ""


class CopywritingAngle(StageOutput):
    angle_name: str = ""
    hook: str = ""
    framework: str = ""


class PricePositioning(StageOutput):
    strategy: str = ""
    anchor_price: str = ""
    value_stack: List[str] = []
    price_justification: str = ""


class BrandVoice(StageOutput):
    tone: str = ""
    language_level: str = ""
    power_words: List[str] = []


class ProductAnalysis(StageOutput):
    """Marketing intelligence profile for the product being sold"""
    product_category: str = "other"
    product_subcategory: str = ""
    unique_mechanism: UniqueMechanism = UniqueMechanism()
    big_promise: str
    target_avatar: TargetAvatar
    benefits: List[Benefit] = []
    objections: List[Objection] = []
    emotional_triggers: List[str] = []
    copywriting_angles: List[CopywritingAngle] = []
    price_positioning: PricePositioning = PricePositioning()
    brand_voice: BrandVoice = BrandVoice()


# =============================================================================
# Landing Analyzer
# =============================================================================

class LandingSection(StageOutput):
    section_index: Optional[int] = None
    section_type: str = ""
    headline: str = ""
    subheadline: str = ""
    body_summary: str = ""
    cta_text: str = ""
    cro_patterns: List[str] = []
    effectiveness_score: Optional[float] = None
    position: str = ""
    estimated_height_vh: Optional[float] = None
    visual_elements: List[str] = []
    html_tag_structure: str = ""


class DesignSystem(StageOutput):
    """Palette, typography and spacing of the source page"""
    primary_color: str = ""
    secondary_color: str = ""
    accent_color: str = ""
    background_color: str = ""
    text_color: str = ""
    cta_color: str = ""
    font_style: str = ""
    heading_style: str = ""
    spacing_density: str = ""
    visual_style: str = ""
    border_radius: str = ""
    shadow_usage: str = ""
    image_style: str = ""


class ConversionElements(StageOutput):
    total_ctas: Optional[int] = None
    cta_positions: List[str] = []
    cta_styles: str = ""
    social_proof_types: List[str] = []
    urgency_elements: List[str] = []
    trust_signals: List[str] = []
    lead_capture: str = ""


class UXAnalysis(StageOutput):
    mobile_readiness: str = ""
    reading_flow: str = ""
    attention_hierarchy: str = ""
    friction_points: List[str] = []
    strengths: List[str] = []
    weaknesses: List[str] = []


class ContentStrategy(StageOutput):
    narrative_arc: str = ""
    emotional_journey: List[str] = []
    proof_density: str = ""
    copy_style: str = ""


class LandingAnalysis(StageOutput):
    """Structural blueprint of the competitor page"""
    page_type: str = ""
    estimated_word_count: Optional[int] = None
    scroll_depth_sections: Optional[int] = None
    detected_language: Optional[str] = None
    sections: List[LandingSection]
    design_system: DesignSystem = DesignSystem()
    conversion_elements: ConversionElements = ConversionElements()
    ux_analysis: UXAnalysis = UXAnalysis()
    content_strategy: ContentStrategy = ContentStrategy()

    @model_validator(mode="after")
    def renumber_sections(self) -> "LandingAnalysis":
        self.sections = _renumber(self.sections)
        return self


# =============================================================================
# CRO Architect
# =============================================================================

class SocialProofItem(StageOutput):
    quote: str = ""
    author: str = ""
    title: str = ""


class FAQItem(StageOutput):
    question: str = ""
    answer: str = ""


class Stat(StageOutput):
    number: str = ""
    label: str = ""


class SectionContent(StageOutput):
    headline: str = ""
    subheadline: Optional[str] = None
    body_copy: str = ""
    cta_text: Optional[str] = None
    cta_secondary: Optional[str] = None
    list_items: List[str] = []
    social_proof_items: List[SocialProofItem] = []
    faq_items: List[FAQItem] = []
    stats: List[Stat] = []
    image_description: Optional[str] = None
    badge_text: Optional[str] = None


class CROSection(StageOutput):
    section_index: Optional[int] = None
    section_type: str = ""
    source_action: str = ""
    rationale: str = ""
    content: SectionContent = SectionContent()
    cro_elements: List[str] = []
    mobile_notes: str = ""


class AboveFoldStrategy(StageOutput):
    primary_hook: str = ""
    value_proposition: str = ""
    visual_anchor: str = ""
    micro_commitment: str = ""


class DesignDirectives(StageOutput):
    inherit_from_source: List[str] = []
    modify: Dict[str, Any] = {}
    overall_feel: str = ""


class CopyTone(StageOutput):
    voice: str = ""
    language: str = "en"
    formality: str = ""
    key_phrases_to_repeat: List[str] = []


class CROPlan(StageOutput):
    """Section-by-section blueprint of the page to build"""
    strategy_summary: str = ""
    target_awareness_approach: str = ""
    primary_framework: str = ""
    estimated_conversion_lift: str = ""
    sections: List[CROSection] = Field(..., min_length=1)
    above_fold_strategy: AboveFoldStrategy = AboveFoldStrategy()
    design_directives: DesignDirectives = DesignDirectives()
    copy_tone: CopyTone = CopyTone()

    @model_validator(mode="after")
    def renumber_sections(self) -> "CROPlan":
        self.sections = _renumber(self.sections)
        return self


# =============================================================================
# Result
# =============================================================================

class SwipeResult(BaseModel):
    """Terminal artifact of one pipeline run"""
    html: str
    productAnalysis: ProductAnalysis
    landingAnalysis: LandingAnalysis
    croPlan: CROPlan

    class Config:
        frozen = True
