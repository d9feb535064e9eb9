"""Canned model outputs shared by the stage and pipeline tests"""
from __future__ import annotations

import copy

PRODUCT_ANALYSIS = {
    "product_category": "supplements",
    "product_subcategory": "sleep aid",
    "unique_mechanism": {
        "name": "Dual-Phase Release",
        "explanation": "Releases melatonin in two waves.",
        "scientific_angle": "Mirrors natural circadian curves.",
    },
    "big_promise": "Fall asleep in 15 minutes and stay asleep all night.",
    "target_avatar": {
        "demographics": "35-55, professionals",
        "psychographics": "Health-conscious, busy",
        "pain_points": ["Wakes at 3am", "Groggy mornings"],
        "desires": ["Deep sleep", "Energy"],
        "current_solutions": "Over-the-counter pills",
        "awareness_level": "solution_aware",
        "sophistication_level": 4,
    },
    "benefits": [
        {"benefit": "Sleep through the night", "emotional_hook": "Relief", "proof_type": "study"}
    ],
    "objections": [
        {"objection": "Will I feel groggy?", "reframe": "No hangover effect", "proof_needed": "testimonial"}
    ],
    "emotional_triggers": ["transformation", "social_proof"],
    "copywriting_angles": [
        {"angle_name": "3am wake-up", "hook": "Still awake at 3am?", "framework": "PAS"}
    ],
    "price_positioning": {
        "strategy": "value",
        "anchor_price": "$2 per night",
        "value_stack": ["30 capsules ($49 value)"],
        "price_justification": "Cheaper than one coffee a day",
    },
    "brand_voice": {"tone": "empathetic", "language_level": "simple", "power_words": ["finally"]},
}

LANDING_ANALYSIS = {
    "page_type": "sales_page",
    "estimated_word_count": 1800,
    "scroll_depth_sections": 3,
    "detected_language": "it",
    "sections": [
        {"section_index": 0, "section_type": "hero", "headline": "Dormi meglio", "effectiveness_score": 8},
        {"section_index": 1, "section_type": "testimonials", "headline": "Dicono di noi"},
        {"section_index": 2, "section_type": "cta_block", "cta_text": "Compra ora"},
    ],
    "design_system": {
        "primary_color": "#1a237e",
        "secondary_color": "#ffffff",
        "accent_color": "#ffab00",
        "background_color": "#f5f5f5",
        "text_color": "#212121",
        "cta_color": "#ff6d00",
        "font_style": "sans-serif",
        "heading_style": "bold_uppercase",
        "spacing_density": "spacious",
        "visual_style": "health",
        "border_radius": "medium",
        "shadow_usage": "subtle",
        "image_style": "photos",
    },
    "conversion_elements": {"total_ctas": 3, "cta_positions": ["hero", "bottom"]},
    "ux_analysis": {"mobile_readiness": "good"},
    "content_strategy": {"proof_density": "high"},
}

CRO_PLAN = {
    "strategy_summary": "Lead with the 3am pain, reveal the mechanism, stack proof.",
    "target_awareness_approach": "Name the problem, then the mechanism.",
    "primary_framework": "PAS",
    "estimated_conversion_lift": "20-30%",
    "sections": [
        {
            "section_index": 0,
            "section_type": "hero",
            "source_action": "keep_modified",
            "rationale": "Hook first",
            "content": {
                "headline": "Finalmente dormi tutta la notte",
                "subheadline": "Senza intontimento al mattino",
                "body_copy": "<p>Dual-Phase Release.</p>",
                "cta_text": "Provalo ora",
            },
            "cro_elements": ["urgency"],
        },
        {
            "section_index": 1,
            "section_type": "faq",
            "source_action": "new",
            "rationale": "Handle objections",
            "content": {
                "headline": "Domande frequenti",
                "body_copy": "",
                "faq_items": [{"question": "Mi sentirò stordito?", "answer": "No."}],
            },
        },
    ],
    "above_fold_strategy": {"primary_hook": "3am"},
    "design_directives": {"inherit_from_source": ["colors"], "modify": {}},
    "copy_tone": {"voice": "warm", "language": "it", "formality": "empathetic"},
}


def product_analysis() -> dict:
    return copy.deepcopy(PRODUCT_ANALYSIS)


def landing_analysis() -> dict:
    return copy.deepcopy(LANDING_ANALYSIS)


def cro_plan() -> dict:
    return copy.deepcopy(CRO_PLAN)
