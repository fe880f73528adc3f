"""
Prompt templates for name generation

All prompt engineering lives here. Two prompt shapes:
1. The initial brief, asking for 10 names
2. The iterative round, which also lists every name already seen and
   the user's feedback for this round
"""

from typing import Optional

from .models import NameBrief, NameLength, NameStyle, ToneStyle

NAMES_PER_ROUND = 10

# =============================================================================
# BRIEF VOCABULARY
# =============================================================================

TONE_DESCRIPTIONS = {
    ToneStyle.MODERN: "innovative, cutting-edge, sleek, minimalist, tech-forward",
    ToneStyle.FRIENDLY: "approachable, warm, welcoming, human, inviting",
    ToneStyle.PROFESSIONAL: "trustworthy, established, serious, reliable, corporate",
    ToneStyle.PLAYFUL: "fun, creative, energetic, quirky, memorable",
    ToneStyle.LUXURIOUS: "premium, exclusive, elegant, sophisticated, refined",
    ToneStyle.BOLD: "strong, confident, powerful, assertive, impactful",
}

NAME_STYLE_DESCRIPTIONS = {
    NameStyle.REAL_WORDS: "actual dictionary words that relate to the product (like Slack, Apple, Square, Notion)",
    NameStyle.INVENTED: "made-up but phonetically pleasing words that feel memorable (like Spotify, Kodak, Xerox, Hulu)",
    NameStyle.COMPOUND: "two words cleverly combined into one (like Facebook, YouTube, Snapchat, WordPress)",
    NameStyle.ABSTRACT: "evocative names that suggest rather than describe (like Amazon, Nike, Oracle, Uber)",
    NameStyle.ANY: "a creative mix of styles including real words, invented words, and compound words",
}

LENGTH_GUIDELINES = {
    NameLength.SHORT: "1-5 letters, ultra-punchy and easy to remember",
    NameLength.MEDIUM: "6-8 letters, balanced length that works well for brands",
    NameLength.LONG: "9+ letters, more descriptive but still memorable",
    NameLength.ANY: "whatever length works best for each name concept",
}

# =============================================================================
# INITIAL ROUND
# =============================================================================

GENERATE_PROMPT = """You are an expert brand naming consultant with 20 years of experience creating memorable product names. Generate {count} unique name ideas based on the following brief:

## Product Details
- **Type**: {product_type}
- **Description**: {description}
- **Industry**: {industry}
- **Target Audience**: {target_audience}

## Name Requirements
- **Tone**: {tone}
- **Style**: {style}
- **Length**: {length}
{creative_section}{avoid_section}{competitors_section}
## Requirements for Each Name
1. Must be easy to spell and pronounce
2. Should work well as a domain name (consider .com availability)
3. Should be legally defensible (avoid generic terms)
4. Must feel appropriate for the {industry} industry
5. Should resonate with {target_audience}

## Output Format
Respond with a JSON array containing exactly {count} name objects. Each object should have:
- "name": The suggested name (1-2 words max)
- "reasoning": A brief explanation of why this name works (1 sentence)

Example format:
[
  {{"name": "Lumina", "reasoning": "Evokes light and clarity, perfect for an innovative solution"}},
  {{"name": "SwiftHub", "reasoning": "Combines speed with connectivity, appealing to tech users"}}
]

Return ONLY the JSON array, no other text or markdown formatting."""

CREATIVE_SECTION = """
## Creative Direction
{lines}
"""

AVOID_SECTION = """
## Words/Sounds to AVOID
{lines}
"""

COMPETITORS_SECTION = """
## Competitor Names (differentiate from these)
{lines}
Make sure the names are distinctly different from these competitors while still fitting the industry.
"""

# =============================================================================
# ITERATIVE ROUND
# =============================================================================

ITERATIVE_PROMPT = """You are an expert brand naming consultant. We're continuing a naming session. Generate {count} NEW and DIFFERENT name ideas based on the brief below.

## Product Brief
- **Type**: {product_type}
- **Description**: {description}
- **Industry**: {industry}
- **Target Audience**: {target_audience}
- **Tone**: {tone}
- **Style**: {style}
- **Length**: {length}
{previous_section}{feedback_section}{creative_section}{avoid_section}
## Output Format
Respond with a JSON array containing exactly {count} NEW name objects. Each must be:
- Completely different from all previous suggestions
- Easy to spell and pronounce
- Appropriate for the {industry} industry

Format:
[
  {{"name": "ExampleName", "reasoning": "Brief explanation"}}
]

Return ONLY the JSON array, no other text."""

PREVIOUS_NAMES_SECTION = """
## Previously Suggested Names (DO NOT repeat these or similar variations)
{lines}
"""

FEEDBACK_SECTION = """
## User Feedback / Direction
The user has provided the following guidance for this round:
"{feedback}"

Please incorporate this feedback into your new suggestions. This is the most important consideration for this round.
"""


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def _bullets(items: list[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def _creative_section(brief: NameBrief, detailed: bool) -> str:
    lines = []
    if brief.keywords:
        label = "Keywords to incorporate or draw from" if detailed else "Keywords"
        lines.append(f"- **{label}**: {', '.join(brief.keywords)}")
    if brief.themes:
        label = "Themes/concepts to evoke" if detailed else "Themes"
        lines.append(f"- **{label}**: {', '.join(brief.themes)}")
    if not lines:
        return ""
    return CREATIVE_SECTION.format(lines="\n".join(lines))


def _avoid_section(brief: NameBrief) -> str:
    if not brief.avoid_words:
        return ""
    return AVOID_SECTION.format(lines=_bullets(brief.avoid_words))


def _brief_fields(brief: NameBrief) -> dict:
    return {
        "count": NAMES_PER_ROUND,
        "product_type": brief.product_type.value,
        "description": brief.description,
        "industry": brief.industry,
        "target_audience": brief.target_audience,
        "tone": TONE_DESCRIPTIONS.get(brief.tone, brief.tone.value),
        "style": NAME_STYLE_DESCRIPTIONS.get(brief.name_style, brief.name_style.value),
        "length": LENGTH_GUIDELINES.get(brief.name_length, "any length"),
    }


def format_generate_prompt(brief: NameBrief) -> str:
    """
    Format the first-round prompt for a brief.

    Args:
        brief: Product brief

    Returns:
        Formatted prompt string
    """
    competitors_section = ""
    if brief.competitors:
        competitors_section = COMPETITORS_SECTION.format(lines=_bullets(brief.competitors))

    return GENERATE_PROMPT.format(
        creative_section=_creative_section(brief, detailed=True),
        avoid_section=_avoid_section(brief),
        competitors_section=competitors_section,
        **_brief_fields(brief),
    )


def format_iterative_prompt(
    brief: NameBrief,
    previous_names: list[str],
    feedback: Optional[str] = None,
) -> str:
    """
    Format a follow-up round prompt.

    Args:
        brief: Product brief
        previous_names: Every name already generated or checked
        feedback: Optional direction from the user for this round

    Returns:
        Formatted prompt string
    """
    previous_section = ""
    if previous_names:
        previous_section = PREVIOUS_NAMES_SECTION.format(lines=_bullets(previous_names))

    feedback_section = ""
    if feedback:
        feedback_section = FEEDBACK_SECTION.format(feedback=feedback)

    return ITERATIVE_PROMPT.format(
        previous_section=previous_section,
        feedback_section=feedback_section,
        creative_section=_creative_section(brief, detailed=False),
        avoid_section=_avoid_section(brief),
        **_brief_fields(brief),
    )
