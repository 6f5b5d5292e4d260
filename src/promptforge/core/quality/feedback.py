"""Image feedback — compare prompt tokens against a description of the result.

The description itself comes from an image-analysis model outside this
package; everything here is plain string matching.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from promptforge.core.scaffold.models import GeneratedPrompt, ScaffoldSlot
from promptforge.core.scaffold.slots import normalize_scaffold

DIRECT_CONFIDENCE = 0.9
SYNONYM_CONFIDENCE = 0.7
SIMILAR_CONFIDENCE = 0.6
CONTAINS_CONFIDENCE = 0.5
CONTAINED_CONFIDENCE = 0.4

MAX_ITEMS = 5

STOP_WORDS = frozenset({
    "a", "an", "the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
    "is", "are", "was", "were", "be", "been", "being", "have", "has", "had", "do", "does",
    "did", "will", "would", "could", "should", "may", "might", "can", "very", "really",
    "quite", "rather",
})

SYNONYMS: dict[str, tuple[str, ...]] = {
    # colors
    "red": ("crimson", "scarlet", "ruby", "cherry", "burgundy"),
    "blue": ("azure", "navy", "cobalt", "sapphire", "cerulean"),
    "green": ("emerald", "jade", "olive", "forest", "lime"),
    "yellow": ("golden", "amber", "lemon", "canary", "blonde"),
    "purple": ("violet", "lavender", "plum", "magenta", "indigo"),
    "orange": ("amber", "peach", "coral", "tangerine", "rust"),
    "black": ("dark", "ebony", "charcoal", "midnight", "shadow"),
    "white": ("pale", "ivory", "cream", "snow", "pearl"),
    # lighting
    "bright": ("brilliant", "radiant", "luminous", "glowing", "vivid"),
    "dark": ("dim", "shadowy", "gloomy", "murky", "obscure"),
    "golden": ("warm", "amber", "honey", "sunset", "glowing"),
    "dramatic": ("striking", "intense", "bold", "powerful", "strong"),
    # styles
    "realistic": ("photorealistic", "lifelike", "natural", "authentic"),
    "artistic": ("stylized", "creative", "expressive", "aesthetic"),
    "detailed": ("intricate", "elaborate", "complex", "fine", "precise"),
    # composition
    "close": ("near", "intimate", "tight", "focused"),
    "wide": ("broad", "expansive", "panoramic", "vast"),
    "centered": ("middle", "central", "balanced", "symmetrical"),
}

SUGGESTIONS: dict[str, str] = {
    "Subject": 'Make "{token}" more prominent in the image',
    "Context": 'Add more environmental details about "{token}"',
    "Style": 'Emphasize the "{token}" artistic style more strongly',
    "Composition": 'Adjust framing to better show "{token}" perspective',
    "Lighting": 'Enhance lighting to achieve "{token}" effect',
    "Atmosphere": 'Strengthen mood keywords to convey "{token}"',
    "Quality": 'Add technical quality terms alongside "{token}"',
}

_TOKEN_SPLIT = re.compile(r"[,;|&+\s]")
_NON_WORD = re.compile(r"[^\w]")


@dataclass
class TokenComparison:
    token: str
    present: bool
    confidence: float
    suggestion: str | None = None
    slot: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "token": self.token,
            "present": self.present,
            "confidence": self.confidence,
            "suggestion": self.suggestion,
            "slot": self.slot,
        }


@dataclass
class AlignmentReport:
    overall_score: int
    strengths: list[str] = field(default_factory=list)
    weaknesses: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)


def extract_tokens(content: str) -> list[str]:
    """Meaningful words (3+ chars, no stop words); the whole text if none qualify."""
    tokens = [
        t.strip()
        for t in _TOKEN_SPLIT.split(content)
        if len(t.strip()) > 2 and t.strip().lower() not in STOP_WORDS
    ]
    if tokens:
        return tokens
    stripped = content.strip()
    return [stripped] if stripped else []


def levenshtein_distance(a: str, b: str) -> int:
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (ca != cb),
                )
            )
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    longer, shorter = (a, b) if len(a) >= len(b) else (b, a)
    if not longer:
        return 1.0
    return (len(longer) - levenshtein_distance(longer, shorter)) / len(longer)


def _synonym_match(token: str, description: str) -> str | None:
    for synonym in SYNONYMS.get(token, ()):
        if synonym in description:
            return synonym
    for key, values in SYNONYMS.items():
        if token in values and key in description:
            return key
    return None


def _partial_match(token: str, description: str) -> tuple[float, str] | None:
    for word in description.split():
        clean = _NON_WORD.sub("", word).lower()
        if token in clean and clean != token:
            return CONTAINS_CONFIDENCE, word
        if len(clean) > 3 and clean in token:
            return CONTAINED_CONFIDENCE, word
        if len(clean) > 3 and similarity(token, clean) > 0.7:
            return SIMILAR_CONFIDENCE, word
    return None


def _compare_token(token: str, description: str, slot_name: str) -> TokenComparison:
    needle = token.lower()
    if needle in description:
        return TokenComparison(token, True, DIRECT_CONFIDENCE, slot=slot_name)

    synonym = _synonym_match(needle, description)
    if synonym:
        return TokenComparison(
            token, True, SYNONYM_CONFIDENCE, f'Found as "{synonym}"', slot=slot_name
        )

    partial = _partial_match(needle, description)
    if partial:
        confidence, word = partial
        return TokenComparison(
            token, True, confidence, f'Partially matched: "{word}"', slot=slot_name
        )

    template = SUGGESTIONS.get(slot_name, SUGGESTIONS["Subject"])
    return TokenComparison(token, False, 0.0, template.format(token=token), slot=slot_name)


def compare_tokens_with_description(
    prompt: GeneratedPrompt, description: str
) -> list[TokenComparison]:
    """One comparison per meaningful token of every filled slot."""
    lowered = description.lower()
    comparisons: list[TokenComparison] = []
    for slot in normalize_scaffold(prompt.scaffold):
        if not slot.is_filled:
            continue
        for token in extract_tokens(slot.content.lower()):
            comparisons.append(_compare_token(token, lowered, slot.name))
    return comparisons


def _slot_scores(
    scaffold: list[ScaffoldSlot], comparisons: list[TokenComparison]
) -> dict[str, int]:
    """Percent of present tokens per filled slot; empty slots are left out."""
    scores: dict[str, int] = {}
    for slot in scaffold:
        mine = [c for c in comparisons if c.slot == slot.name]
        if not slot.is_filled or not mine:
            continue
        scores[slot.name] = round(100 * sum(c.present for c in mine) / len(mine))
    return scores


def analyze_prompt_image_alignment(
    prompt: GeneratedPrompt, comparisons: list[TokenComparison]
) -> AlignmentReport:
    """Summarise how well the generated image followed the prompt."""
    total = len(comparisons)
    present = sum(1 for c in comparisons if c.present)
    confident = sum(1 for c in comparisons if c.confidence > 0.7)
    overall = round(100 * present / total) if total else 0

    report = AlignmentReport(overall_score=overall)

    if overall >= 80:
        report.strengths.append("Excellent overall prompt execution")
    elif overall >= 60:
        report.strengths.append("Good prompt-to-image alignment")
    if total and confident / total > 0.6:
        report.strengths.append("Most elements are clearly represented")

    if overall < 60:
        report.weaknesses.append("Significant gaps between prompt and generated image")
        report.recommendations.append(
            "Consider simplifying your prompt or using more specific descriptors"
        )

    scaffold = normalize_scaffold(prompt.scaffold)
    for name, score in _slot_scores(scaffold, comparisons).items():
        if score < 50:
            report.weaknesses.append(f"{name} elements are poorly represented")
            report.recommendations.append(f"Strengthen {name.lower()} keywords in your prompt")
        elif score > 80:
            report.strengths.append(f"{name} elements are well executed")

    for comparison in [c for c in comparisons if not c.present][:3]:
        if comparison.suggestion:
            report.recommendations.append(comparison.suggestion)

    report.strengths = report.strengths[:MAX_ITEMS]
    report.weaknesses = report.weaknesses[:MAX_ITEMS]
    report.recommendations = report.recommendations[:MAX_ITEMS]
    return report
