"""Quality scorer — heuristic completeness score for a populated scaffold.

Advisory only: nothing is gated on the score.

Each slot scores 0 when empty. A filled slot starts at 60 and earns 20 for
more than two words and another 20 for more than five, capped at 100. A
Subject shorter than three characters loses 20. The overall score is the
rounded mean over the seven canonical slots.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from promptforge.core.quality.checks import SUBJECT_MIN_LENGTH, validate_scaffold_slot
from promptforge.core.scaffold.models import GeneratedPrompt, ScaffoldSlot, SlotKey
from promptforge.core.scaffold.slots import SlotLike, normalize_scaffold

logger = logging.getLogger(__name__)

FILLED_BASE = 60
WORDS_BONUS = 20
SHORT_SUBJECT_PENALTY = 20


@dataclass
class QualityReport:
    score: int
    breakdown: dict[str, int] = field(default_factory=dict)
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "breakdown": dict(self.breakdown),
            "recommendations": list(self.recommendations),
        }


def word_count(text: str) -> int:
    return len(text.split())


def score_slot(slot: ScaffoldSlot) -> int:
    content = (slot.content or "").strip()
    if not content:
        return 0

    score = FILLED_BASE
    words = word_count(content)
    if words > 2:
        score += WORDS_BONUS
    if words > 5:
        score += WORDS_BONUS
    if slot.key == SlotKey.SUBJECT and len(content) < SUBJECT_MIN_LENGTH:
        score -= SHORT_SUBJECT_PENALTY
    return max(0, min(score, 100))


def score_scaffold(scaffold: Iterable[SlotLike] | None) -> QualityReport:
    """Score any slot collection; it is projected onto the seven slots first."""
    slots = normalize_scaffold(scaffold)
    breakdown: dict[str, int] = {}
    recommendations: list[str] = []

    for slot in slots:
        slot_score = score_slot(slot)
        breakdown[slot.name] = slot_score

        for suggestion in validate_scaffold_slot(slot).suggestions:
            if suggestion not in recommendations:
                recommendations.append(suggestion)
        if 0 < slot_score < 100:
            recommendations.append(f"Add more descriptive detail to the {slot.name} slot")

    score = round(sum(breakdown.values()) / len(slots))
    logger.debug("Scaffold quality %d: %s", score, breakdown)
    return QualityReport(score=score, breakdown=breakdown, recommendations=recommendations)


def calculate_prompt_quality(prompt: GeneratedPrompt) -> QualityReport:
    """Score a generated prompt's scaffold (0..100) with recommendations."""
    return score_scaffold(prompt.scaffold)
