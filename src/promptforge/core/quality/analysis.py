"""Prompt analysis — improvement areas, recommendations and follow-up questions."""

from __future__ import annotations

import logging
import random
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Literal

from promptforge.core.quality.questions import (
    ClarifyingQuestion,
    get_questions_for_slot,
    get_random_questions,
    get_relevant_questions,
    process_question_answers,
)
from promptforge.core.quality.scorer import QualityReport, calculate_prompt_quality, word_count
from promptforge.core.scaffold.models import GeneratedPrompt, ScaffoldSlot
from promptforge.core.scaffold.slots import get_empty_slots, get_filled_slots, normalize_scaffold

logger = logging.getLogger(__name__)

MAX_QUESTIONS = 5
MAX_RECOMMENDATIONS = 5
WEAK_SLOT_WORDS = 2

_EMPTY_SLOT_ADVICE = {
    "S": "Add a clear main subject or focus for your image",
    "C": "Specify the setting, environment, or background context",
    "St": "Define the art style, medium, or visual approach",
    "Co": "Include camera angle, framing, or composition details",
    "L": "Describe the lighting conditions and mood",
    "A": "Add atmospheric qualities and emotional tone",
    "Q": 'Include quality descriptors like "high quality", "detailed", or "4K"',
}


@dataclass
class PromptAnalysis:
    quality_score: int
    missing_slots: list[str] = field(default_factory=list)
    weak_slots: list[str] = field(default_factory=list)
    suggested_questions: list[ClarifyingQuestion] = field(default_factory=list)
    improvement_areas: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "quality_score": self.quality_score,
            "missing_slots": list(self.missing_slots),
            "weak_slots": list(self.weak_slots),
            "suggested_questions": [q.to_dict() for q in self.suggested_questions],
            "improvement_areas": list(self.improvement_areas),
            "recommendations": list(self.recommendations),
        }


@dataclass
class ImprovementPotential:
    score: int
    areas: list[str]
    priority: Literal["low", "medium", "high"]


def _is_weak(slot: ScaffoldSlot) -> bool:
    return word_count(slot.content) <= WEAK_SLOT_WORDS


def identify_improvement_areas(scaffold: list[ScaffoldSlot]) -> list[str]:
    areas: list[str] = []
    for slot in scaffold:
        if not slot.is_filled:
            areas.append(f"Missing {slot.name.lower()}")
        elif _is_weak(slot):
            areas.append(f"Vague {slot.name.lower()}")

    text = " ".join(slot.content for slot in scaffold).lower()
    if not any(word in text for word in ("quality", "detailed", "4k")):
        areas.append("Lacks quality descriptors")
    if "light" not in text:
        areas.append("No lighting specification")
    if "style" not in text and "art" not in text:
        areas.append("Unclear artistic style")
    return areas


def generate_recommendations(scaffold: list[ScaffoldSlot], quality: QualityReport) -> list[str]:
    recommendations = [_EMPTY_SLOT_ADVICE[slot.key.value] for slot in get_empty_slots(scaffold)]

    if quality.score < 50:
        recommendations.append("Consider adding more specific and detailed descriptions")
        recommendations.append("Use more descriptive adjectives and technical terms")
    elif quality.score < 75:
        recommendations.append("Add more technical quality terms for better results")
        recommendations.append("Consider specifying the artistic medium or style")

    if not recommendations:
        recommendations.append("Your prompt looks good! Consider fine-tuning specific details")
        recommendations.append("Try experimenting with different artistic styles or lighting")

    return recommendations[:MAX_RECOMMENDATIONS]


def analyze_prompt_for_improvement(
    prompt: GeneratedPrompt, rng: random.Random | None = None
) -> PromptAnalysis:
    """Score the prompt and pick up to five questions that would improve it.

    When the gaps yield fewer than three questions the list is padded with
    random ones drawn from ``rng``.
    """
    scaffold = normalize_scaffold(prompt.scaffold)
    empty = get_empty_slots(scaffold)
    weak = [slot for slot in get_filled_slots(scaffold) if _is_weak(slot)]
    quality = calculate_prompt_quality(replace(prompt, scaffold=scaffold))

    questions: list[ClarifyingQuestion] = []
    if empty:
        questions.extend(get_relevant_questions(slot.name for slot in empty))
    for slot in weak:
        questions.extend(get_questions_for_slot(slot.key.value)[:1])
    if len(questions) < 3:
        questions.extend(get_random_questions(MAX_QUESTIONS - len(questions), rng))

    unique: dict[str, ClarifyingQuestion] = {}
    for question in questions:
        unique.setdefault(question.id, question)

    return PromptAnalysis(
        quality_score=quality.score,
        missing_slots=[slot.name for slot in empty],
        weak_slots=[slot.name for slot in weak],
        suggested_questions=list(unique.values())[:MAX_QUESTIONS],
        improvement_areas=identify_improvement_areas(scaffold),
        recommendations=generate_recommendations(scaffold, quality),
    )


def apply_question_answers_to_prompt(
    prompt: GeneratedPrompt, answers: Mapping[str, Any]
) -> list[ScaffoldSlot]:
    """Return a new scaffold with answers appended to the matching slots."""
    updates = process_question_answers(answers)
    result: list[ScaffoldSlot] = []
    for slot in normalize_scaffold(prompt.scaffold):
        addition = updates.get(slot.key.value)
        if addition:
            existing = slot.content.strip()
            slot = replace(slot, content=f"{existing}, {addition}" if existing else addition)
        result.append(slot)
    return result


def should_show_clarifying_questions(prompt: GeneratedPrompt) -> bool:
    analysis = analyze_prompt_for_improvement(prompt)
    return analysis.quality_score < 75 or bool(analysis.missing_slots or analysis.weak_slots)


def calculate_improvement_potential(prompt: GeneratedPrompt) -> ImprovementPotential:
    """How much room for improvement there is, 0..100, with a priority bucket."""
    analysis = analyze_prompt_for_improvement(prompt)

    score = len(analysis.missing_slots) * 20 + len(analysis.weak_slots) * 10
    areas = [f"Add {name.lower()}" for name in analysis.missing_slots]
    areas += [f"Enhance {name.lower()}" for name in analysis.weak_slots]

    if analysis.quality_score < 50:
        score += 30
        areas.append("Overall quality improvement needed")
    elif analysis.quality_score < 75:
        score += 15
        areas.append("Minor quality enhancements possible")

    if score >= 50:
        priority = "high"
    elif score >= 25:
        priority = "medium"
    else:
        priority = "low"

    return ImprovementPotential(score=min(score, 100), areas=areas[:3], priority=priority)
