"""Clarifying questions — a fixed catalog used to fill scaffold gaps."""

from __future__ import annotations

import random
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

QuestionType = Literal["text", "select", "multiselect"]
QuestionCategory = Literal["style", "lighting", "composition", "technical"]

NEGATIVE_ANSWER_KEY = "_negative"


@dataclass(frozen=True)
class ClarifyingQuestion:
    id: str
    question: str
    type: QuestionType
    category: QuestionCategory
    options: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "question": self.question,
            "type": self.type,
            "category": self.category,
            "options": list(self.options),
        }


CLARIFYING_QUESTIONS: tuple[ClarifyingQuestion, ...] = (
    ClarifyingQuestion(
        "art-style", "What art style would you like?", "select", "style",
        ("Photorealistic", "Digital Art", "Oil Painting", "Watercolor", "Sketch",
         "Anime/Manga", "Cartoon", "Abstract", "Impressionist", "Pop Art"),
    ),
    ClarifyingQuestion(
        "medium", "What medium or technique?", "select", "style",
        ("Photography", "Digital Painting", "Traditional Painting", "3D Render",
         "Pencil Drawing", "Ink Drawing", "Mixed Media", "Sculpture", "Collage"),
    ),
    ClarifyingQuestion(
        "lighting-type", "What type of lighting?", "select", "lighting",
        ("Natural Light", "Golden Hour", "Blue Hour", "Dramatic Lighting", "Soft Lighting",
         "Hard Lighting", "Neon Lighting", "Candlelight", "Studio Lighting", "Backlighting"),
    ),
    ClarifyingQuestion(
        "mood-lighting", "What mood should the lighting create?", "select", "lighting",
        ("Warm and Cozy", "Cool and Calm", "Mysterious", "Energetic", "Romantic",
         "Dramatic", "Peaceful", "Intense", "Dreamy", "Professional"),
    ),
    ClarifyingQuestion(
        "camera-angle", "What camera angle or viewpoint?", "select", "composition",
        ("Eye Level", "Low Angle", "High Angle", "Bird's Eye View", "Worm's Eye View",
         "Dutch Angle", "Over the Shoulder", "Point of View", "Aerial View"),
    ),
    ClarifyingQuestion(
        "shot-type", "What type of shot or framing?", "select", "composition",
        ("Close-up", "Medium Shot", "Wide Shot", "Extreme Close-up", "Full Body",
         "Portrait", "Landscape", "Macro", "Panoramic"),
    ),
    ClarifyingQuestion(
        "depth-of-field", "How should the focus be handled?", "select", "composition",
        ("Sharp Focus Throughout", "Shallow Depth of Field", "Bokeh Background",
         "Selective Focus", "Deep Focus", "Tilt-Shift Effect"),
    ),
    ClarifyingQuestion(
        "image-quality", "What quality level do you want?", "multiselect", "technical",
        ("High Resolution", "4K", "8K", "Ultra Detailed", "Sharp", "Professional Quality",
         "Award Winning", "Masterpiece", "Trending on ArtStation"),
    ),
    ClarifyingQuestion(
        "color-palette", "Any specific color preferences?", "select", "technical",
        ("Vibrant Colors", "Muted Colors", "Monochrome", "Warm Tones", "Cool Tones",
         "Pastel Colors", "High Contrast", "Low Contrast", "Complementary Colors",
         "Analogous Colors"),
    ),
    ClarifyingQuestion(
        "negative-keywords", "What should be avoided in the image?", "text", "technical",
    ),
    ClarifyingQuestion(
        "time-of-day", "What time of day?", "select", "lighting",
        ("Dawn", "Morning", "Midday", "Afternoon", "Sunset", "Dusk", "Night", "Midnight"),
    ),
    ClarifyingQuestion(
        "weather", "What weather conditions?", "select", "composition",
        ("Clear Sky", "Cloudy", "Stormy", "Rainy", "Snowy", "Foggy", "Misty", "Windy",
         "Sunny", "Overcast"),
    ),
    ClarifyingQuestion(
        "emotion", "What emotion should the image convey?", "select", "style",
        ("Joy", "Sadness", "Excitement", "Calm", "Mystery", "Wonder", "Power", "Elegance",
         "Chaos", "Harmony"),
    ),
)

_BY_ID = {q.id: q for q in CLARIFYING_QUESTIONS}

# Category -> scaffold slot that its answers extend.
_CATEGORY_SLOT = {"style": "St", "lighting": "L", "composition": "Co", "technical": "Q"}

_SLOT_CATEGORY: dict[str, QuestionCategory] = {
    "S": "style",
    "C": "composition",
    "St": "style",
    "Co": "composition",
    "L": "lighting",
    "A": "style",
    "Q": "technical",
}


def get_question(question_id: str) -> ClarifyingQuestion | None:
    return _BY_ID.get(question_id)


def get_questions_by_category(category: str) -> list[ClarifyingQuestion]:
    return [q for q in CLARIFYING_QUESTIONS if q.category == category]


def get_random_questions(count: int = 3, rng: random.Random | None = None) -> list[ClarifyingQuestion]:
    rng = rng or random.Random()
    return rng.sample(list(CLARIFYING_QUESTIONS), min(count, len(CLARIFYING_QUESTIONS)))


def get_relevant_questions(missing_slots: Iterable[str]) -> list[ClarifyingQuestion]:
    """Questions for the missing slot *names* (e.g. "Style", "Lighting")."""
    missing = set(missing_slots)
    questions: list[ClarifyingQuestion] = []
    if "Style" in missing:
        questions.extend(get_questions_by_category("style")[:2])
    if "Lighting" in missing:
        questions.extend(get_questions_by_category("lighting")[:2])
    if "Composition" in missing:
        questions.extend(get_questions_by_category("composition")[:2])
    if "Quality" in missing:
        questions.extend(get_questions_by_category("technical")[:1])
    return questions


def get_questions_for_slot(slot_key: str) -> list[ClarifyingQuestion]:
    category = _SLOT_CATEGORY.get(str(slot_key))
    return get_questions_by_category(category) if category else []


def process_question_answers(answers: Mapping[str, Any]) -> dict[str, str]:
    """Map answers to scaffold slot additions.

    Answers to the negative-keywords question are returned under
    ``"_negative"`` instead of a slot key. Unknown question ids and empty
    answers are ignored.
    """
    updates: dict[str, str] = {}
    for question_id, answer in answers.items():
        question = _BY_ID.get(question_id)
        if question is None or not answer:
            continue

        if isinstance(answer, (list, tuple)):
            text = ", ".join(str(a) for a in answer)
        else:
            text = str(answer)

        if question.id == "negative-keywords":
            target = NEGATIVE_ANSWER_KEY
        else:
            target = _CATEGORY_SLOT[question.category]
        updates[target] = f"{updates[target]}, {text}" if target in updates else text
    return updates
