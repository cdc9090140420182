"""Flashcard proposal models and the JSON schemas requested from the model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..domain.enums import Difficulty

FLASHCARD_PROPERTIES: dict[str, Any] = {
    "front": {"type": "string", "description": "The question or prompt on the front of the flashcard"},
    "back": {"type": "string", "description": "The answer on the back of the flashcard"},
    "hint": {"type": "string", "description": "A helpful hint for the user"},
    "difficulty": {
        "type": "string",
        "enum": [d.value for d in Difficulty],
        "description": "The difficulty level of the flashcard",
    },
    "tags": {
        "type": "array",
        "items": {"type": "string"},
        "description": "Tags for categorizing the flashcard",
    },
}

FLASHCARD_REQUIRED = ["front", "back", "difficulty", "tags"]

FLASHCARD_PROPOSAL_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": FLASHCARD_PROPERTIES,
    "required": FLASHCARD_REQUIRED,
    "additionalProperties": False,
}

FLASHCARD_BATCH_SCHEMA: dict[str, Any] = {
    "type": "array",
    "items": FLASHCARD_PROPOSAL_SCHEMA,
}


class FlashcardProposal(BaseModel):
    """A single flashcard suggested by the model, not yet persisted."""

    model_config = ConfigDict(extra="forbid")

    front: str = Field(min_length=1, description="Question side")
    back: str = Field(min_length=1, description="Answer side")
    hint: str | None = Field(default=None, description="Optional nudge towards the answer")
    difficulty: Difficulty
    tags: list[str] = Field(description="Categorization tags, duplicates removed")

    @field_validator("front", "back")
    @classmethod
    def strip_sides(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, v: list[str]) -> list[str]:
        return list(dict.fromkeys(tag.strip() for tag in v if tag.strip()))


class FlashcardBatch(BaseModel):
    """Several proposals generated from one source text."""

    flashcards: list[FlashcardProposal]
    model: str
