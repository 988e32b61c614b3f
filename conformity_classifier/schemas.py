# conformity_classifier/schemas.py

from __future__ import annotations

from pydantic import BaseModel, Field


class Record(BaseModel):
    """One input example: integer category code and its text."""
    label: int = Field(..., description="Category code (first column).")
    text: str = Field(..., description="Free text to classify (second column).")


class Prediction(BaseModel):
    """Classification result for a single text."""
    predicted_label: int = Field(..., description="Predicted category code.")
    scores: dict[int, float] = Field(
        default_factory=dict,
        description="Probability of every known category code.",
    )
