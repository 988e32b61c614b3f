from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from conformity_classifier.models.classifier import TrainedModel
from conformity_classifier.models.persistence import load_model
from conformity_classifier.schemas import Prediction


class TextPredictor:
    """Classify single texts with a fitted model."""

    def __init__(self, model: TrainedModel) -> None:
        self.model = model

    @classmethod
    def from_file(cls, path: str | Path) -> "TextPredictor":
        """Build a predictor around a model saved with ``save_model``."""
        return cls(load_model(path))

    def predict_many(self, texts: Sequence[str]) -> List[Prediction]:
        if not texts:
            return []

        probabilities = self.model.predict_proba(texts)
        classes = self.model.classes

        predictions: List[Prediction] = []
        for row in probabilities:
            best = int(row.argmax())
            predictions.append(
                Prediction(
                    predicted_label=classes[best],
                    scores={label: float(p) for label, p in zip(classes, row)},
                )
            )
        return predictions

    def predict(self, text: str) -> Prediction:
        """Predict the category code of one text."""
        return self.predict_many([text])[0]
