from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import LabelEncoder


@dataclass
class TrainedModel:
    """A fitted text pipeline together with its label key mapping.

    ``pipeline`` works on internal keys ``0..n_classes-1``; ``label_mapper``
    translates original category codes to keys before training and keys back
    to codes after prediction.
    """

    pipeline: Pipeline
    label_mapper: LabelEncoder

    @property
    def classes(self) -> List[int]:
        """Original category codes, in key order."""
        return [int(c) for c in self.label_mapper.classes_]

    @property
    def num_classes(self) -> int:
        return len(self.label_mapper.classes_)

    def predict_keys(self, texts: Sequence[str]) -> np.ndarray:
        return np.asarray(self.pipeline.predict(list(texts)))

    def predict(self, texts: Sequence[str]) -> np.ndarray:
        """Predict original category codes for a batch of texts."""
        return self.label_mapper.inverse_transform(self.predict_keys(texts))

    def predict_proba(self, texts: Sequence[str]) -> np.ndarray:
        """Class probabilities, columns ordered like ``classes``."""
        return np.asarray(self.pipeline.predict_proba(list(texts)))

    def to_keys(self, labels: Sequence[int]) -> np.ndarray:
        return self.label_mapper.transform(list(labels))
