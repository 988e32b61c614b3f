# conformity_classifier/data/feature_engineering.py
from __future__ import annotations

from typing import Iterable

from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.pipeline import FeatureUnion, Pipeline
from sklearn.preprocessing import FunctionTransformer, LabelEncoder

from conformity_classifier.config import ModelConfig
from conformity_classifier.data.preprocessing import normalize_texts
from conformity_classifier.utils.logger import setup_logger

logger = setup_logger(__name__)


def build_text_featurizer(model_cfg: ModelConfig) -> Pipeline:
    """Build the transformer turning raw text into a numeric feature vector.

    The featurizer:
        - Normalizes the raw text (see ``clean_text``).
        - Extracts L2-normalized TF-IDF word n-grams.
        - Extracts L2-normalized TF-IDF character n-grams inside word
          boundaries, which copes with Russian inflection.
        - Concatenates both blocks into one sparse feature vector.

    Args:
        model_cfg: Featurizer configuration.

    Returns:
        An unfitted sklearn Pipeline accepting a sequence of strings.
    """
    logger.info(
        "Building text featurizer.",
        extra={
            "word_ngram_range": list(model_cfg.word_ngram_range),
            "char_ngram_range": list(model_cfg.char_ngram_range),
            "max_features": model_cfg.max_features,
        },
    )

    word_vectorizer = TfidfVectorizer(
        analyzer="word",
        lowercase=model_cfg.lowercase,
        ngram_range=tuple(model_cfg.word_ngram_range),
        sublinear_tf=model_cfg.sublinear_tf,
        max_features=model_cfg.max_features,
    )
    char_vectorizer = TfidfVectorizer(
        analyzer="char_wb",
        lowercase=model_cfg.lowercase,
        ngram_range=tuple(model_cfg.char_ngram_range),
        sublinear_tf=model_cfg.sublinear_tf,
        max_features=model_cfg.max_features,
    )

    return Pipeline(
        [
            ("normalize", FunctionTransformer(normalize_texts)),
            (
                "features",
                FeatureUnion(
                    [
                        ("word_ngrams", word_vectorizer),
                        ("char_ngrams", char_vectorizer),
                    ]
                ),
            ),
        ]
    )


def fit_label_mapper(labels: Iterable[int]) -> LabelEncoder:
    """Fit the value-to-key mapping of the categorical label.

    Keys are ``0..n_classes-1`` in ascending order of the original label
    codes; ``inverse_transform`` maps predicted keys back to the codes.
    """
    mapper = LabelEncoder()
    mapper.fit(list(labels))

    logger.info(
        "Label key mapping fitted.",
        extra={"classes": [int(c) for c in mapper.classes_]},
    )
    return mapper
