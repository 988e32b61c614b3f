from typing import Any, Dict, List

import numpy as np
from datasets import Dataset
from sklearn.metrics import accuracy_score, log_loss, recall_score

from conformity_classifier.config import DataConfig
from conformity_classifier.data.validation import ensure_known_labels
from conformity_classifier.evaluation.reporting import (
    build_classification_report,
    build_confusion_matrix,
)
from conformity_classifier.models.classifier import TrainedModel
from conformity_classifier.utils.logger import setup_logger

logger = setup_logger(__name__)

# Probabilities are clipped to [_EPS, 1 - _EPS] before taking logs.
_EPS = 1e-15


def _check_shapes(probabilities: np.ndarray, labels: np.ndarray) -> None:
    if probabilities.ndim != 2:
        raise ValueError(
            f"Expected probabilities to have shape (num_samples, num_classes), "
            f"but got shape {probabilities.shape}."
        )

    if labels.ndim != 1:
        raise ValueError(
            f"Expected labels to have shape (num_samples,), but got shape {labels.shape}."
        )

    if probabilities.shape[0] != labels.shape[0]:
        raise ValueError(
            "Number of samples in probabilities and labels must match. "
            f"Got {probabilities.shape[0]} rows and {labels.shape[0]} labels."
        )

    if probabilities.shape[0] == 0:
        raise ValueError("Cannot compute metrics on an empty set.")

    if labels.min() < 0 or labels.max() >= probabilities.shape[1]:
        raise ValueError(
            f"Label keys must lie in [0, {probabilities.shape[1]}), "
            f"got range [{labels.min()}, {labels.max()}]."
        )


def prior_log_loss(labels: np.ndarray, num_classes: int) -> float:
    """Log-loss of a predictor that always outputs the label frequencies.

    This is the entropy (natural log) of the empirical label distribution.
    """
    counts = np.bincount(labels, minlength=num_classes).astype(float)
    freqs = counts[counts > 0] / counts.sum()
    return float(-(freqs * np.log(freqs)).sum())


def compute_classification_metrics(
    probabilities: np.ndarray,
    labels: np.ndarray,
) -> Dict[str, float]:
    """Compute multiclass metrics given class probabilities and label keys.

    Args:
        probabilities: Array of shape (num_samples, num_classes); column ``k``
            is the probability of key ``k``.
        labels: Array of ground-truth keys. Shape: (num_samples,).

    Returns:
        Dictionary containing:
            - micro_accuracy: Fraction of correctly classified rows.
            - macro_accuracy: Mean per-class accuracy over classes present
              in ``labels``.
            - log_loss: Mean negative log-probability of the true class.
            - log_loss_reduction: ``1 - log_loss / prior_log_loss``; NaN when
              ``labels`` holds a single class (the prior is then 0).

    Raises:
        ValueError: If the shapes of probabilities and labels are incompatible.
    """
    probabilities = np.asarray(probabilities, dtype=float)
    labels = np.asarray(labels, dtype=int)
    _check_shapes(probabilities, labels)

    num_classes = probabilities.shape[1]
    preds = np.argmax(probabilities, axis=-1)
    present = np.unique(labels)

    micro_accuracy = float(accuracy_score(labels, preds))
    macro_accuracy = float(
        recall_score(
            labels,
            preds,
            labels=present,
            average="macro",
            zero_division=0,
        )
    )

    clipped = np.clip(probabilities, _EPS, 1.0 - _EPS)
    clipped = clipped / clipped.sum(axis=1, keepdims=True)
    loss = float(log_loss(labels, clipped, labels=list(range(num_classes))))

    prior = prior_log_loss(labels, num_classes)
    reduction = 1.0 - loss / prior if prior > 0.0 else float("nan")

    return {
        "micro_accuracy": micro_accuracy,
        "macro_accuracy": macro_accuracy,
        "log_loss": loss,
        "log_loss_reduction": float(reduction),
    }


def compute_per_class_log_loss(
    probabilities: np.ndarray,
    labels: np.ndarray,
) -> Dict[int, float]:
    """Mean log-loss of the rows of each key present in ``labels``."""
    probabilities = np.asarray(probabilities, dtype=float)
    labels = np.asarray(labels, dtype=int)
    _check_shapes(probabilities, labels)

    true_probs = np.clip(probabilities[np.arange(len(labels)), labels], _EPS, 1.0)
    losses = -np.log(true_probs)

    return {
        int(key): float(losses[labels == key].mean())
        for key in np.unique(labels)
    }


def evaluate_model(
    model: TrainedModel,
    dataset: Dataset,
    data_cfg: DataConfig,
) -> Dict[str, Any]:
    """Run a trained model over a labelled dataset and summarize its quality.

    Args:
        model: Fitted model.
        dataset: Held-out dataset with the label and text columns.
        data_cfg: Column names.

    Returns:
        Dictionary with:
            - metrics: output of :func:`compute_classification_metrics`.
            - per_class_log_loss: original label code -> mean log-loss.
            - classification_report: per-class precision/recall/f1.
            - confusion_matrix: counts, rows/columns ordered like ``labels``.

    Raises:
        ValueError: If the dataset holds labels unknown to the model.
    """
    texts: List[str] = list(dataset[data_cfg.text_column])
    labels: List[int] = [int(v) for v in dataset[data_cfg.label_column]]

    ensure_known_labels(labels, model.classes, split_name="evaluation")

    logger.info("Evaluating model.", extra={"rows": len(texts)})

    keys = model.to_keys(labels)
    probabilities = model.predict_proba(texts)

    metrics = compute_classification_metrics(probabilities, keys)
    per_class_keys = compute_per_class_log_loss(probabilities, keys)
    classes = model.classes

    predicted = [classes[k] for k in np.argmax(probabilities, axis=-1)]
    report_labels = sorted(set(labels) | set(predicted))

    result: Dict[str, Any] = {
        "metrics": metrics,
        "per_class_log_loss": {
            classes[key]: value for key, value in per_class_keys.items()
        },
        "classification_report": build_classification_report(labels, predicted),
        "confusion_matrix": {
            "labels": report_labels,
            **build_confusion_matrix(labels, predicted, labels=report_labels),
        },
    }

    logger.info("Evaluation finished.", extra={"metrics": metrics})
    return result
