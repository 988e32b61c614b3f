# conformity_classifier/evaluation/reporting.py

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from sklearn.metrics import classification_report, confusion_matrix

_RULE = "*" * 100


def build_classification_report(
    y_true: List[int],
    y_pred: List[int],
    label_names: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Build a detailed classification report.

    Wraps scikit-learn's ``classification_report`` and returns a dictionary
    that can be serialized to JSON or logged.

    Args:
        y_true: Ground truth category codes.
        y_pred: Predicted category codes.
        label_names: Optional list of human-readable names for each label. If
            provided, its length must match the number of unique labels.

    Returns:
        A dictionary containing per-class precision, recall, f1-score, and
        support, as well as aggregated metrics such as accuracy, macro avg,
        and weighted avg.

    Raises:
        ValueError: If the lengths of ``y_true`` and ``y_pred`` do not match.
    """
    if len(y_true) != len(y_pred):
        raise ValueError(
            f"Length mismatch between y_true ({len(y_true)}) and "
            f"y_pred ({len(y_pred)})."
        )

    return classification_report(
        y_true,
        y_pred,
        target_names=label_names,
        output_dict=True,
        zero_division=0,
    )


def build_confusion_matrix(
    y_true: List[int],
    y_pred: List[int],
    *,
    labels: Optional[List[int]] = None,
    normalize: Optional[str] = None,
) -> Dict[str, Any]:
    """Compute a confusion matrix.

    Args:
        y_true: Ground truth category codes.
        y_pred: Predicted category codes.
        labels: Optional order of rows/columns. Defaults to the sorted union
            of both inputs.
        normalize: ``None`` (counts), ``'true'``, ``'pred'``, or ``'all'``,
            as defined by scikit-learn.

    Returns:
        A dictionary with:
            - ``"matrix"``: 2D list representing the confusion matrix.
            - ``"normalize"``: Normalization mode used.
    """
    if len(y_true) != len(y_pred):
        raise ValueError(
            f"Length mismatch between y_true ({len(y_true)}) and "
            f"y_pred ({len(y_pred)})."
        )

    cm = confusion_matrix(y_true, y_pred, labels=labels, normalize=normalize)
    return {
        "matrix": cm.tolist(),
        "normalize": normalize,
    }


def _format_metric(value: float) -> str:
    if math.isnan(value):
        return "n/a"
    return f"{value:.3f}"


def format_metrics_report(metrics: Mapping[str, float], title: str = "Test Data") -> str:
    """Render aggregate metrics as the human-readable console box."""
    lines = [
        _RULE,
        f"*       Metrics for Multi-class Classification model - {title}",
        "*" + "-" * 99,
        f"*       MicroAccuracy:    {_format_metric(metrics['micro_accuracy'])}",
        f"*       MacroAccuracy:    {_format_metric(metrics['macro_accuracy'])}",
        f"*       LogLoss:          {_format_metric(metrics['log_loss'])}",
        f"*       LogLossReduction: {_format_metric(metrics['log_loss_reduction'])}",
        _RULE,
    ]
    return "\n".join(lines)


def save_report_to_json(report: Dict[str, Any], path: str | Path) -> None:
    """Save an evaluation summary to a JSON file.

    Args:
        report: Dictionary containing evaluation results, typically the
            output of ``evaluate_model``.
        path: Destination path for the JSON file.
    """
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", encoding="utf-8") as f:
        json.dump(report, f, indent=2, ensure_ascii=False)
