# conformity_classifier/data/validation.py
from __future__ import annotations

from typing import Dict, Iterable, List

from datasets import Dataset, DatasetDict  # type: ignore
from pydantic import ValidationError

from conformity_classifier.config import DataConfig
from conformity_classifier.schemas import Record
from conformity_classifier.utils.logger import setup_logger

logger = setup_logger(__name__)


def _ensure_required_splits(ds: DatasetDict) -> None:
    """Ensure that required splits are present in the dataset.

    Raises:
        ValueError: If 'train' or 'test' splits are missing.
    """
    required_splits = ("train", "test")
    missing = [split for split in required_splits if split not in ds]

    if missing:
        raise ValueError(
            f"Missing required dataset splits: {missing}. "
            "Expected at least 'train' and 'test' splits in DatasetDict."
        )


def _ensure_required_columns(ds: Dataset, split_name: str, cfg: DataConfig) -> None:
    """Ensure that required columns exist in a given split.

    Raises:
        ValueError: If text or label columns are missing.
    """
    cols = ds.column_names

    missing_cols: List[str] = []
    if cfg.label_column not in cols:
        missing_cols.append(cfg.label_column)
    if cfg.text_column not in cols:
        missing_cols.append(cfg.text_column)

    if missing_cols:
        raise ValueError(
            f"Missing required columns in '{split_name}' split: {missing_cols}. "
            f"Available columns: {cols}"
        )


def _check_non_empty_split(ds: Dataset, split_name: str) -> None:
    """Ensure that a split contains at least one row."""
    n_rows = len(ds)
    if n_rows == 0:
        raise ValueError(f"Split '{split_name}' is empty. At least one row is required.")
    logger.info("Split '%s' contains %d rows.", split_name, n_rows)


def _ensure_complete_records(ds: Dataset, split_name: str, cfg: DataConfig) -> None:
    """Every row must supply the text.

    A short row leaves a null in the text column; training on it would
    silently produce a degenerate record, so it is rejected here. Files read
    by ``load_split`` never reach this point with a missing label: the int64
    label column makes the reader raise first. In-memory datasets can still
    carry null labels, which are rejected the same way.

    Raises:
        ValueError: Naming the first (1-based, header excluded) row at fault.
    """
    labels = list(ds[cfg.label_column])  # type: ignore[index]
    texts = list(ds[cfg.text_column])  # type: ignore[index]

    for row_number, (label, text) in enumerate(zip(labels, texts), start=1):
        try:
            Record(label=label, text=text)
        except ValidationError as exc:
            raise ValueError(
                f"Row {row_number} of '{split_name}' split is incomplete or malformed: "
                f"{exc.errors(include_url=False)}"
            ) from exc


def _compute_label_stats(labels: Iterable[int]) -> Dict[int, int]:
    """Compute frequency of each label in a split."""
    counts: Dict[int, int] = {}
    for lbl in labels:
        counts[lbl] = counts.get(lbl, 0) + 1
    return counts


def _validate_labels(train_ds: Dataset, cfg: DataConfig) -> None:
    """Validate label distribution in the training split.

    Checks:
        - At least 2 distinct classes.
        - Warns if label imbalance is extreme.
    """
    labels = list(train_ds[cfg.label_column])  # type: ignore[index]
    if not labels:
        raise ValueError("Training labels are empty.")

    label_counts = _compute_label_stats(labels)
    n_classes = len(label_counts)

    if n_classes < 2:
        raise ValueError(
            f"Training labels contain fewer than 2 classes. "
            f"Label counts: {label_counts}"
        )

    logger.info(
        "Training label distribution: %s",
        label_counts,
    )

    imbalance_ratio = max(label_counts.values()) / min(label_counts.values())
    if imbalance_ratio > 10.0:
        logger.warning(
            "Severe label imbalance detected in training set. "
            "Max/min ratio = %.2f. Label counts: %s",
            imbalance_ratio,
            label_counts,
        )


def ensure_known_labels(
    labels: Iterable[int],
    known_labels: Iterable[int],
    split_name: str,
) -> None:
    """Ensure every label of a split was seen at training time.

    Raises:
        ValueError: If the split contains labels outside ``known_labels``.
    """
    known = set(known_labels)
    unknown = sorted(set(labels) - known)
    if unknown:
        raise ValueError(
            f"Split '{split_name}' contains labels not present in training data: "
            f"{unknown}. Known labels: {sorted(known)}"
        )


def _validate_text_quality(ds: Dataset, split_name: str, cfg: DataConfig) -> None:
    """Perform basic text quality checks on the given split.

    Checks:
        - Warns if rows have empty/whitespace-only text.
        - Logs average text length in tokens (approx, by whitespace split).
    """
    texts = list(ds[cfg.text_column])  # type: ignore[index]
    n_rows = len(texts)

    if n_rows == 0:
        return

    empty_count = 0
    total_tokens = 0

    for text in texts:
        stripped = text.strip()
        if not stripped:
            empty_count += 1
            continue

        # Rough token count using whitespace
        total_tokens += len(stripped.split())

    if empty_count:
        logger.warning(
            "Split '%s' contains %d/%d (%.2f%%) empty text rows.",
            split_name,
            empty_count,
            n_rows,
            100.0 * empty_count / n_rows,
        )

    if total_tokens > 0:
        avg_tokens = total_tokens / max(1, (n_rows - empty_count))
        logger.info(
            "Split '%s' average text length (rough tokens): %.2f",
            split_name,
            avg_tokens,
        )


def validate_dataset(ds: DatasetDict, cfg: DataConfig) -> None:
    """Run structural and basic semantic validation on the dataset.

    This function is intended to be called once after ingestion and before
    training.

    It will:
        - Ensure required splits ('train', 'test') exist.
        - Ensure required columns (label & text) exist in each split.
        - Ensure splits are non-empty and no row has a missing field.
        - Validate label distribution in the training split.
        - Ensure test labels are a subset of training labels.
        - Perform basic text quality checks (empty texts, avg length logging).

    Raises:
        ValueError: If critical issues are found that should stop the pipeline.
    """
    logger.info("Starting dataset validation.")

    # 1) Check required splits
    _ensure_required_splits(ds)

    train_ds = ds["train"]
    test_ds = ds["test"]

    # 2) Check required columns for each split
    _ensure_required_columns(train_ds, "train", cfg)
    _ensure_required_columns(test_ds, "test", cfg)

    # 3) Check non-empty splits without missing fields
    _check_non_empty_split(train_ds, "train")
    _check_non_empty_split(test_ds, "test")
    _ensure_complete_records(train_ds, "train", cfg)
    _ensure_complete_records(test_ds, "test", cfg)

    # 4) Validate labels on training split, then test labels against it
    _validate_labels(train_ds, cfg)
    ensure_known_labels(
        test_ds[cfg.label_column],  # type: ignore[index]
        train_ds[cfg.label_column],  # type: ignore[index]
        split_name="test",
    )

    # 5) Text quality checks on both splits (logs + warnings only)
    _validate_text_quality(train_ds, "train", cfg)
    _validate_text_quality(test_ds, "test", cfg)

    logger.info("Dataset validation completed successfully.")
