# tests/unit/test_validation.py
from __future__ import annotations

import pytest
from datasets import Dataset, DatasetDict  # type: ignore

from conformity_classifier.config import DataConfig
from conformity_classifier.data.validation import ensure_known_labels, validate_dataset


def _build_valid_dataset() -> DatasetDict:
    texts = ["Электронный аукцион", "котировка", "Открытый конкурс", "Запрос котировок"]
    labels = [1, 2, 3, 2]

    train = Dataset.from_dict({"label": labels, "text": texts})
    test = Dataset.from_dict({"label": labels[:2], "text": texts[:2]})

    return DatasetDict({"train": train, "test": test})


def test_validate_dataset_success_on_valid_data() -> None:
    """A valid dataset passes without raising."""
    validate_dataset(_build_valid_dataset(), DataConfig())


def test_validate_dataset_missing_test_split_raises() -> None:
    train = Dataset.from_dict({"label": [1, 2], "text": ["a", "b"]})
    ds = DatasetDict({"train": train})

    with pytest.raises(ValueError) as exc:
        validate_dataset(ds, DataConfig())

    assert "Missing required dataset splits" in str(exc.value)


def test_validate_dataset_missing_required_columns_raises() -> None:
    train = Dataset.from_dict({"label": [1, 2], "wrong_text": ["a", "b"]})
    ds = DatasetDict({"train": train, "test": train})

    with pytest.raises(ValueError) as exc:
        validate_dataset(ds, DataConfig())

    assert "Missing required columns" in str(exc.value)


def test_validate_dataset_empty_split_raises() -> None:
    ds = _build_valid_dataset()
    ds["test"] = ds["test"].select([])

    with pytest.raises(ValueError) as exc:
        validate_dataset(ds, DataConfig())

    assert "is empty" in str(exc.value)


def test_validate_dataset_row_with_missing_text_fails_fast() -> None:
    """A short row (label only) must not become a degenerate record."""
    train = Dataset.from_dict(
        {"label": [1, 2, 3], "text": ["аукцион", None, "конкурс"]}
    )
    test = Dataset.from_dict({"label": [1], "text": ["аукцион"]})
    ds = DatasetDict({"train": train, "test": test})

    with pytest.raises(ValueError) as exc:
        validate_dataset(ds, DataConfig())

    assert "Row 2 of 'train' split" in str(exc.value)


def test_validate_dataset_row_with_missing_label_fails_fast() -> None:
    train = Dataset.from_dict({"label": [1, 2], "text": ["аукцион", "котировка"]})
    test = Dataset.from_dict({"label": [None, 1], "text": ["конкурс", "аукцион"]})
    ds = DatasetDict({"train": train, "test": test})

    with pytest.raises(ValueError) as exc:
        validate_dataset(ds, DataConfig())

    assert "Row 1 of 'test' split" in str(exc.value)


def test_validate_dataset_single_class_labels_raises() -> None:
    train = Dataset.from_dict({"label": [1, 1, 1], "text": ["a", "b", "c"]})
    ds = DatasetDict({"train": train, "test": train})

    with pytest.raises(ValueError) as exc:
        validate_dataset(ds, DataConfig())

    assert "fewer than 2 classes" in str(exc.value)


def test_validate_dataset_unknown_test_label_raises() -> None:
    ds = _build_valid_dataset()
    ds["test"] = Dataset.from_dict({"label": [1, 9], "text": ["аукцион", "торги"]})

    with pytest.raises(ValueError) as exc:
        validate_dataset(ds, DataConfig())

    assert "[9]" in str(exc.value)


def test_ensure_known_labels_accepts_subset() -> None:
    ensure_known_labels([1, 1, 2], [1, 2, 3], split_name="test")
