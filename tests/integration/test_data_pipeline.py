# tests/integration/test_data_pipeline.py
from __future__ import annotations

from pathlib import Path

import pytest
from datasets import DatasetDict  # type: ignore
from datasets.exceptions import DatasetGenerationError  # type: ignore

from conformity_classifier.config import AppConfig
from conformity_classifier.data.pipeline import build_validated_datasets


def _with_train_file(app_cfg: AppConfig, path: Path) -> AppConfig:
    return app_cfg.model_copy(
        update={"data": app_cfg.data.model_copy(update={"train_path": path})}
    )


@pytest.mark.integration
def test_build_validated_datasets_end_to_end(app_cfg: AppConfig) -> None:
    """Files -> DatasetDict with both splits and the record schema."""
    ds = build_validated_datasets(app_cfg)

    assert isinstance(ds, DatasetDict)
    assert set(ds.keys()) == {"train", "test"}

    example = ds["train"][0]
    assert example == {"label": 1, "text": "Электронный аукцион"}


@pytest.mark.integration
def test_na_like_text_passes_validation(app_cfg: AppConfig, tsv_writer, train_rows) -> None:
    """A class whose only example is named "NA" is still trainable data."""
    path = tsv_writer("na_text.tsv", train_rows + [(4, "NA")])
    holdout = tsv_writer("na_text_test.tsv", [(4, "NA"), (1, "Электронный аукцион")])
    cfg = app_cfg.model_copy(
        update={
            "data": app_cfg.data.model_copy(
                update={"train_path": path, "test_path": holdout}
            )
        }
    )

    ds = build_validated_datasets(cfg)

    train = ds["train"]
    assert train[len(train) - 1] == {"label": 4, "text": "NA"}


@pytest.mark.integration
def test_short_row_in_file_fails_validation(app_cfg: AppConfig, tsv_writer) -> None:
    """A row with no text column stops the pipeline instead of training on it."""
    path = tsv_writer(
        "short_row.tsv",
        [(1, "Электронный аукцион"), (2,), (3, "Открытый конкурс")],
    )

    with pytest.raises(ValueError, match="Row 2 of 'train' split"):
        build_validated_datasets(_with_train_file(app_cfg, path))


@pytest.mark.integration
def test_non_integer_label_fails_in_reader(app_cfg: AppConfig, tsv_writer) -> None:
    path = tsv_writer(
        "bad_label.tsv",
        [(1, "Электронный аукцион"), ("котировка", "Запрос котировок")],
    )

    with pytest.raises(DatasetGenerationError):
        build_validated_datasets(_with_train_file(app_cfg, path))


@pytest.mark.integration
def test_empty_label_fails_in_reader(app_cfg: AppConfig, tsv_writer) -> None:
    path = tsv_writer(
        "empty_label.tsv",
        [(1, "Электронный аукцион"), ("", "Запрос котировок")],
    )

    with pytest.raises(DatasetGenerationError):
        build_validated_datasets(_with_train_file(app_cfg, path))


@pytest.mark.integration
def test_extra_column_fails_in_reader(app_cfg: AppConfig, tsv_writer) -> None:
    path = tsv_writer(
        "extra_column.tsv",
        [(1, "Электронный аукцион"), (2, "котировка", "лишнее поле"), (3, "Открытый конкурс")],
    )

    with pytest.raises(DatasetGenerationError):
        build_validated_datasets(_with_train_file(app_cfg, path))
