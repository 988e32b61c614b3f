# tests/conftest.py
from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Sequence, Tuple

import pytest
from datasets import Dataset, DatasetDict  # type: ignore

from conformity_classifier.config import (
    AppConfig,
    ArtifactsConfig,
    DataConfig,
    RuntimeConfig,
    TrainingConfig,
)
from conformity_classifier.models.classifier import TrainedModel
from conformity_classifier.training.trainer import train_classification_model

Row = Tuple[int, str]

TRAIN_ROWS: List[Row] = [
    (1, "Электронный аукцион"),
    (2, "котировка"),
    (3, "Открытый конкурс"),
    (1, "Аукцион в электронной форме"),
    (2, "Запрос котировок"),
    (3, "Конкурс с ограниченным участием"),
    (1, "Открытый аукцион в электронной форме"),
    (2, "Запрос котировок в электронной форме"),
    (3, "Двухэтапный конкурс"),
    (1, "электронный аукцион"),
    (2, "Котировка цен"),
    (3, "Открытый конкурс в электронной форме"),
]

TEST_ROWS: List[Row] = [
    (1, "Электронный аукцион"),
    (2, "котировка"),
    (3, "Конкурс в электронной форме"),
    (1, "Аукцион"),
    (2, "Запрос котировок цен"),
]


def write_tsv(path: Path, rows: Sequence[Sequence[object]], header: str = "Con\tName") -> Path:
    """Write rows as a UTF-8 tab-separated file with a header line."""
    lines = [header] + ["\t".join(str(field) for field in row) for row in rows]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def tsv_writer(tmp_path: Path) -> Callable[..., Path]:
    def _write(name: str, rows: Sequence[Sequence[object]], header: str = "Con\tName") -> Path:
        return write_tsv(tmp_path / name, rows, header=header)

    return _write


@pytest.fixture
def data_cfg(tmp_path: Path) -> DataConfig:
    """DataConfig pointing at freshly written train/test files."""
    return DataConfig(
        train_path=write_tsv(tmp_path / "placing_way.tsv", TRAIN_ROWS),
        test_path=write_tsv(tmp_path / "placing_way_test.tsv", TEST_ROWS),
        cache_dir=tmp_path / "hf_cache",
    )


@pytest.fixture
def app_cfg(tmp_path: Path, data_cfg: DataConfig) -> AppConfig:
    """AppConfig writing all artifacts below tmp_path."""
    return AppConfig(
        runtime=RuntimeConfig(seed=0),
        data=data_cfg,
        training=TrainingConfig(inverse_regularization=10.0, max_iter=2000),
        artifacts=ArtifactsConfig(model_path=tmp_path / "Models" / "model.joblib"),
    )


@pytest.fixture
def train_rows() -> List[Row]:
    return list(TRAIN_ROWS)


@pytest.fixture
def holdout_rows() -> List[Row]:
    return list(TEST_ROWS)


def rows_to_dataset(rows: Sequence[Row]) -> Dataset:
    return Dataset.from_dict(
        {
            "label": [label for label, _ in rows],
            "text": [text for _, text in rows],
        }
    )


@pytest.fixture
def record_datasets() -> DatasetDict:
    """In-memory train/test splits with the default column names."""
    return DatasetDict(
        {
            "train": rows_to_dataset(TRAIN_ROWS),
            "test": rows_to_dataset(TEST_ROWS),
        }
    )


@pytest.fixture
def trained_model(app_cfg: AppConfig, record_datasets: DatasetDict) -> TrainedModel:
    return train_classification_model(app_cfg=app_cfg, datasets=record_datasets)
