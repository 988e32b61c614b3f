# conformity_classifier/data/ingestion.py
from __future__ import annotations

import csv
from pathlib import Path

from datasets import Dataset, DatasetDict, Features, Value, load_dataset  # type: ignore

from conformity_classifier.config import DataConfig, get_settings
from conformity_classifier.utils.logger import setup_logger

logger = setup_logger(__name__)


def build_record_features(cfg: DataConfig) -> Features:
    """Schema of one record: integer label first, text second."""
    return Features(
        {
            cfg.label_column: Value("int64"),
            cfg.text_column: Value("string"),
        }
    )


def _resolve_cache_dir(cfg: DataConfig) -> Path:
    if cfg.cache_dir is not None:
        return cfg.cache_dir
    return get_settings().artifacts_dir / "hf_cache"


def load_split(path: str | Path, cfg: DataConfig, split_name: str = "train") -> Dataset:
    """Load one delimited file as a Dataset with the record schema.

    Columns are read by position: whatever the header says, the first column
    becomes ``cfg.label_column`` and the second ``cfg.text_column``. Quoting
    is disabled so quote characters inside the text are kept literally, and
    only empty cells count as missing.

    Args:
        path: Path to the delimited file.
        cfg: DataConfig with column names, delimiter, encoding and header flag.
        split_name: Name of the split for logging purposes.

    Returns:
        A Dataset with exactly the label and text columns.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise FileNotFoundError(f"Data file not found: {file_path}")

    logger.info(
        "Loading %s split.",
        split_name,
        extra={"path": str(file_path), "encoding": cfg.encoding},
    )

    split = load_dataset(
        "csv",
        data_files=str(file_path),
        split="train",
        delimiter=cfg.delimiter,
        column_names=[cfg.label_column, cfg.text_column],
        header=0 if cfg.has_header else None,
        encoding=cfg.encoding,
        quoting=csv.QUOTE_NONE,
        # Only empty cells are missing; names like "NA" or "null" are text.
        keep_default_na=False,
        na_values=[""],
        features=build_record_features(cfg),
        cache_dir=str(_resolve_cache_dir(cfg)),
    )

    logger.info(
        "Split %s loaded.",
        split_name,
        extra={"rows": len(split)},
    )
    return split


def load_raw_dataset(cfg: DataConfig) -> DatasetDict:
    """Load the training and test files into a DatasetDict.

    Args:
        cfg: DataConfig instance with file paths and record schema.

    Returns:
        A DatasetDict with 'train' and 'test' splits.
    """
    logger.info(
        "Loading dataset.",
        extra={
            "train_path": str(cfg.train_path),
            "test_path": str(cfg.test_path),
        },
    )

    raw_ds = DatasetDict(
        {
            "train": load_split(cfg.train_path, cfg, split_name="train"),
            "test": load_split(cfg.test_path, cfg, split_name="test"),
        }
    )

    logger.info(
        "Dataset loaded successfully.",
        extra={
            "train_size": len(raw_ds["train"]),
            "test_size": len(raw_ds["test"]),
        },
    )

    return raw_ds
