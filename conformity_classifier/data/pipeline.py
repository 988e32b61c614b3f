# conformity_classifier/data/pipeline.py
from __future__ import annotations

from datasets import DatasetDict  # type: ignore

from conformity_classifier.config import AppConfig
from conformity_classifier.data.ingestion import load_raw_dataset
from conformity_classifier.data.validation import validate_dataset
from conformity_classifier.utils.logger import setup_logger

logger = setup_logger(__name__)


def build_validated_datasets(config: AppConfig) -> DatasetDict:
    """Data pipeline (files → validated records).

    Steps:
        1. Ingestion  : Load the train and test files as a DatasetDict.
        2. Validation : Run structural & basic semantic checks.

    Text normalization and featurization are part of the model pipeline so
    that a reloaded model applies them to new inputs as well.

    Args:
        config: AppConfig containing the data config.

    Returns:
        DatasetDict with 'train' and 'test' splits ready for training.
    """
    data_cfg = config.data

    logger.info("Starting data pipeline.")

    # 1) Ingestion
    raw_ds = load_raw_dataset(data_cfg)

    # 2) Validation
    validate_dataset(raw_ds, data_cfg)

    logger.info(
        "Data pipeline completed.",
        extra={"splits": list(raw_ds.keys())},
    )

    return raw_ds
