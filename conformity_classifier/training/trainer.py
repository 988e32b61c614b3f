# conformity_classifier/training/trainer.py

import warnings
from datetime import datetime
from typing import List

from datasets import Dataset, DatasetDict
from sklearn.exceptions import ConvergenceWarning

from conformity_classifier.config import AppConfig
from conformity_classifier.data.feature_engineering import fit_label_mapper
from conformity_classifier.models.builder import build_training_pipeline
from conformity_classifier.models.classifier import TrainedModel
from conformity_classifier.utils.logger import setup_logger
from conformity_classifier.utils.seed import set_global_seed

logger = setup_logger(__name__)


def infer_num_labels(train_dataset: Dataset, label_column: str) -> int:
    """Infer the number of labels from the training dataset.

    Args:
        train_dataset: Training dataset containing the label column.
        label_column: Name of the label column.

    Returns:
        The number of distinct labels.

    Raises:
        KeyError: If the dataset does not contain the label column.
        ValueError: If fewer than two distinct labels are present.
    """
    if label_column not in train_dataset.column_names:
        raise KeyError(f"Training dataset must contain a '{label_column}' column.")

    unique_labels = set(int(label) for label in train_dataset[label_column])
    num_labels = len(unique_labels)

    if num_labels < 2:
        raise ValueError(
            "Could not infer a valid number of labels from the training dataset."
        )

    return num_labels


def train_classification_model(
    app_cfg: AppConfig,
    datasets: DatasetDict,
) -> TrainedModel:
    """Fit the text classification pipeline on the 'train' split.

    Steps:
        1. Map label codes to internal keys.
        2. Fit featurizer and classifier on the texts and keys.

    Args:
        app_cfg: Application configuration (runtime, data, model, training).
        datasets: Validated datasets containing at least a 'train' split.

    Returns:
        The fitted model.
    """
    if "train" not in datasets:
        raise KeyError("Datasets must contain a 'train' split.")

    data_cfg = app_cfg.data
    train_dataset = datasets["train"]

    num_labels = infer_num_labels(train_dataset, data_cfg.label_column)
    logger.info(
        "Inferred number of labels from dataset",
        extra={"num_labels": num_labels},
    )

    set_global_seed(app_cfg.runtime.seed)

    texts: List[str] = list(train_dataset[data_cfg.text_column])
    labels: List[int] = [int(v) for v in train_dataset[data_cfg.label_column]]

    label_mapper = fit_label_mapper(labels)
    keys = label_mapper.transform(labels)

    pipeline = build_training_pipeline(
        app_cfg.model,
        app_cfg.training,
        seed=app_cfg.runtime.seed,
    )

    logger.info(
        "Training the model",
        extra={"rows": len(texts), "started_at": datetime.now().isoformat()},
    )
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", ConvergenceWarning)
        pipeline.fit(texts, keys)

    for warning in caught:
        if issubclass(warning.category, ConvergenceWarning):
            logger.warning(
                "Solver did not converge; consider raising training.max_iter.",
                extra={"max_iter": app_cfg.training.max_iter},
            )
        else:
            warnings.warn(warning.message, warning.category, stacklevel=2)

    logger.info(
        "Finished training the model",
        extra={"finished_at": datetime.now().isoformat()},
    )

    return TrainedModel(pipeline=pipeline, label_mapper=label_mapper)
