from typing import Any, Dict

from datasets import DatasetDict

from conformity_classifier.config import AppConfig
from conformity_classifier.data.pipeline import build_validated_datasets
from conformity_classifier.evaluation.metrics import evaluate_model
from conformity_classifier.evaluation.reporting import save_report_to_json
from conformity_classifier.models.persistence import save_model
from conformity_classifier.models.predictor import TextPredictor
from conformity_classifier.training.trainer import train_classification_model
from conformity_classifier.utils.logger import setup_logger

logger = setup_logger(__name__)


def run_training_pipeline(app_cfg: AppConfig) -> Dict[str, Any]:
    """Run the full training pipeline.

    This function orchestrates the following steps:
        1. Load and validate the train/test files (data pipeline).
        2. Train the classification model.
        3. Predict ``inference.smoke_text`` with the just-trained model.
        4. Save the model to ``artifacts.model_path``.
        5. Evaluate on the test split, optionally writing a JSON report.

    Args:
        app_cfg: Application configuration.

    Returns:
        A dictionary with:
            - model: the fitted ``TrainedModel``.
            - model_path: where the model was saved.
            - smoke_prediction: ``Prediction`` for the smoke text.
            - evaluation: output of ``evaluate_model``.
            - metrics: shortcut to ``evaluation["metrics"]``.
    """
    logger.info("Starting training pipeline")

    # 1) Data
    datasets: DatasetDict = build_validated_datasets(app_cfg)

    # 2) Training
    model = train_classification_model(app_cfg=app_cfg, datasets=datasets)

    # 3) Single prediction with the just-trained model
    smoke_prediction = TextPredictor(model).predict(app_cfg.inference.smoke_text)
    logger.info(
        "Single prediction with just-trained model",
        extra={
            "text": app_cfg.inference.smoke_text,
            "predicted_label": smoke_prediction.predicted_label,
        },
    )

    # 4) Persistence
    model_path = save_model(model, app_cfg.artifacts.model_path)

    # 5) Evaluation
    evaluation = evaluate_model(model, datasets["test"], app_cfg.data)
    if app_cfg.artifacts.report_path is not None:
        save_report_to_json(evaluation, app_cfg.artifacts.report_path)
        logger.info(
            "Evaluation report saved",
            extra={"report_path": str(app_cfg.artifacts.report_path)},
        )

    logger.info(
        "Training pipeline completed",
        extra={"metrics": evaluation["metrics"]},
    )

    return {
        "model": model,
        "model_path": model_path,
        "smoke_prediction": smoke_prediction,
        "evaluation": evaluation,
        "metrics": evaluation["metrics"],
    }
