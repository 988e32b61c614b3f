# train.py

import argparse
from pathlib import Path

from conformity_classifier.config import AppConfig, load_app_config
from conformity_classifier.evaluation.reporting import format_metrics_report
from conformity_classifier.pipeline.prediction_pipeline import run_prediction_pipeline
from conformity_classifier.pipeline.training_pipeline import run_training_pipeline
from conformity_classifier.utils.logger import setup_logger

logger = setup_logger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments for the training entrypoint."""
    parser = argparse.ArgumentParser(
        description="Train the placing-way conformity classifier",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Optional YAML configuration file overriding the built-in defaults.",
    )
    parser.add_argument(
        "--predict",
        action="append",
        default=None,
        metavar="TEXT",
        help=(
            "Text to classify with the reloaded model. May be repeated. "
            "Defaults to inference.sample_texts from the configuration."
        ),
    )
    return parser.parse_args()


def main() -> None:
    """CLI entrypoint: train, evaluate, save, reload and predict."""
    args = parse_args()
    config_path = Path(args.config) if args.config else None

    logger.info(
        "Loading application configuration",
        extra={"config_path": str(config_path) if config_path else None},
    )

    app_cfg: AppConfig = load_app_config(config_path)

    result = run_training_pipeline(app_cfg)

    print(
        f"Single prediction just-trained-model - "
        f"{app_cfg.inference.smoke_text!r}: {result['smoke_prediction'].predicted_label}"
    )
    print(f"The model is saved to {result['model_path']}")
    print(format_metrics_report(result["metrics"]))

    for text, prediction in run_prediction_pipeline(app_cfg, args.predict):
        print(f"Single prediction - {text!r}: {prediction.predicted_label}")


if __name__ == "__main__":
    main()
