from typing import List, Optional, Sequence, Tuple

from conformity_classifier.config import AppConfig
from conformity_classifier.models.predictor import TextPredictor
from conformity_classifier.schemas import Prediction
from conformity_classifier.utils.logger import setup_logger

logger = setup_logger(__name__)


def run_prediction_pipeline(
    app_cfg: AppConfig,
    texts: Optional[Sequence[str]] = None,
) -> List[Tuple[str, Prediction]]:
    """Reload the saved model from disk and classify texts with it.

    Args:
        app_cfg: Application configuration (``artifacts.model_path``).
        texts: Texts to classify. Defaults to ``inference.sample_texts``.

    Returns:
        ``(text, prediction)`` pairs in input order.
    """
    resolved_texts = list(texts) if texts is not None else list(app_cfg.inference.sample_texts)

    predictor = TextPredictor.from_file(app_cfg.artifacts.model_path)
    predictions = predictor.predict_many(resolved_texts)

    for text, prediction in zip(resolved_texts, predictions):
        logger.info(
            "Single prediction with reloaded model",
            extra={"text": text, "predicted_label": prediction.predicted_label},
        )

    return list(zip(resolved_texts, predictions))
