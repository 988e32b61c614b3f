# conformity_classifier/models/persistence.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import joblib
import sklearn

from conformity_classifier.models.classifier import TrainedModel
from conformity_classifier.utils.logger import setup_logger

logger = setup_logger(__name__)

FORMAT_VERSION = 1


def save_model(model: TrainedModel, path: str | Path) -> Path:
    """Serialize a trained model to ``path``, overwriting existing content.

    The artifact records the format version and the scikit-learn version
    that produced it so that ``load_model`` can refuse incompatible files.

    Args:
        model: Fitted model to persist.
        path: Destination file. Parent directories are created.

    Returns:
        The path written to.
    """
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    payload: Dict[str, Any] = {
        "format_version": FORMAT_VERSION,
        "sklearn_version": sklearn.__version__,
        "model": model,
    }

    with output_path.open("wb") as f:
        joblib.dump(payload, f)

    logger.info("The model is saved.", extra={"model_path": str(output_path)})
    return output_path


def load_model(path: str | Path) -> TrainedModel:
    """Load a model written by :func:`save_model`.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the file is not a model artifact, or was written with
            another format version or scikit-learn version.
    """
    input_path = Path(path)
    if not input_path.is_file():
        raise FileNotFoundError(f"Model file not found: {input_path}")

    with input_path.open("rb") as f:
        payload = joblib.load(f)

    if not isinstance(payload, dict) or "model" not in payload:
        raise ValueError(f"File is not a model artifact: {input_path}")

    format_version = payload.get("format_version")
    if format_version != FORMAT_VERSION:
        raise ValueError(
            f"Unsupported model format version {format_version!r} in {input_path}; "
            f"expected {FORMAT_VERSION}."
        )

    saved_version = payload.get("sklearn_version")
    if saved_version != sklearn.__version__:
        raise ValueError(
            f"Model {input_path} was saved with scikit-learn {saved_version}, "
            f"but scikit-learn {sklearn.__version__} is installed. Retrain the model."
        )

    model = payload["model"]
    if not isinstance(model, TrainedModel):
        raise ValueError(
            f"Unexpected model type {type(model).__name__} in {input_path}."
        )

    logger.info(
        "Model loaded.",
        extra={"model_path": str(input_path), "classes": model.classes},
    )
    return model
