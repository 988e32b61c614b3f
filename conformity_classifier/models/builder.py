from sklearn.linear_model import LogisticRegression
from sklearn.pipeline import Pipeline

from conformity_classifier.config import ModelConfig, TrainingConfig
from conformity_classifier.data.feature_engineering import build_text_featurizer
from conformity_classifier.utils.logger import setup_logger

logger = setup_logger(__name__)


def build_classification_model(
    training_cfg: TrainingConfig,
    *,
    seed: int,
) -> LogisticRegression:
    """Build the multiclass linear classifier.

    The model is a multinomial (softmax) logistic regression with L2
    regularization, optimized by SAGA, a stochastic averaged-gradient solver
    that like SDCA converges linearly on this objective. It outputs
    calibrated class probabilities, which the log-loss metrics rely on.

    Args:
        training_cfg: Solver settings (regularization, iterations, tolerance).
        seed: Random state of the solver's sampling order.

    Returns:
        An unfitted ``LogisticRegression`` instance.
    """
    logger.info(
        "Building classifier",
        extra={
            "solver": "saga",
            "C": training_cfg.inverse_regularization,
            "max_iter": training_cfg.max_iter,
            "seed": seed,
        },
    )

    return LogisticRegression(
        solver="saga",
        C=training_cfg.inverse_regularization,
        max_iter=training_cfg.max_iter,
        tol=training_cfg.tol,
        random_state=seed,
    )


def build_training_pipeline(
    model_cfg: ModelConfig,
    training_cfg: TrainingConfig,
    *,
    seed: int,
) -> Pipeline:
    """Chain the text featurizer and the classifier.

    When ``training_cfg.checkpoint_dir`` is set, the fitted featurizer is
    cached there so repeated fits on the same data skip featurization.

    Args:
        model_cfg: Featurizer configuration.
        training_cfg: Classifier configuration.
        seed: Random seed forwarded to the classifier.

    Returns:
        An unfitted sklearn Pipeline with 'featurize' and 'classifier' steps.
    """
    checkpoint_dir = training_cfg.checkpoint_dir
    if checkpoint_dir is not None:
        checkpoint_dir.mkdir(parents=True, exist_ok=True)

    return Pipeline(
        [
            ("featurize", build_text_featurizer(model_cfg)),
            ("classifier", build_classification_model(training_cfg, seed=seed)),
        ],
        memory=str(checkpoint_dir) if checkpoint_dir is not None else None,
    )
