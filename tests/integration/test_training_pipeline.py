# tests/integration/test_training_pipeline.py
import pytest

from conformity_classifier.config import AppConfig
from conformity_classifier.models.persistence import load_model
from conformity_classifier.pipeline.prediction_pipeline import run_prediction_pipeline
from conformity_classifier.pipeline.training_pipeline import run_training_pipeline


@pytest.mark.integration
def test_training_pipeline_end_to_end(app_cfg: AppConfig) -> None:
    """Files -> trained model -> saved artifact -> metrics."""
    result = run_training_pipeline(app_cfg)

    assert result["model_path"] == app_cfg.artifacts.model_path
    assert app_cfg.artifacts.model_path.is_file()
    assert result["smoke_prediction"].predicted_label == 1

    metrics = result["metrics"]
    assert 0.0 <= metrics["micro_accuracy"] <= 1.0
    assert 0.0 <= metrics["macro_accuracy"] <= 1.0
    assert metrics["log_loss"] >= 0.0


@pytest.mark.integration
def test_reloaded_model_predicts_like_trained_model(app_cfg: AppConfig) -> None:
    """Save/load round trip keeps predictions identical."""
    result = run_training_pipeline(app_cfg)
    texts = ["Электронный аукцион", "котировка", "Открытый конкурс", "торги"]

    reloaded = load_model(result["model_path"])

    assert list(reloaded.predict(texts)) == list(result["model"].predict(texts))


@pytest.mark.integration
def test_cyrillic_scenario(app_cfg: AppConfig) -> None:
    """Fresh model labels the auction as 1; the reloaded model labels the quotation as 2."""
    result = run_training_pipeline(app_cfg)

    assert result["smoke_prediction"].predicted_label == 1

    [(text, prediction)] = run_prediction_pipeline(app_cfg)
    assert text == "котировка"
    assert prediction.predicted_label == 2


@pytest.mark.integration
def test_same_seed_gives_same_metrics(app_cfg: AppConfig) -> None:
    first = run_training_pipeline(app_cfg)["metrics"]
    second = run_training_pipeline(app_cfg)["metrics"]

    for key in ("micro_accuracy", "macro_accuracy", "log_loss", "log_loss_reduction"):
        assert first[key] == pytest.approx(second[key])


@pytest.mark.integration
def test_report_written_when_configured(app_cfg: AppConfig, tmp_path) -> None:
    report_path = tmp_path / "reports" / "evaluation.json"
    cfg = app_cfg.model_copy(
        update={"artifacts": app_cfg.artifacts.model_copy(update={"report_path": report_path})}
    )

    run_training_pipeline(cfg)

    assert report_path.is_file()


@pytest.mark.integration
def test_prediction_pipeline_without_model_fails(app_cfg: AppConfig) -> None:
    with pytest.raises(FileNotFoundError):
        run_prediction_pipeline(app_cfg, ["котировка"])
