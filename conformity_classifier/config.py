from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, List, Optional, Tuple

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# ============================
# Runtime & Data Config
# ============================


class RuntimeConfig(BaseModel):
    """Runtime-related settings for the current run."""

    seed: int = Field(
        0,
        ge=0,
        description="Global random seed for reproducibility.",
    )


class DataConfig(BaseModel):
    """Dataset-related configuration."""

    train_path: Path = Field(
        Path("Data") / "placing_way.tsv",
        description="Training file, relative to the current working directory.",
    )
    test_path: Path = Field(
        Path("Data") / "placing_way_test.tsv",
        description="Held-out test file, relative to the current working directory.",
    )
    label_column: str = Field(
        "label",
        description="Name given to the first column (integer category code).",
    )
    text_column: str = Field(
        "text",
        description="Name given to the second column (free text).",
    )
    delimiter: str = Field(
        "\t",
        min_length=1,
        max_length=1,
        description="Column delimiter of the input files.",
    )
    encoding: str = Field(
        "utf-8",
        description="Text encoding of the input files.",
    )
    has_header: bool = Field(
        True,
        description="Whether the first line of each file is a header row.",
    )
    cache_dir: Optional[Path] = Field(
        None,
        description="Cache directory for `datasets`. Defaults to <artifacts_dir>/hf_cache.",
    )


class ModelConfig(BaseModel):
    """Configuration of the text featurizer."""

    lowercase: bool = Field(
        True,
        description="Lowercase text before extracting n-grams.",
    )
    word_ngram_range: Tuple[int, int] = Field(
        (1, 2),
        description="Min/max n for word n-grams.",
    )
    char_ngram_range: Tuple[int, int] = Field(
        (1, 3),
        description="Min/max n for character n-grams (within word boundaries).",
    )
    sublinear_tf: bool = Field(
        False,
        description="Use 1 + log(tf) instead of raw term frequency.",
    )
    max_features: Optional[int] = Field(
        None,
        ge=1,
        description="Optional cap on the vocabulary size of each n-gram block.",
    )

    @field_validator("word_ngram_range", "char_ngram_range")
    @classmethod
    def _check_ngram_range(cls, value: Tuple[int, int]) -> Tuple[int, int]:
        low, high = value
        if low < 1 or high < low:
            raise ValueError(f"Invalid n-gram range: {value}")
        return value


class TrainingConfig(BaseModel):
    """Configuration for the multiclass linear trainer."""

    inverse_regularization: float = Field(
        1.0,
        gt=0.0,
        description="Inverse of the L2 regularization strength (sklearn's C).",
    )
    max_iter: int = Field(
        1000,
        ge=1,
        description="Maximum number of passes over the training data.",
    )
    tol: float = Field(
        1e-4,
        gt=0.0,
        description="Stopping tolerance of the solver.",
    )
    checkpoint_dir: Optional[Path] = Field(
        None,
        description="Optional directory used to cache the fitted featurizer between runs.",
    )


class InferenceConfig(BaseModel):
    """Texts classified after training."""

    smoke_text: str = Field(
        "Электронный аукцион",
        description="Text predicted with the just-trained model before it is saved.",
    )
    sample_texts: List[str] = Field(
        default_factory=lambda: ["котировка"],
        description="Texts predicted with the model reloaded from disk.",
    )


class ArtifactsConfig(BaseModel):
    """Where the run writes its outputs."""

    model_path: Path = Field(
        Path("Models") / "model.joblib",
        description="Serialized model, overwritten on each training run.",
    )
    report_path: Optional[Path] = Field(
        None,
        description="Optional JSON evaluation report.",
    )


class AppConfig(BaseModel):
    """Top-level application configuration."""

    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
    data: DataConfig = Field(default_factory=DataConfig)
    model: ModelConfig = Field(default_factory=ModelConfig)
    training: TrainingConfig = Field(default_factory=TrainingConfig)
    inference: InferenceConfig = Field(default_factory=InferenceConfig)
    artifacts: ArtifactsConfig = Field(default_factory=ArtifactsConfig)


# ============================
# Settings (paths, env) – infra-level
# ============================


class Settings(BaseSettings):
    """Application settings not tied to a specific run config.

    These are mostly paths and the logging level.
    """

    log_level: str = "INFO"

    # Relative to the current working directory, like the data and model paths.
    configs_dir: Path = Path("configs")
    artifacts_dir: Path = Path("artifacts")

    model_config = SettingsConfigDict(
        env_prefix="CONFORMITY_",
        env_file=".env",
        env_file_encoding="utf-8",
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()


# ============================
# Loader
# ============================


def load_app_config(config_path: str | Path | None = None) -> AppConfig:
    """Load application configuration from a YAML file.

    Every section is optional and falls back to its defaults:
        - runtime
        - data
        - model
        - training
        - inference
        - artifacts

    Args:
        config_path: Path to the YAML file. If None, the built-in defaults
            are returned.

    Raises:
        FileNotFoundError: If ``config_path`` is given but does not exist.
    """
    if config_path is None:
        return AppConfig()

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        raw: dict[str, Any] = yaml.safe_load(f) or {}

    return AppConfig(
        runtime=RuntimeConfig(**(raw.get("runtime") or {})),
        data=DataConfig(**(raw.get("data") or {})),
        model=ModelConfig(**(raw.get("model") or {})),
        training=TrainingConfig(**(raw.get("training") or {})),
        inference=InferenceConfig(**(raw.get("inference") or {})),
        artifacts=ArtifactsConfig(**(raw.get("artifacts") or {})),
    )
