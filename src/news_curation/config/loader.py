"""Read the curation service settings from YAML."""

from pathlib import Path

import yaml

from news_curation.config.models import CurationConfig


def load_config(path: Path | str) -> CurationConfig:
    """Build the service settings from a YAML file.

    Sections missing from the file (``app``, ``news``, ``agents``, ``tasks``,
    ``run_log``) keep their defaults, and an empty file gives the default
    settings.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        pydantic.ValidationError: If a target names an unknown country or
            language, or a value is out of range.
    """
    with Path(path).open() as f:
        raw = yaml.safe_load(f)
    return CurationConfig.model_validate(raw or {})


def get_default_config_path() -> Path:
    """Location of ``configs/default.yaml`` at the repository root."""
    return Path(__file__).parents[3] / "configs" / "default.yaml"
