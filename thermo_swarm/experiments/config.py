"""
experiments/config.py

Experiment definitions from YAML.

A file maps experiment names to ExperimentConfig fields:

    fixed:
      title: Fixed Distribution
      start_cooling: {kind: fixed, value: 1.0}
      stop_cooling: {kind: fixed, value: 0.5}
      delay: 3
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Dict, Optional, Union

import yaml

from .example import ExperimentConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "configs" / "experiments.yaml"


def parse_experiments(raw: Optional[dict]) -> Dict[str, ExperimentConfig]:
    """Turn a loaded YAML mapping into named ExperimentConfigs."""
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(
            f"Experiment file must map names to settings, got {type(raw).__name__}"
        )

    experiments = {}
    for name, settings in raw.items():
        settings = dict(settings or {})
        settings.setdefault("title", str(name))
        try:
            experiments[str(name)] = ExperimentConfig.from_dict(settings)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid experiment {name!r}: {e}") from e
    return experiments


def load_experiments(
    config_path: Optional[Union[str, Path]] = None
) -> Dict[str, ExperimentConfig]:
    """Load experiment configurations from a YAML file."""
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    with open(config_path) as f:
        raw = yaml.safe_load(f)

    experiments = parse_experiments(raw)
    logger.debug("Loaded %d experiments from %s", len(experiments), config_path)
    return experiments
