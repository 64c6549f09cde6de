from __future__ import annotations

import logging
from pathlib import Path

import yaml

from nethealth.config import settings
from nethealth.models import HealthConfig

logger = logging.getLogger(__name__)


def load_config(path: Path | str | None = None) -> HealthConfig:
    """
    Load target configuration from YAML, falling back to built-in defaults
    when the file does not exist. Invalid content raises.
    """
    path = Path(path or settings.NETHEALTH_CONFIG)
    if not path.exists():
        logger.debug("No config at %s, using built-in targets", path)
        return HealthConfig()

    data = yaml.safe_load(path.read_text()) or {}
    cfg = HealthConfig.model_validate(data)

    # Duplicate targets would be probed twice for no gain
    if len(set(cfg.ping.targets)) != len(cfg.ping.targets):
        raise ValueError(f"Duplicate ping target in {path}")
    urls = [str(u) for u in cfg.http.targets]
    if len(set(urls)) != len(urls):
        raise ValueError(f"Duplicate HTTP target in {path}")

    logger.debug("Loaded config from %s", path)
    return cfg
