from __future__ import annotations

import logging
import sys

import yaml
from pydantic import ValidationError

from nethealth.checks.http_check import get_http_probe
from nethealth.config import settings
from nethealth.formatting import Reporter, palette_for
from nethealth.ops_logic import EXIT_CONFIG_ERROR
from nethealth.registry import load_config
from nethealth.runner import run_once

logger = logging.getLogger(__name__)


def configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> int:
    configure_logging(settings.NETHEALTH_LOG_LEVEL)

    try:
        cfg = load_config()
        http_probe = get_http_probe(settings.NETHEALTH_HTTP_CLIENT)
    except (ValidationError, yaml.YAMLError, ValueError, OSError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return EXIT_CONFIG_ERROR

    stream = sys.stdout
    reporter = Reporter(stream, palette_for(settings.NETHEALTH_COLOR, stream))
    return run_once(cfg, reporter, http_probe=http_probe)
