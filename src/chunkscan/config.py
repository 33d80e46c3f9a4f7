"""Load analysis options from YAML or JSON files."""

import json
import logging
import os
from pathlib import Path

import yaml

from chunkscan.errors import ConfigError
from chunkscan.models import AnalysisOptions

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "CHUNKSCAN_CONFIG"


def _read_mapping(path: Path) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot parse config {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e

    # An empty YAML document means "all defaults"
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a mapping at the top level")
    return data


def load_options(path: str | Path | None = None) -> AnalysisOptions:
    """Load AnalysisOptions from a config file.

    Args:
        path: YAML (.yaml/.yml) or JSON (.json) file. Defaults to the file
            named by $CHUNKSCAN_CONFIG; with neither, the defaults are used.

    Returns:
        Validated AnalysisOptions

    Raises:
        ConfigError: if the file is missing, unparsable or invalid
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or None
    if path is None:
        return AnalysisOptions()

    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug(f"Loading options from {path}")
    return AnalysisOptions.from_mapping(_read_mapping(path))
