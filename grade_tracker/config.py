"""
App configuration (YAML) and logging setup
"""

import copy
import logging
import os
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "GRADE_TRACKER_CONFIG"
STORE_ENV_VAR = "GRADE_TRACKER_STORE"
DEFAULT_CONFIG_FILE = "config.yaml"

DEFAULT_CONFIG = {
    "store": {
        "backend": "json",
        "collection": "courses",
        "project": None,
        "credentials_file": None,
        "data_file": "course_data.json",
    },
    "log_level": "INFO",
}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
HANDLER_NAME = "grade_tracker"


def load_config(config_file: Optional[str] = None) -> dict:
    """
    Read the YAML config on top of the defaults.

    The path comes from the argument, then $GRADE_TRACKER_CONFIG, then
    ./config.yaml. A missing file is not an error: the defaults run the
    tracker against a local JSON file.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    config_path = Path(config_file or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_FILE)

    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file {config_path} must contain a mapping")
        config["store"].update(loaded.get("store") or {})
        if loaded.get("log_level"):
            config["log_level"] = loaded["log_level"]
    else:
        logger.warning("Config file %s not found, using defaults", config_path)

    backend_override = os.environ.get(STORE_ENV_VAR)
    if backend_override:
        config["store"]["backend"] = backend_override

    return config


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    # Streamlit reruns the script; only install the handler once
    if not any(h.get_name() == HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.set_name(HANDLER_NAME)
        root.addHandler(handler)
    root.setLevel(str(level).upper())
